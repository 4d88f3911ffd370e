from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional
import logging

from isoyard.database import get_db
from isoyard.models.log_model import LogEntry, LOG_ACTIONS
from isoyard.models.user_model import User
from isoyard.schemas.yard import LogUpdate
from isoyard.security import get_current_user, require_super
from isoyard.services.log_view import filter_logs, paginate, logs_to_csv, logs_to_xlsx, export_filename
from isoyard.utils import success_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/logs", tags=["logs"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _filtered(db: Session, q: Optional[str]):
    return filter_logs(db.query(LogEntry).all(), q or "")


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("")
def search_logs(
    q: Optional[str] = Query(None, description="Case-insensitive keyword"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Newest first, keyword-filtered, paginated movement log"""
    result = paginate(_filtered(db, q), page, page_size)
    result["items"] = [l.as_dict() for l in result["items"]]
    return success_resp("Logs fetched successfully", result)


@router.get("/export")
def export_logs_csv(q: Optional[str] = Query(None), db: Session = Depends(get_db),
                    user: User = Depends(get_current_user)):
    rows = _filtered(db, q)
    logger.info("User %s exported %d log rows to CSV", user.id, len(rows))
    return Response(
        content=logs_to_csv(rows).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers=_attachment(export_filename("csv")),
    )


@router.get("/export-to-excel")
def export_logs_excel(q: Optional[str] = Query(None), db: Session = Depends(get_db),
                      user: User = Depends(get_current_user)):
    rows = _filtered(db, q)
    logger.info("User %s exported %d log rows to Excel", user.id, len(rows))
    return Response(
        content=logs_to_xlsx(rows),
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment(export_filename("xlsx")),
    )


@router.put("/{log_id}")
def edit_log(log_id: int, body: LogUpdate, db: Session = Depends(get_db), user: User = Depends(require_super)):
    entry = db.query(LogEntry).filter(LogEntry.id == log_id).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Log entry not found")

    changes = body.model_dump(exclude_unset=True)
    if "action" in changes and changes["action"] not in LOG_ACTIONS:
        raise HTTPException(status_code=400, detail=f"Action must be one of: {', '.join(LOG_ACTIONS)}")
    if "tank" in changes:
        tank = (changes["tank"] or "").strip().upper()
        if not tank:
            raise HTTPException(status_code=400, detail="Tank number cannot be empty")
        changes["tank"] = tank
    if changes.get("time") is not None and changes["time"].tzinfo is not None:
        changes["time"] = changes["time"].astimezone().replace(tzinfo=None)
    if "time" in changes and changes["time"] is None:
        raise HTTPException(status_code=400, detail="Log time cannot be empty")

    for field, value in changes.items():
        setattr(entry, field, value)
    db.commit()
    logger.info("Log %s edited by %s: %s", log_id, user.id, sorted(changes))
    return success_resp("Log entry updated", entry.as_dict())


@router.delete("/{log_id}")
def delete_log(log_id: int, db: Session = Depends(get_db), user: User = Depends(require_super)):
    entry = db.query(LogEntry).filter(LogEntry.id == log_id).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Log entry not found")
    summary = f"{entry.tank} {entry.action}"
    db.delete(entry)
    db.commit()
    logger.info("Log %s (%s) deleted by %s", log_id, summary, user.id)
    return success_resp("Log entry deleted", {"id": log_id})
