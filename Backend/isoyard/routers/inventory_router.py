from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from isoyard.database import get_db
from isoyard.models.inventory_model import InventoryItem
from isoyard.models.user_model import User, ROLE_OP
from isoyard.schemas.yard import GateInRequest
from isoyard.security import get_current_user, require_role
from isoyard.services.gate import gate_in, gate_out
from isoyard.utils import success_resp, error_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/inventory", tags=["inventory"])

require_op = require_role(ROLE_OP)


@router.get("")
def list_inventory(zone: Optional[str] = Query(None), db: Session = Depends(get_db),
                   user: User = Depends(get_current_user)):
    query = db.query(InventoryItem)
    if zone:
        query = query.filter(InventoryItem.zone_id == zone)
    items = query.order_by(InventoryItem.time.desc()).all()
    return success_resp("Inventory fetched successfully", [i.as_dict() for i in items])


@router.post("/gate-in")
def gate_in_tank(body: GateInRequest, db: Session = Depends(get_db), user: User = Depends(require_op)):
    """
    Record a tank arriving at (or moving within) the yard. The log action is
    進場 for a new tank, 更新 for the same zone and 移區 for a different zone.
    """
    try:
        result = gate_in(db, body, user.id)
        return success_resp(f"Tank {result['tank']} processed ({result['action']})", result)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Gate-in failed for %s", body.id)
        return error_resp(f"Write failed: {str(e)}", 500)


@router.delete("/{tank_id}")
def gate_out_tank(tank_id: str, db: Session = Depends(get_db), user: User = Depends(require_op)):
    try:
        result = gate_out(db, tank_id, user.id)
        return success_resp(f"Tank {result['tank']} has left the yard", result)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Gate-out failed for %s", tank_id)
        return error_resp(f"Write failed: {str(e)}", 500)
