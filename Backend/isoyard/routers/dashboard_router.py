from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from isoyard.database import get_db
from isoyard.models.inventory_model import InventoryItem
from isoyard.models.log_model import LogEntry
from isoyard.models.registry_model import RegistryItem
from isoyard.models.user_model import User
from isoyard.models.zone_model import Zone
from isoyard.security import get_current_user
from isoyard.services.dashboard import build_dashboard
from isoyard.utils import success_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard")
def get_dashboard(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Totals, today's movements, per-zone occupancy and the five newest log rows"""
    zones = db.query(Zone).order_by(Zone.id).all()
    inventory = db.query(InventoryItem).all()
    logs = db.query(LogEntry).all()
    return success_resp("Dashboard fetched successfully", build_dashboard(zones, inventory, logs))


@router.get("/yard/snapshot")
def get_snapshot(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Everything the client keeps in memory; polled by the UI for silent refresh"""
    data = {
        "zones": [z.as_dict() for z in db.query(Zone).order_by(Zone.id).all()],
        "inventory": [i.as_dict() for i in db.query(InventoryItem).all()],
        "logs": [l.as_dict() for l in db.query(LogEntry).order_by(LogEntry.id.desc()).all()],
        "registry": [r.as_dict() for r in db.query(RegistryItem).all()],
    }
    return success_resp("Snapshot fetched successfully", data)
