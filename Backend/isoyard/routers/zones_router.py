from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
import logging

from isoyard.config import DEFAULT_ZONE_CAPACITY
from isoyard.database import get_db
from isoyard.models.inventory_model import InventoryItem
from isoyard.models.user_model import User, ROLE_ADMIN
from isoyard.models.zone_model import Zone
from isoyard.schemas.yard import ZoneIn, ZoneListSave
from isoyard.security import get_current_user, require_role
from isoyard.services.dashboard import zone_summary, zone_slots
from isoyard.utils import success_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/zones", tags=["zones"])

require_admin = require_role(ROLE_ADMIN)


def _clean(zone: ZoneIn) -> ZoneIn:
    zone_id = zone.id.strip()
    if not zone_id:
        raise HTTPException(status_code=400, detail="Zone id is required")
    capacity = zone.capacity if zone.capacity is not None else DEFAULT_ZONE_CAPACITY
    return ZoneIn(id=zone_id, name=zone.name.strip() or zone_id, capacity=capacity)


def _get_zone_or_404(db: Session, zone_id: str) -> Zone:
    zone = db.query(Zone).filter(Zone.id == zone_id).first()
    if not zone:
        raise HTTPException(status_code=404, detail=f"Zone {zone_id} not found")
    return zone


@router.get("")
def list_zones(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    zones = db.query(Zone).order_by(Zone.id).all()
    return success_resp("Zones fetched successfully", [z.as_dict() for z in zones])


@router.put("")
def save_zones(body: ZoneListSave, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """
    Save the whole zone configuration: every zone in the list is created or
    updated, zones missing from the list are deleted. Tanks standing in a
    deleted zone stay in inventory.
    """
    cleaned = [_clean(z) for z in body.zones]
    ids = [z.id for z in cleaned]
    if len(ids) != len(set(ids)):
        raise HTTPException(status_code=400, detail="Zone ids must be unique")

    existing = {z.id: z for z in db.query(Zone).all()}
    for z in cleaned:
        row = existing.get(z.id)
        if row is None:
            db.add(Zone(id=z.id, name=z.name, capacity=z.capacity))
        else:
            row.name = z.name
            row.capacity = z.capacity
    removed = [zid for zid in existing if zid not in ids]
    for zid in removed:
        db.delete(existing[zid])
    db.commit()

    logger.info("Zone settings saved by %s: %d zones, removed %s", admin.id, len(cleaned), removed)
    zones = db.query(Zone).order_by(Zone.id).all()
    return success_resp("Zone settings saved", [z.as_dict() for z in zones])


@router.post("", status_code=201)
def create_zone(body: ZoneIn, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    z = _clean(body)
    if db.query(Zone).filter(Zone.id == z.id).first():
        raise HTTPException(status_code=409, detail=f"Zone {z.id} already exists")
    zone = Zone(id=z.id, name=z.name, capacity=z.capacity)
    db.add(zone)
    db.commit()
    logger.info("Zone %s created by %s", z.id, admin.id)
    return success_resp("Zone created", zone.as_dict(), 201)


@router.get("/{zone_id}")
def get_zone(zone_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """One zone with its tanks and utilization"""
    zone = _get_zone_or_404(db, zone_id)
    tanks = db.query(InventoryItem).filter(InventoryItem.zone_id == zone.id).all()
    return success_resp("Zone fetched successfully", zone_summary(zone, tanks))


@router.get("/{zone_id}/slots")
def get_zone_slots(zone_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    zone = _get_zone_or_404(db, zone_id)
    tanks = db.query(InventoryItem).filter(InventoryItem.zone_id == zone.id).all()
    return success_resp("Slots fetched successfully", zone_slots(zone, tanks))


@router.delete("/{zone_id}")
def delete_zone(zone_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    zone = _get_zone_or_404(db, zone_id)
    db.delete(zone)
    db.commit()
    logger.info("Zone %s deleted by %s", zone_id, admin.id)
    return success_resp("Zone deleted", {"id": zone_id})
