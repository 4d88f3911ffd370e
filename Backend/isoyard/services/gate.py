"""
Gate operations: gate-in (entry / update / zone transfer), gate-out and the
weight-maintenance registry.

Each function stages its writes on the given session and commits once; the
caller rolls back on failure.
"""
from datetime import datetime
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from isoyard.config import ENFORCE_ZONE_CAPACITY
from isoyard.models.inventory_model import InventoryItem
from isoyard.models.log_model import (
    LogEntry, ACTION_ENTRY, ACTION_EXIT, ACTION_TRANSFER, ACTION_UPDATE,
)
from isoyard.models.registry_model import RegistryItem
from isoyard.models.zone_model import Zone
from isoyard.services.weights import parse_weight, compute_net
from isoyard.utils import fmt_time

logger = logging.getLogger(__name__)

WEIGHED_ACTIONS = (ACTION_ENTRY, ACTION_TRANSFER, ACTION_UPDATE)


def normalize_tank_id(raw) -> str:
    tank_id = (raw or "").strip().upper()
    if not tank_id:
        raise HTTPException(status_code=400, detail="Tank id is required")
    return tank_id


def _local_time(value):
    if value is None:
        return datetime.now().replace(microsecond=0)
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def classify_action(existing, zone_id: str) -> str:
    """進場 when the tank is not in the yard, 更新 when it stays in its zone, 移區 otherwise."""
    if existing is None:
        return ACTION_ENTRY
    if existing.zone_id == zone_id:
        return ACTION_UPDATE
    return ACTION_TRANSFER


def _zone_label(db: Session, zone_id: str) -> str:
    zone = db.query(Zone).filter(Zone.id == zone_id).first()
    return zone.name if zone else zone_id


def upsert_registry(db: Session, tank_id: str, empty, content, total, head) -> RegistryItem:
    item = db.query(RegistryItem).filter(RegistryItem.id == tank_id).first()
    if item is None:
        item = RegistryItem(id=tank_id)
        db.add(item)
    item.empty = empty
    item.content = content
    item.last_total = total
    item.last_head = head
    return item


def gate_in(db: Session, body, user_id: str) -> dict:
    tank_id = normalize_tank_id(body.id)

    zone = db.query(Zone).filter(Zone.id == body.zone).first()
    if zone is None:
        raise HTTPException(status_code=404, detail=f"Zone {body.zone} not found")

    total = parse_weight(body.total_weight)
    head = parse_weight(body.head_weight)
    empty = parse_weight(body.empty_weight)
    net = compute_net(total, head, empty)
    when = _local_time(body.custom_time)
    content = body.content or ""

    existing = db.query(InventoryItem).filter(InventoryItem.id == tank_id).first()
    action = classify_action(existing, zone.id)

    if ENFORCE_ZONE_CAPACITY and action != ACTION_UPDATE:
        occupied = db.query(InventoryItem).filter(InventoryItem.zone_id == zone.id).count()
        if occupied >= (zone.capacity or 0):
            raise HTTPException(status_code=409, detail=f"Zone {zone.name} is full ({occupied}/{zone.capacity})")

    if empty:
        upsert_registry(db, tank_id, empty, content, total, head)

    if existing is None:
        existing = InventoryItem(id=tank_id)
        db.add(existing)
    existing.content = content
    existing.zone_id = zone.id
    existing.weight = net
    existing.time = when
    existing.remark = body.remark or ""
    existing.slot = body.slot

    db.add(LogEntry(
        time=when,
        tank=tank_id,
        action=action,
        zone=zone.name,
        user=user_id or "Unknown",
        content=content,
        weight=net,
        total=total,
        head=head,
        empty=empty,
        remark=body.remark or "",
        slot=body.slot,
    ))
    db.commit()

    logger.info("Gate-in %s -> %s (%s) net=%s by %s", tank_id, zone.id, action, net, user_id)
    return {"tank": tank_id, "action": action, "zone": zone.id, "net_weight": net}


def gate_out(db: Session, tank_id: str, user_id: str) -> dict:
    tank_id = normalize_tank_id(tank_id)
    tank = db.query(InventoryItem).filter(InventoryItem.id == tank_id).first()
    if tank is None:
        raise HTTPException(status_code=404, detail=f"Tank {tank_id} not found in yard")

    zone_id = tank.zone_id
    zone_name = _zone_label(db, zone_id)
    db.delete(tank)
    db.add(LogEntry(
        time=datetime.now().replace(microsecond=0),
        tank=tank_id,
        action=ACTION_EXIT,
        zone=zone_name,
        user=user_id,
        content=tank.content,
        weight=tank.weight,
        remark="",
        slot=tank.slot,
    ))
    db.commit()

    logger.info("Gate-out %s from %s by %s", tank_id, zone_id, user_id)
    return {"tank": tank_id, "action": ACTION_EXIT, "zone": zone_id}


def tank_maintenance(db: Session, tank_id: str) -> dict:
    """Pre-fill data for the entry form: remembered weights plus the tank's history."""
    tank_id = normalize_tank_id(tank_id)
    reg = db.query(RegistryItem).filter(RegistryItem.id == tank_id).first()
    logs = (
        db.query(LogEntry)
        .filter(LogEntry.tank == tank_id)
        .order_by(LogEntry.id.desc())
        .all()
    )

    last_net = next((l.weight for l in logs if l.action in WEIGHED_ACTIONS), None)
    last_total = next((l.total for l in logs if l.total), 0)
    last_head = next((l.head for l in logs if l.head), 0)
    last_empty = next((l.empty for l in logs if l.empty), None)

    tank = {
        "id": tank_id,
        "empty": (reg.empty if reg and reg.empty else last_empty),
        "content": (reg.content if reg else "") or "",
        "last_net": last_net,
        "last_total": (reg.last_total if reg and reg.last_total else last_total),
        "last_head": (reg.last_head if reg and reg.last_head else last_head),
    }

    location = None
    current = db.query(InventoryItem).filter(InventoryItem.id == tank_id).first()
    if current is not None:
        location = {
            "zone": current.zone_id,
            "zone_name": _zone_label(db, current.zone_id),
            "slot": current.slot or "",
            "since": fmt_time(current.time),
        }

    history = [
        {"date": fmt_time(l.time).split(" ")[0], "net": l.weight, "action": l.action}
        for l in logs
    ]
    return {"tank": tank, "location": location, "history": history}


def update_registry(db: Session, tank_id: str, body, user_id: str) -> dict:
    tank_id = normalize_tank_id(tank_id)
    empty = parse_weight(body.empty)
    total = parse_weight(body.total)
    head = parse_weight(body.head)
    content = body.content or ""

    upsert_registry(db, tank_id, empty, content, total, head)

    result = {"tank": tank_id, "in_yard": False, "net_weight": None}
    active = db.query(InventoryItem).filter(InventoryItem.id == tank_id).first()
    if active is not None:
        net = compute_net(total, head, empty)
        active.content = content
        active.weight = net
        active.remark = body.remark or active.remark
        db.add(LogEntry(
            time=datetime.now().replace(microsecond=0),
            tank=tank_id,
            action=ACTION_UPDATE,
            zone=_zone_label(db, active.zone_id),
            user=user_id,
            content=content,
            weight=net,
            total=total,
            head=head,
            empty=empty,
            remark=body.remark or "",
            slot=active.slot,
        ))
        result.update(in_yard=True, net_weight=net)
    db.commit()

    logger.info("Registry updated for %s by %s (in yard: %s)", tank_id, user_id, result["in_yard"])
    return result
