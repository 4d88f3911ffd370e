"""
Read-side projections for the yard overview. Nothing here is persisted.
"""
from collections import OrderedDict
from datetime import date
from typing import List, Optional

from isoyard.models.log_model import ACTION_ENTRY, ACTION_EXIT
from isoyard.services.log_view import sort_logs


def occupancy(count: int, capacity: Optional[int]) -> int:
    if not capacity:
        return 0
    return round(count / capacity * 100)


def zone_summary(zone, tanks: List) -> dict:
    return {
        **zone.as_dict(),
        "count": len(tanks),
        "occupancy": occupancy(len(tanks), zone.capacity),
        "tanks": [t.as_dict() for t in sorted(tanks, key=lambda t: t.time, reverse=True)],
    }


def group_by_zone(zones: List, inventory: List):
    """Return (zone_id -> tanks) for known zones and the list of tanks whose zone is gone."""
    groups = OrderedDict((z.id, []) for z in zones)
    unassigned = []
    for item in inventory:
        if item.zone_id in groups:
            groups[item.zone_id].append(item)
        else:
            unassigned.append(item)
    return groups, unassigned


def build_dashboard(zones: List, inventory: List, logs: List, today: Optional[date] = None) -> dict:
    today = today or date.today()
    groups, unassigned = group_by_zone(zones, inventory)

    in_today = sum(1 for l in logs if l.action == ACTION_ENTRY and l.time and l.time.date() == today)
    out_today = sum(1 for l in logs if l.action == ACTION_EXIT and l.time and l.time.date() == today)
    total_capacity = sum(z.capacity or 0 for z in zones)

    return {
        "total_tanks": len(inventory),
        "in_today": in_today,
        "out_today": out_today,
        "total_capacity": total_capacity,
        "occupancy": occupancy(len(inventory), total_capacity),
        "zones": [zone_summary(z, groups[z.id]) for z in zones],
        "unassigned": [t.as_dict() for t in unassigned],
        "recent_logs": [l.as_dict() for l in sort_logs(logs)[:5]],
    }


def zone_slots(zone, tanks: List) -> List[dict]:
    """Slot labels <zone name>-1 .. <zone name>-<capacity> and which tank sits in each."""
    by_slot = {t.slot: t.id for t in tanks if t.slot}
    labels = [f"{zone.name}-{i}" for i in range(1, (zone.capacity or 0) + 1)]
    return [{"slot": label, "tank": by_slot.get(label)} for label in labels]
