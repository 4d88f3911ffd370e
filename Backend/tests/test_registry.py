from isoyard.models.inventory_model import InventoryItem
from isoyard.models.log_model import LogEntry
from isoyard.models.registry_model import RegistryItem

from conftest import gate_in


def test_lookup_unknown_tank(client, op_headers):
    data = client.get("/api/registry/tnku9999999", headers=op_headers).json()["data"]
    assert data["tank"]["id"] == "TNKU9999999"
    assert data["tank"]["last_net"] is None
    assert data["location"] is None
    assert data["history"] == []


def test_lookup_prefills_from_registry_and_history(client, op_headers, zones):
    gate_in(client, op_headers, custom_time="2024-05-01T08:30", slot="A區-1")
    gate_in(client, op_headers, zone="Z-02", total_weight=27000, custom_time="2024-05-02T09:00")

    data = client.get("/api/registry/TNKU1234567", headers=op_headers).json()["data"]
    assert data["tank"]["empty"] == 3500
    assert data["tank"]["content"] == "ACETONE"
    assert data["tank"]["last_net"] == 23500
    assert data["tank"]["last_total"] == 27000
    assert data["location"]["zone"] == "Z-02"
    assert data["location"]["zone_name"] == "B區"
    assert data["history"] == [
        {"date": "2024-05-02", "net": 23500, "action": "移區"},
        {"date": "2024-05-01", "net": 24500, "action": "進場"},
    ]


def test_update_registry_for_tank_in_yard(client, op_headers, zones, db):
    gate_in(client, op_headers)
    res = client.put("/api/registry/TNKU1234567", headers=op_headers,
                     json={"empty": 3600, "content": "ETHANOL", "total": 28000, "head": 400})
    assert res.status_code == 200
    assert res.json()["data"] == {"tank": "TNKU1234567", "in_yard": True, "net_weight": 24000}

    tank = db.query(InventoryItem).one()
    assert tank.content == "ETHANOL"
    assert tank.weight == 24000
    last = db.query(LogEntry).order_by(LogEntry.id.desc()).first()
    assert last.action == "更新"
    assert last.zone == "A區"
    assert db.query(RegistryItem).one().empty == 3600


def test_update_registry_for_tank_outside_yard(client, op_headers, db):
    res = client.put("/api/registry/TNKU5555555", headers=op_headers, json={"empty": 3400, "content": "WATER"})
    assert res.json()["data"]["in_yard"] is False
    assert db.query(RegistryItem).one().empty == 3400
    assert db.query(LogEntry).count() == 0


def test_viewer_cannot_update_registry(client, view_headers):
    res = client.put("/api/registry/TNKU5555555", headers=view_headers, json={"empty": 3400})
    assert res.status_code == 403
