# tests/test_equipments.py
import pytest

from conftest import equipment_payload


class TestEquipmentCrud:

    def test_create_returns_stored_record(self, client, headers):
        response = client.post("/api/equipment", json=equipment_payload(), headers=headers["supervisor"])
        assert response.status_code == 201
        body = response.json()
        assert body["_id"]
        assert body["name"] == "Hydraulic Press"
        assert body["status"] == "operational"
        assert body["lastMaintenanceDate"] is None
        assert body["nextMaintenanceDate"].startswith("2030-01-15")
        assert body["createdAt"] and body["updatedAt"]

    def test_status_defaults_to_operational(self, client, headers):
        payload = equipment_payload()
        del payload["status"]
        response = client.post("/api/equipment", json=payload, headers=headers["manager"])
        assert response.json()["status"] == "operational"

    def test_next_maintenance_date_is_required(self, client, headers):
        payload = equipment_payload()
        del payload["nextMaintenanceDate"]
        response = client.post("/api/equipment", json=payload, headers=headers["manager"])
        assert response.status_code == 500
        assert "nextMaintenanceDate" in response.json()["message"]

    def test_empty_name_is_rejected(self, client, headers):
        response = client.post("/api/equipment", json=equipment_payload(name=""), headers=headers["manager"])
        assert response.status_code == 500

    def test_unknown_status_is_rejected(self, client, headers):
        response = client.post("/api/equipment", json=equipment_payload(status="exploded"), headers=headers["manager"])
        assert response.status_code == 500

    def test_list_is_newest_first(self, client, headers, make_equipment):
        first = make_equipment(name="Old Lathe")
        second = make_equipment(name="New Mill")
        listed = client.get("/api/equipment", headers=headers["technician"]).json()
        assert [e["_id"] for e in listed] == [second["_id"], first["_id"]]

    def test_get_one(self, client, headers, make_equipment):
        created = make_equipment()
        response = client.get(f"/api/equipment/{created['_id']}", headers=headers["technician"])
        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing(self, client, headers):
        response = client.get("/api/equipment/000000000000", headers=headers["technician"])
        assert response.status_code == 404
        assert response.json() == {"message": "Equipment not found"}

    def test_update_merges_supplied_fields(self, client, headers, make_equipment):
        created = make_equipment()
        response = client.put(
            f"/api/equipment/{created['_id']}",
            json={"status": "broken", "lastMaintenanceDate": "2029-12-01T00:00:00Z"},
            headers=headers["supervisor"],
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "broken"
        assert body["lastMaintenanceDate"].startswith("2029-12-01")
        assert body["name"] == created["name"]
        assert body["createdAt"] == created["createdAt"]

    def test_any_status_transition_is_allowed(self, client, headers, make_equipment):
        created = make_equipment(status="broken")
        for status in ("operational", "maintenance", "broken", "operational"):
            response = client.put(f"/api/equipment/{created['_id']}", json={"status": status}, headers=headers["manager"])
            assert response.json()["status"] == status

    def test_update_cannot_clear_required_field(self, client, headers, make_equipment):
        created = make_equipment()
        response = client.put(
            f"/api/equipment/{created['_id']}", json={"nextMaintenanceDate": None}, headers=headers["manager"]
        )
        assert response.status_code == 500
        assert "next_maintenance_date is required" in response.json()["message"]

    def test_update_missing(self, client, headers):
        response = client.put("/api/equipment/missing", json={"status": "broken"}, headers=headers["manager"])
        assert response.status_code == 404
        assert response.json() == {"message": "Equipment not found"}

    def test_delete(self, client, headers, make_equipment):
        created = make_equipment()
        response = client.delete(f"/api/equipment/{created['_id']}", headers=headers["manager"])
        assert response.status_code == 200
        assert response.json() == {"message": "Equipment deleted successfully"}
        assert client.get(f"/api/equipment/{created['_id']}", headers=headers["manager"]).status_code == 404

    def test_delete_missing(self, client, headers):
        response = client.delete("/api/equipment/missing", headers=headers["manager"])
        assert response.status_code == 404

    def test_repeated_list_is_identical(self, client, headers, make_equipment):
        make_equipment(name="A")
        make_equipment(name="B", lastMaintenanceDate="2029-01-01T08:30:00Z")
        first = client.get("/api/equipment", headers=headers["technician"])
        second = client.get("/api/equipment", headers=headers["technician"])
        assert first.content == second.content


class TestEquipmentRoles:

    @pytest.mark.parametrize("role,expected", [
        ("technician", 403),
        ("supervisor", 201),
        ("manager", 201),
    ])
    def test_create(self, client, headers, role, expected):
        response = client.post("/api/equipment", json=equipment_payload(), headers=headers[role])
        assert response.status_code == expected

    @pytest.mark.parametrize("role,expected", [
        ("technician", 403),
        ("supervisor", 200),
        ("manager", 200),
    ])
    def test_update(self, client, headers, make_equipment, role, expected):
        created = make_equipment()
        response = client.put(f"/api/equipment/{created['_id']}", json={"status": "maintenance"}, headers=headers[role])
        assert response.status_code == expected

    @pytest.mark.parametrize("role,expected", [
        ("technician", 403),
        ("supervisor", 403),
        ("manager", 200),
    ])
    def test_delete(self, client, headers, make_equipment, role, expected):
        created = make_equipment()
        response = client.delete(f"/api/equipment/{created['_id']}", headers=headers[role])
        assert response.status_code == expected

    def test_forbidden_body(self, client, headers):
        response = client.post("/api/equipment", json=equipment_payload(), headers=headers["technician"])
        assert response.json() == {"message": "Access denied. Insufficient permissions."}

    @pytest.mark.parametrize("role", ["technician", "supervisor", "manager"])
    def test_everyone_reads(self, client, headers, role):
        assert client.get("/api/equipment", headers=headers[role]).status_code == 200
