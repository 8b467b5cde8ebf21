# tests/test_api.py
"""HTTP surface: envelopes, status codes, auth guards."""

from decimal import Decimal

import pytest

from app.utils.security import create_access_token


OWNER_A = {
    "firstName": "Aline", "lastName": "Uwase", "email": "aline@mail.rw",
    "phoneNumber": "0781111111", "nationalId": "1199880012345678",
}
OWNER_B = {
    "firstName": "Eric", "lastName": "Mugisha", "email": "eric@mail.rw",
    "phoneNumber": "0782222222", "nationalId": "1199770012345678",
}


def _create_owner(client, headers, payload) -> int:
    resp = client.post("/api/v1/owners", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


def _register(client, headers, owner_id, chassis="CH-001", plate="RAA 001 A", price="5000000"):
    return client.post("/api/v1/vehicles", headers=headers, json={
        "chassisNumber": chassis, "modelName": "Prado", "manufacturerCompany": "Toyota",
        "manufacturedYear": 2018, "price": price, "ownerId": owner_id, "plateNumber": plate,
    })


@pytest.fixture
def registered(client, admin_headers):
    a = _create_owner(client, admin_headers, OWNER_A)
    b = _create_owner(client, admin_headers, OWNER_B)
    resp = _register(client, admin_headers, a)
    assert resp.status_code == 201, resp.text
    return {"a": a, "b": b, "vehicle": resp.json()["data"]}


class TestHealthAndAuth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_missing_token(self, client):
        resp = client.get("/api/v1/vehicles")
        assert resp.status_code == 401
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "UNAUTHORIZED"

    def test_garbage_token(self, client):
        resp = client.get("/api/v1/vehicles", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_token_for_unknown_user(self, client):
        headers = {"Authorization": f"Bearer {create_access_token(999, 'ADMIN')}"}
        assert client.get("/api/v1/vehicles", headers=headers).status_code == 401

    def test_mutations_need_admin(self, client, user_headers):
        resp = client.post("/api/v1/owners", json=OWNER_A, headers=user_headers)
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "FORBIDDEN"

    def test_reads_allowed_for_any_user(self, client, user_headers):
        resp = client.get("/api/v1/vehicles", headers=user_headers)
        assert resp.status_code == 200
        assert resp.json()["meta"]["total"] == 0


class TestVehicles:
    def test_register_returns_state(self, registered):
        v = registered["vehicle"]
        assert v["chassisNumber"] == "CH-001"
        assert v["currentPlate"]["plateNumber"] == "RAA 001 A"
        assert v["currentOwner"]["id"] == registered["a"]
        assert Decimal(v["price"]) == Decimal("5000000")

    def test_duplicate_chassis_is_400(self, client, admin_headers, registered):
        resp = _register(client, admin_headers, registered["a"], plate="RAA 999 A")
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"]["code"] == "DUPLICATE_ENTRY"
        assert body["error"]["field"] == "chassisNumber"

    def test_malformed_body_is_422(self, client, admin_headers):
        resp = client.post("/api/v1/vehicles", headers=admin_headers, json={"chassisNumber": "X"})
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"]["code"] == "REQUEST_INVALID"
        assert {d["field"] for d in body["error"]["details"]} >= {"chassisNumber", "ownerId"}

    def test_price_with_fractions_of_a_cent_is_422(self, client, admin_headers, registered):
        resp = _register(client, admin_headers, registered["a"], chassis="CH-002", plate="RAA 002 A", price="0.004")
        assert resp.status_code == 422

        vid = registered["vehicle"]["id"]
        resp = client.put(f"/api/v1/vehicles/{vid}", headers=admin_headers, json={"price": "10.505"})
        assert resp.status_code == 422

    def test_lookups(self, client, admin_headers, registered):
        vid = registered["vehicle"]["id"]
        assert client.get(f"/api/v1/vehicles/{vid}", headers=admin_headers).json()["data"]["id"] == vid
        assert client.get("/api/v1/vehicles/chassis/CH-001", headers=admin_headers).json()["data"]["id"] == vid
        assert client.get("/api/v1/vehicles/plate/RAA 001 A", headers=admin_headers).json()["data"]["id"] == vid
        assert client.get("/api/v1/vehicles/404", headers=admin_headers).status_code == 404

    def test_update_and_delete(self, client, admin_headers, registered):
        vid = registered["vehicle"]["id"]
        resp = client.put(f"/api/v1/vehicles/{vid}", headers=admin_headers, json={"modelName": "Prado TX"})
        assert resp.json()["data"]["modelName"] == "Prado TX"

        assert client.delete(f"/api/v1/vehicles/{vid}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/v1/vehicles/{vid}", headers=admin_headers).status_code == 404
        plates = client.get(f"/api/v1/vehicles/{vid}/plates", headers=admin_headers).json()["data"]
        assert [p["status"] for p in plates] == ["AVAILABLE"]


class TestTransferEndpoint:
    def test_transfer_and_history(self, client, admin_headers, registered):
        vid = registered["vehicle"]["id"]
        resp = client.post("/api/v1/ownerships/transfer", headers=admin_headers, json={
            "vehicleId": vid, "currentOwnerId": registered["a"], "newOwnerId": registered["b"],
            "transferAmount": "4500000", "newPlateNumber": "RAB 002 B",
        })
        assert resp.status_code == 200, resp.text
        assert resp.json()["data"]["currentPlate"]["plateNumber"] == "RAB 002 B"

        history = client.get("/api/v1/ownerships/chassis/CH-001/history", headers=admin_headers).json()["data"]
        assert [h["owner"]["id"] for h in history] == [registered["b"], registered["a"]]
        assert history[1]["endDate"] is not None

        by_old_plate = client.get("/api/v1/ownerships/plates/RAA 001 A/history", headers=admin_headers)
        assert by_old_plate.json()["data"] == history

        owned = client.get(
            f"/api/v1/owners/national-id/{OWNER_B['nationalId']}/vehicles", headers=admin_headers
        ).json()["data"]
        assert [v["id"] for v in owned] == [vid]

    def test_stale_current_owner_is_400(self, client, admin_headers, registered):
        resp = client.post("/api/v1/ownerships/transfer", headers=admin_headers, json={
            "vehicleId": registered["vehicle"]["id"], "currentOwnerId": registered["b"],
            "newOwnerId": registered["a"], "transferAmount": "10", "newPlateNumber": "RAB 003 A",
        })
        assert resp.status_code == 400
        assert resp.json()["error"]["field"] == "currentOwnerId"

    def test_non_positive_amount_is_422(self, client, admin_headers, registered):
        resp = client.post("/api/v1/ownerships/transfer", headers=admin_headers, json={
            "vehicleId": registered["vehicle"]["id"], "currentOwnerId": registered["a"],
            "newOwnerId": registered["b"], "transferAmount": "0", "newPlateNumber": "RAB 004 B",
        })
        assert resp.status_code == 422

    def test_sub_cent_amount_is_422_and_nothing_changes(self, client, admin_headers, registered):
        vid = registered["vehicle"]["id"]
        resp = client.post("/api/v1/ownerships/transfer", headers=admin_headers, json={
            "vehicleId": vid, "currentOwnerId": registered["a"],
            "newOwnerId": registered["b"], "transferAmount": "0.004", "newPlateNumber": "RAB 005 B",
        })
        assert resp.status_code == 422
        assert resp.json()["error"]["details"][0]["field"] == "transferAmount"

        history = client.get(f"/api/v1/ownerships/vehicles/{vid}/history", headers=admin_headers).json()["data"]
        assert [h["owner"]["id"] for h in history] == [registered["a"]]

    def test_amount_wider_than_the_ledger_column_is_422(self, client, admin_headers, registered):
        resp = client.post("/api/v1/ownerships/transfer", headers=admin_headers, json={
            "vehicleId": registered["vehicle"]["id"], "currentOwnerId": registered["a"],
            "newOwnerId": registered["b"], "transferAmount": "1" + "0" * 15, "newPlateNumber": "RAB 006 B",
        })
        assert resp.status_code == 422


class TestPlatesEndpoint:
    def test_status_change_and_retired_is_terminal(self, client, admin_headers, registered):
        plate_id = registered["vehicle"]["currentPlate"]["id"]

        resp = client.patch(f"/api/v1/plates/{plate_id}/status", headers=admin_headers, json={"status": "RETIRED"})
        assert resp.json()["data"]["status"] == "RETIRED"

        resp = client.patch(f"/api/v1/plates/{plate_id}/status", headers=admin_headers, json={"status": "AVAILABLE"})
        assert resp.status_code == 400
        assert client.get(f"/api/v1/plates/{plate_id}", headers=admin_headers).json()["data"]["status"] == "RETIRED"

    def test_unknown_status_is_422(self, client, admin_headers, registered):
        plate_id = registered["vehicle"]["currentPlate"]["id"]
        resp = client.patch(f"/api/v1/plates/{plate_id}/status", headers=admin_headers, json={"status": "LOST"})
        assert resp.status_code == 422

    def test_issue_new_plate(self, client, admin_headers, registered):
        resp = client.post("/api/v1/plates/issue", headers=admin_headers, json={
            "vehicleId": registered["vehicle"]["id"], "ownerId": registered["a"], "plateNumber": "RAA 777 A",
        })
        assert resp.status_code == 201, resp.text
        plates = client.get(
            f"/api/v1/vehicles/{registered['vehicle']['id']}/plates", headers=admin_headers
        ).json()["data"]
        assert {p["plateNumber"]: p["status"] for p in plates} == {
            "RAA 777 A": "IN_USE", "RAA 001 A": "TRANSFERRED_OUT",
        }

    def test_plates_by_owner(self, client, admin_headers, registered):
        resp = client.get(f"/api/v1/plates/by-owner/{registered['a']}", headers=admin_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert [p["plateNumber"] for p in body["data"]] == ["RAA 001 A"]
        assert body["meta"]["total"] == 1

        assert client.get("/api/v1/plates/by-owner/404", headers=admin_headers).status_code == 404


class TestOwnersEndpoint:
    def test_get_list_and_deactivate(self, client, admin_headers, registered):
        a = registered["a"]
        assert client.get(f"/api/v1/owners/{a}", headers=admin_headers).json()["data"]["email"] == OWNER_A["email"]

        listed = client.get("/api/v1/owners?search=aline", headers=admin_headers).json()
        assert [o["id"] for o in listed["data"]] == [a]

        assert client.delete(f"/api/v1/owners/{a}", headers=admin_headers).status_code == 200
        assert client.get("/api/v1/owners", headers=admin_headers).json()["meta"]["total"] == 1

    def test_duplicate_email(self, client, admin_headers, registered):
        resp = client.post("/api/v1/owners", headers=admin_headers, json={**OWNER_A, "phoneNumber": "0789999999",
                                                                          "nationalId": "1199660012345678"})
        assert resp.status_code == 400
        assert resp.json()["error"]["field"] == "email"
