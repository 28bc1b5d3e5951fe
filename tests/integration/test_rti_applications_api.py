"""
Integration tests for RTI applications, including the payment recovery path.
"""
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from filemyrti_api.models.payment_recovery import PaymentRecovery
from filemyrti_api.models.rti_application import RTIApplication
from filemyrti_api.routes import rti_applications as rti_routes
from filemyrti_api.services import applications

PUBLIC_URL = "/api/v1/rti-applications/public"
CREATE_FAILED = "Failed to create RTI application. Please try again or contact support."


def raise_on_create(error):
    def create_application(db, payload, user_id=None):
        raise error
    return create_application


@pytest.mark.asyncio
class TestPublicCreate:
    async def test_persisted_and_notified(self, client, db_session, notifier, application_body):
        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "RTI application created successfully"
        assert body["data"]["status"] == "pending"
        assert body["data"]["email"] == "ravi@example.com"
        assert body["data"]["service_name"] == "Seamless Online Filing"
        assert body["data"]["state_name"] == "Telangana"
        assert body["data"]["user_id"] is None

        assert db_session.query(RTIApplication).count() == 1
        assert db_session.query(PaymentRecovery).count() == 0

        form_type, fields = notifier.dispatched[0]
        assert form_type == "RTI Application"
        assert fields["Payment ID"] == "pay_Nx1qk0fU3b2Xy9"
        assert fields["Service"] == "Seamless Online Filing"

    async def test_missing_rti_query_stored_empty(self, client, db_session, application_body):
        del application_body["rti_query"]

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 201
        assert resp.json()["data"]["rti_query"] == ""

    async def test_validation_errors_listed(self, client, application_body):
        application_body.update({"pincode": "012345", "mobile": "12345", "address": "short"})

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        by_field = {error["field"]: error for error in body["errors"]}
        assert set(by_field) == {"pincode", "mobile", "address"}
        assert by_field["mobile"]["message"] == "Mobile number must be between 10 and 13 digits"
        assert by_field["pincode"]["value"] == "012345"

    async def test_rti_query_too_long(self, client, application_body):
        application_body["rti_query"] = "q" * 5001

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "rti_query"

    async def test_unknown_service(self, client, db_session, application_body):
        application_body["service_id"] = 999

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 400
        assert resp.json()["message"].startswith("Service with ID 999 does not exist.")
        assert db_session.query(PaymentRecovery).count() == 0

    async def test_unknown_state(self, client, application_body):
        application_body["state_id"] = 999

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 400
        assert resp.json()["message"].startswith("State with ID 999 does not exist.")

    async def test_catalog_lookup_failure_writes_recovery(self, client, db_session, notifier, application_body, monkeypatch):
        def lookup_unavailable(db, payload):
            raise OperationalError("SELECT services", {}, Exception("server closed the connection"))
        monkeypatch.setattr(rti_routes, "_require_service_and_state", lookup_unavailable)

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 503
        recoveries = db_session.query(PaymentRecovery).all()
        assert len(recoveries) == 1
        assert recoveries[0].payment_id == application_body["payment_id"]
        assert "server closed the connection" in recoveries[0].error_message
        assert db_session.query(RTIApplication).count() == 0
        assert notifier.dispatched == []

    async def test_persist_failure_writes_recovery(self, client, db_session, notifier, application_body, monkeypatch):
        monkeypatch.setattr(applications, "create_application", raise_on_create(RuntimeError("lost connection")))

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 500
        assert resp.json()["message"] == CREATE_FAILED
        recoveries = db_session.query(PaymentRecovery).all()
        assert len(recoveries) == 1
        assert recoveries[0].payment_id == application_body["payment_id"]
        assert recoveries[0].order_id == application_body["order_id"]
        assert recoveries[0].error_message == "lost connection"
        assert recoveries[0].request_body["email"] == "Ravi@Example.com"
        assert notifier.dispatched == []

    async def test_recovery_failure_keeps_original_error(self, client, db_session, application_body, monkeypatch):
        monkeypatch.setattr(applications, "create_application", raise_on_create(RuntimeError("lost connection")))
        monkeypatch.setattr(applications, "PaymentRecovery", MagicMock(side_effect=RuntimeError("recovery insert failed")))

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 500
        assert resp.json()["message"] == CREATE_FAILED

    async def test_database_unavailable_mapped(self, client, db_session, application_body, monkeypatch):
        error = OperationalError("INSERT INTO rti_applications", {}, Exception("server closed the connection"))
        monkeypatch.setattr(applications, "create_application", raise_on_create(error))

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 503
        assert db_session.query(PaymentRecovery).count() == 1

    async def test_failure_without_payment_ids_no_recovery(self, client, db_session, application_body, monkeypatch):
        application_body.pop("payment_id")
        application_body.pop("order_id")
        monkeypatch.setattr(applications, "create_application", raise_on_create(RuntimeError("lost connection")))

        resp = await client.post(PUBLIC_URL, json=application_body)

        assert resp.status_code == 500
        assert db_session.query(PaymentRecovery).count() == 0


@pytest.mark.asyncio
class TestAuthenticatedApplications:
    async def test_create_requires_token(self, client, application_body):
        resp = await client.post("/api/v1/rti-applications/", json=application_body)

        assert resp.status_code == 401
        assert resp.json()["message"] == "No token provided. Access denied."

    async def test_create_and_list_own(self, client, notifier, regular_user, user_headers, application_body):
        resp = await client.post("/api/v1/rti-applications/", json=application_body, headers=user_headers)

        assert resp.status_code == 201
        assert resp.json()["data"]["user_id"] == regular_user.id
        assert notifier.dispatched[0][0] == "RTI Application (Authenticated)"
        assert notifier.dispatched[0][1]["User ID"] == regular_user.id

        mine = await client.get("/api/v1/rti-applications/my-applications", headers=user_headers)
        assert mine.status_code == 200
        assert mine.json()["data"]["total"] == 1
        assert mine.json()["data"]["applications"][0]["user_name"] == regular_user.name

    async def test_non_admin_only_sees_own(self, client, user_headers, application_body):
        await client.post(PUBLIC_URL, json=application_body)

        resp = await client.get("/api/v1/rti-applications/", headers=user_headers)

        assert resp.status_code == 200
        assert resp.json()["data"]["total"] == 0

    async def test_admin_sees_all_and_filters(self, client, admin_headers, application_body):
        await client.post(PUBLIC_URL, json=application_body)
        await client.post(PUBLIC_URL, json=application_body)

        resp = await client.get("/api/v1/rti-applications/?status=pending&limit=1", headers=admin_headers)

        data = resp.json()["data"]
        assert data["total"] == 2
        assert data["totalPages"] == 2
        assert len(data["applications"]) == 1

    async def test_other_users_application_forbidden(self, client, user_headers, application_body):
        created = await client.post(PUBLIC_URL, json=application_body)
        application_id = created.json()["data"]["id"]

        resp = await client.get(f"/api/v1/rti-applications/{application_id}", headers=user_headers)

        assert resp.status_code == 403

    async def test_owner_updates_and_deletes(self, client, user_headers, application_body):
        created = await client.post("/api/v1/rti-applications/", json=application_body, headers=user_headers)
        application_id = created.json()["data"]["id"]

        updated = await client.put(
            f"/api/v1/rti-applications/{application_id}",
            json={"address": "45, Jubilee Hills, Hyderabad", "pincode": "500033"},
            headers=user_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["pincode"] == "500033"

        deleted = await client.delete(f"/api/v1/rti-applications/{application_id}", headers=user_headers)
        assert deleted.status_code == 200

        missing = await client.get(f"/api/v1/rti-applications/{application_id}", headers=user_headers)
        assert missing.status_code == 404

    async def test_status_update_admin_only(self, client, user_headers, admin_headers, application_body):
        created = await client.post(PUBLIC_URL, json=application_body)
        url = f"/api/v1/rti-applications/{created.json()['data']['id']}/status"

        forbidden = await client.patch(url, json={"status": "completed"}, headers=user_headers)
        assert forbidden.status_code == 403
        assert forbidden.json()["message"] == "Access denied. Admin privileges required."

        invalid = await client.patch(url, json={"status": "archived"}, headers=admin_headers)
        assert invalid.status_code == 400
        assert invalid.json()["message"] == "Invalid status"

        ok = await client.patch(url, json={"status": "completed"}, headers=admin_headers)
        assert ok.status_code == 200
        assert ok.json()["data"]["status"] == "completed"
