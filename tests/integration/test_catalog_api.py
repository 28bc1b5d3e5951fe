"""
Integration tests for the services and states catalog.
"""
import inspect

import pytest

from filemyrti_api.routes import auth as auth_routes
from filemyrti_api.routes import newsletter as newsletter_routes
from filemyrti_api.routes import services as services_routes
from filemyrti_api.routes import states as states_routes


@pytest.mark.asyncio
class TestServices:
    async def test_public_list(self, client, service):
        resp = await client.get("/api/v1/services")

        assert resp.status_code == 200
        assert [s["slug"] for s in resp.json()["data"]] == ["seamless-online-filing"]

    async def test_get_by_slug(self, client, service):
        resp = await client.get("/api/v1/services/seamless-online-filing")

        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == "Seamless Online Filing"

    async def test_unknown_slug(self, client):
        resp = await client.get("/api/v1/services/does-not-exist")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Service not found"}

    async def test_create_requires_admin(self, client, user_headers):
        resp = await client.post("/api/v1/services", json={"name": "Bulk", "slug": "bulk"}, headers=user_headers)

        assert resp.status_code == 403

    async def test_admin_create_update_delete(self, client, admin_headers):
        created = await client.post(
            "/api/v1/services",
            json={"name": "Custom RTI", "slug": "custom-rti", "price": "1999.00"},
            headers=admin_headers,
        )
        assert created.status_code == 201
        service_id = created.json()["data"]["id"]

        duplicate = await client.post(
            "/api/v1/services", json={"name": "Custom RTI", "slug": "custom-rti"}, headers=admin_headers
        )
        assert duplicate.status_code == 409

        updated = await client.put(
            f"/api/v1/services/{service_id}", json={"name": "Custom RTI Drafting"}, headers=admin_headers
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["name"] == "Custom RTI Drafting"

        deleted = await client.delete(f"/api/v1/services/{service_id}", headers=admin_headers)
        assert deleted.status_code == 200

        missing = await client.put(f"/api/v1/services/{service_id}", json={"name": "x"}, headers=admin_headers)
        assert missing.status_code == 404


@pytest.mark.asyncio
class TestStates:
    async def test_slug_is_normalized(self, client, state):
        resp = await client.get("/api/v1/states/%20Telangana%20")

        assert resp.status_code == 200
        assert resp.json()["data"]["rti_portal_url"] == "https://rti.telangana.gov.in"

    async def test_blank_slug(self, client):
        resp = await client.get("/api/v1/states/%20")

        assert resp.status_code == 400
        assert resp.json()["message"] == "State slug is required"

    async def test_admin_create(self, client, admin_headers):
        resp = await client.post(
            "/api/v1/states", json={"name": "Maharashtra", "slug": "maharashtra"}, headers=admin_headers
        )

        assert resp.status_code == 201
        listing = await client.get("/api/v1/states")
        assert [s["name"] for s in listing.json()["data"]] == ["Maharashtra"]


@pytest.mark.parametrize("endpoint", [
    services_routes.get_all_services,
    services_routes.create_service,
    states_routes.get_state,
    auth_routes.register,
    auth_routes.login,
    newsletter_routes.unsubscribe,
])
def test_db_only_handlers_are_sync(endpoint):
    # FastAPI runs plain def endpoints in its threadpool, off the event loop
    assert not inspect.iscoroutinefunction(endpoint)
