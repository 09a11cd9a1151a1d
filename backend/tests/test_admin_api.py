"""Admin lead management: key checks, listing and limit overrides."""

import pytest
from fastapi.testclient import TestClient

from backend.core import admin_auth
from backend.core.config import settings
from backend.main import create_app
from backend.models.lead import Identity

ADMIN_KEY = "admin-secret"
HEADERS = {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture
def admin_client(remote_config, adapter, lead_store, monkeypatch):
    monkeypatch.setenv("ADMIN_API_KEY", ADMIN_KEY)
    app = create_app(config=remote_config, adapter=adapter, leads=lead_store)
    return TestClient(app)


@pytest.fixture
def seeded(lead_store, identity):
    lead_store.register_lead(identity)
    lead_store.register_lead(Identity(name="Bia", whatsapp="(21) 98888-7777", email="bia@example.com"))
    return lead_store


def test_admin_unconfigured(monkeypatch, client):
    monkeypatch.delenv("ADMIN_API_KEY", raising=False)
    monkeypatch.setattr(settings, "ADMIN_KEY", None)

    resp = client.get("/api/admin/leads", headers=HEADERS)
    assert resp.status_code == 503
    assert resp.json()["detail"]["code"] == "admin_auth_unconfigured"


def test_admin_requires_remote_store(monkeypatch, client):
    monkeypatch.setenv("ADMIN_API_KEY", ADMIN_KEY)

    resp = client.get("/api/admin/leads", headers=HEADERS)
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "remote_store_disabled"


def test_wrong_key_is_unauthorized(admin_client):
    resp = admin_client.get("/api/admin/leads", headers={"X-Admin-Key": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "admin_unauthorized"


def test_list_leads_with_contact_links(admin_client, seeded):
    resp = admin_client.get("/api/admin/leads", headers=HEADERS)
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 2

    by_name = {lead["name"]: lead for lead in body["leads"]}
    ana = by_name["Ana"]
    assert ana["contact_url"].startswith("https://wa.me/5511999990000?text=")
    assert ana["usage_count"] == 0
    assert ana["usage_limit"] == 1
    assert ana["limit_reached"] is False
    assert by_name["Bia"]["contact_url"].startswith("https://wa.me/21988887777?")


def test_update_limit(admin_client, seeded, identity):
    lead = seeded.get_lead(identity.whatsapp)
    seeded.increment_usage(identity.whatsapp)
    assert seeded.get_lead(identity.whatsapp).limit_reached is True

    resp = admin_client.post(f"/api/admin/leads/{lead.id}/limit", json={"usage_limit": 5}, headers=HEADERS)
    assert resp.status_code == 200
    assert resp.json()["usage_limit"] == 5
    assert resp.json()["limit_reached"] is False
    assert seeded.get_lead(identity.whatsapp).usage_limit == 5


def test_update_unknown_lead(admin_client, seeded):
    resp = admin_client.post("/api/admin/leads/missing-id/limit", json={"usage_limit": 2}, headers=HEADERS)
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"


def test_negative_limit_rejected(admin_client, seeded, identity):
    lead = seeded.get_lead(identity.whatsapp)
    resp = admin_client.post(f"/api/admin/leads/{lead.id}/limit", json={"usage_limit": -1}, headers=HEADERS)
    assert resp.status_code == 422


def test_query_key_accepted_outside_prod(admin_client, seeded, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "dev")
    resp = admin_client.get("/api/admin/leads", params={"admin_key": ADMIN_KEY})
    assert resp.status_code == 200

    monkeypatch.setattr(settings, "ENVIRONMENT", "prod")
    resp = admin_client.get("/api/admin/leads", params={"admin_key": ADMIN_KEY})
    assert resp.status_code == 401


def test_actor_id_hides_key():
    actor = admin_auth._actor_for(ADMIN_KEY, "x_admin_key")
    assert actor.actor_id.startswith("admin:")
    assert ADMIN_KEY not in actor.actor_id
