"""Access gate decisions and the local-then-remote usage write."""

import pytest
from sqlalchemy.exc import OperationalError

from backend.core.config import StudioConfig, UsagePolicy
from backend.core.errors import AccessDeniedError, ConflictError
from backend.features.access.service import AccessGate
from backend.features.usage.service import LocalUsageStore
from backend.models.lead import Identity


def test_denies_without_identity(studio_config, local_store):
    gate = AccessGate(studio_config, local_store)
    decision = gate.check_access("text")
    assert decision.allowed is False
    assert decision.limit_reached is False
    assert decision.reason == "registration_required"

    with pytest.raises(AccessDeniedError) as exc:
        gate.require_access("text")
    assert exc.value.code == "registration_required"
    assert exc.value.status_code == 403


def test_local_first_use_allowed_second_denied(studio_config, local_store, identity):
    gate = AccessGate(studio_config, local_store)
    gate.register(identity)

    assert gate.check_access("video").allowed is True
    receipt = gate.record_usage("video")
    assert receipt.local_count == 1
    assert receipt.remote_attempted is False

    decision = gate.check_access("video")
    assert decision.allowed is False
    assert decision.limit_reached is True
    # Other features keep their own free use
    assert gate.check_access("text").allowed is True


def test_free_uses_come_from_policy(local_store, identity):
    config = StudioConfig(usage=UsagePolicy(free_uses_per_feature=2))
    gate = AccessGate(config, local_store)
    gate.register(identity)

    gate.record_usage("text")
    assert gate.check_access("text").allowed is True
    gate.record_usage("text")
    assert gate.check_access("text").allowed is False


def test_register_twice_is_conflict(studio_config, local_store, identity):
    gate = AccessGate(studio_config, local_store)
    gate.register(identity)
    with pytest.raises(ConflictError):
        gate.register(Identity(name="Bia", whatsapp="11988887777", email="bia@example.com"))
    assert local_store.get_identity() == identity


def test_remote_enabled_requires_lead_store(remote_config, local_store):
    with pytest.raises(ValueError):
        AccessGate(remote_config, local_store)


def test_remote_limit_decides(remote_config, lead_store, identity):
    gate = AccessGate(remote_config, LocalUsageStore(), lead_store)
    gate.register(identity)

    assert gate.check_access("text").allowed is True
    receipt = gate.record_usage("text")
    assert receipt.remote_synced is True
    assert lead_store.get_lead(identity.whatsapp).usage_count == 1

    # Remote count is per identity, not per feature
    denied = gate.check_access("image")
    assert denied.allowed is False
    assert denied.limit_reached is True

    lead = lead_store.get_lead(identity.whatsapp)
    lead_store.update_limit(lead.id, 3)
    assert gate.check_access("image").allowed is True


def test_remote_missing_lead_denied(remote_config, lead_store, identity):
    local = LocalUsageStore()
    local.save_identity(identity)
    gate = AccessGate(remote_config, local, lead_store)

    decision = gate.check_access("text")
    assert decision.allowed is False
    assert decision.reason == "lead_not_found"
    assert decision.limit_reached is False


def test_remote_increment_failure_keeps_local(remote_config, lead_store, identity, monkeypatch):
    gate = AccessGate(remote_config, LocalUsageStore(), lead_store)
    gate.register(identity)

    def boom(whatsapp):
        raise OperationalError("UPDATE leads", {}, Exception("connection lost"))

    monkeypatch.setattr(lead_store, "increment_usage", boom)

    receipt = gate.record_usage("remix")
    assert receipt.local_count == 1
    assert receipt.remote_attempted is True
    assert receipt.remote_synced is False
    assert "connection lost" in receipt.remote_error
    assert gate.local.get_usage_count("remix") == 1


def test_registration_is_not_duplicated_remotely(remote_config, lead_store, identity):
    AccessGate(remote_config, LocalUsageStore(), lead_store).register(identity)
    # Same contact handle from another browser
    AccessGate(remote_config, LocalUsageStore(), lead_store).register(identity)

    rows = lead_store.list_leads()
    assert len(rows) == 1
    assert rows[0].usage_limit == 1
    assert rows[0].usage_count == 0
