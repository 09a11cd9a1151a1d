# backend/conftest.py
import os
import sys
from pathlib import Path

import pytest

# Add backend root to PYTHONPATH
BACKEND_ROOT = Path(__file__).resolve().parent
if str(BACKEND_ROOT.parent) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT.parent))

os.environ.setdefault("SKIP_ENV_VALIDATION", "1")
os.environ.setdefault("ENV", "test")
os.environ.pop("DATABASE_URL", None)

from backend.core.config import (  # noqa: E402
    GenerationConfig,
    RemoteStoreEnabled,
    StudioConfig,
    UsagePolicy,
)
from backend.core.database import dispose_engine, drop_all_tables  # noqa: E402
from backend.features.ai.adapter import GenerativeAdapter  # noqa: E402
from backend.features.leads.service import LeadStore  # noqa: E402
from backend.features.studio.controller import StudioSession  # noqa: E402
from backend.features.usage.service import LocalUsageStore, MemoryDocumentStore  # noqa: E402
from backend.models.lead import Identity  # noqa: E402
from backend.tests.mocks import FakeGenaiClient  # noqa: E402


@pytest.fixture
def fake_client():
    return FakeGenaiClient()


@pytest.fixture
def studio_config():
    """Local-only configuration: no remote lead store."""
    return StudioConfig(generation=GenerationConfig(api_key="test-key"))


@pytest.fixture
def adapter(fake_client, studio_config):
    return GenerativeAdapter(studio_config.generation, client=fake_client)


@pytest.fixture
def local_store():
    return LocalUsageStore(MemoryDocumentStore())


@pytest.fixture
def identity():
    return Identity(name="Ana", whatsapp="+55 11 99999-0000", email="ana@example.com")


@pytest.fixture
def db_url(tmp_path):
    """A throwaway SQLite file per test for the remote lead store."""
    return f"sqlite:///{tmp_path / 'leads.db'}"


@pytest.fixture
def lead_store(db_url):
    store = LeadStore.connect(db_url, default_limit=1)
    yield store
    drop_all_tables()
    dispose_engine()


@pytest.fixture
def remote_config(db_url):
    return StudioConfig(
        generation=GenerationConfig(api_key="test-key"),
        usage=UsagePolicy(free_uses_per_feature=1, default_lead_limit=1),
        remote=RemoteStoreEnabled(database_url=db_url),
    )


@pytest.fixture
def session(studio_config, adapter, local_store):
    return StudioSession("test-session-1", studio_config, adapter, local_store)


@pytest.fixture
def registered_session(session, identity):
    session.register(identity)
    return session


@pytest.fixture
def app(studio_config, adapter):
    from backend.main import create_app

    return create_app(config=studio_config, adapter=adapter)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)
