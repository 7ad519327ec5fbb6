# autoshop/conftest.py
import os
import sys
from pathlib import Path

import pytest

# Add the repository root to PYTHONPATH so `autoshop.*` imports work uninstalled
REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

os.environ.setdefault("ENV", "test")


@pytest.fixture(scope="session")
def app():
    from autoshop.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def tenant_store():
    """
    In-memory stand-in for the external tenant table.

    Returns a dict tests can fill, plus a lookup callable over it.
    """
    from autoshop.models.entitlement import TenantRecord

    tenants = {}

    def lookup(tenant_id: str):
        return tenants.get(tenant_id)

    def add(tenant_id: str, plan):
        tenants[tenant_id] = TenantRecord(id=tenant_id, subscription_plan=plan)

    lookup.add = add
    return lookup
