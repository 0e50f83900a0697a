import os
import tempfile
from datetime import datetime, timedelta

# Settings are read at import time, so configure before importing any service
_tmpdir = tempfile.mkdtemp(prefix="fabric-inventory-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["CACHE_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from services.scanner.app.schemas import InventoryRecord

SECRET_KEY = "09d25e094faa6ca2556c818166b7a9563b93f7099f6f0f4caa6cf63b88e8d3e7"


def make_token(role="user", user_id=1, username="tester"):
    claims = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "exp": datetime.utcnow() + timedelta(minutes=30),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm="HS256")


def auth_header(role="user", user_id=1, username="tester"):
    return {"Authorization": f"Bearer {make_token(role, user_id, username)}"}


def record(rack_id, display_name, quantity=10.0, **fields):
    return InventoryRecord(rack_id=rack_id, display_name=display_name, quantity=quantity, **fields)


@pytest.fixture
def users_api():
    from services.users.app import main, models
    from services.users.app.database import engine

    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)
    with TestClient(main.app) as client:
        yield client


@pytest.fixture
def inventory_api():
    from services.inventory.app import main, models
    from services.inventory.app.database import engine

    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)
    with TestClient(main.app) as client:
        yield client


@pytest.fixture
def scanner_api():
    from services.scanner.app import main

    with TestClient(main.app) as client:
        yield client
