import pytest
from fastapi.testclient import TestClient

from portfolio.config import Settings
from portfolio.database import init_db, make_engine
from portfolio.main import create_app
from portfolio.schemas import UserCreate
from portfolio.services.seed import seed_admin
from portfolio.storage.memory import MemStorage
from portfolio.storage.sql import SqlStorage

ADMIN_USERNAME = "Abid"
ADMIN_PASSWORD = "correct-horse"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        secret_key="test-secret",
        admin_username=ADMIN_USERNAME,
        admin_password=ADMIN_PASSWORD,
        theme_path=tmp_path / "theme.json",
    )


@pytest.fixture
def storage(settings):
    storage = MemStorage()
    seed_admin(storage, settings)
    return storage


@pytest.fixture
def sql_storage():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield SqlStorage(engine)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def any_storage(request):
    """Runs a test once against each backend."""
    if request.param == "memory":
        return MemStorage()
    return request.getfixturevalue("sql_storage")


@pytest.fixture
def app(settings, storage):
    return create_app(settings, storage)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    res = client.post("/api/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return client


@pytest.fixture
def member_client(client, storage):
    """Logged in with a valid, non-admin account."""
    storage.create_user(UserCreate(username="visitor", password="visitor-pass", is_admin=False))
    res = client.post("/api/login", json={"username": "visitor", "password": "visitor-pass"})
    assert res.status_code == 200
    return client
