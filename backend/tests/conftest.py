import pytest
from fastapi.testclient import TestClient

from app.database import init_db, make_session_factory
from app.dependencies import get_session_factory
from app.main import app
from app.seed import seed


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "data"
    data_path.mkdir()
    return data_path


@pytest.fixture
def session_factory(tmp_data):
    db_path = tmp_data / "search.sqlite"
    init_db(db_path)
    factory = make_session_factory(db_path)
    yield factory
    factory.kw["bind"].dispose()


@pytest.fixture
def seeded(session_factory):
    seed(session_factory)
    return session_factory


@pytest.fixture
def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
