import pytest

import config
from db import get_session
from main import create_app
from tests.factories import PrintJobFactory


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Flask app on a throwaway SQLite database."""
    monkeypatch.setattr(config, "TEMP_DIR", tmp_path / "temp")
    app = create_app(f"sqlite:///{tmp_path / 'test.sqlite'}")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Session bound to the test database, also used by the factories."""
    session = get_session()
    PrintJobFactory._meta.sqlalchemy_session = session
    yield session
    PrintJobFactory._meta.sqlalchemy_session = None
    session.close()


@pytest.fixture
def cairosvg():
    """cairosvg needs the native Cairo library; skip where it is missing."""
    try:
        import cairosvg as module
    except (ImportError, OSError) as exc:
        pytest.skip(f"cairosvg unavailable: {exc}")
    return module


@pytest.fixture
def label_payload():
    return {
        "customerName": "Yamada Taro",
        "carModel": "Prius",
        "carColor": "White",
        "referenceId": "1005123456789",
    }
