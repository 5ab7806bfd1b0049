import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture(name="client")
def client_fixture():
    """Provide a test client for the API

    The context manager runs startup handlers, same as a real server.
    """
    with TestClient(app) as client:
        yield client
