import random
import pytest
from fastapi.testclient import TestClient
from data.database import get_db
from main import app
from services.blobs import get_blob_store, get_memory_blob_store
from services.selector import get_rng



@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def blob_store():
    return get_memory_blob_store()


@pytest.fixture
def client(db_session, rng, blob_store):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rng] = lambda: rng
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def create_test(client):
    """Factory posting a test through the API and returning the JSON body."""
    def _create(**overrides):
        payload = {
            "name": "Homepage headline",
            "description": "Which headline gets more attention",
            "variationA": "<h1>Fast checkout</h1>",
            "variationB": "<h1>Free shipping</h1>",
        }
        payload.update(overrides)
        response = client.post("/tests", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
