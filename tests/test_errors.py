from fastapi.testclient import TestClient
from pydantic import BaseModel

from app.core.exceptions import DuplicateUserError, ExternalServiceError, NotFoundError
from app.main import app

client = TestClient(app)


def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"


def test_422_validation_error():
    response = client.post("/api/v1/auth/verify-otp", json={"phone": ["not", "a", "string"]})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_validation_error_structure():
    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert len(data["details"]) > 0


def test_custom_exception():
    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise NotFoundError(message="Vehicle not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Vehicle not found"


def test_error_details_are_serialized():
    @app.get("/test-duplicate")
    def trigger_duplicate():
        raise DuplicateUserError(details={"field": "phone"})

    response = client.get("/test-duplicate")
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_USER"
    assert response.json()["details"] == {"field": "phone"}


def test_external_service_error():
    @app.get("/test-provider-down")
    def trigger_provider_error():
        raise ExternalServiceError("SMS provider unavailable")

    response = client.get("/test-provider-down")
    assert response.status_code == 502
    assert response.json()["code"] == "EXTERNAL_SERVICE_ERROR"


def test_unhandled_exception():
    @app.get("/test-crash")
    def crash():
        raise RuntimeError("boom")

    response = TestClient(app, raise_server_exceptions=False).get("/test-crash")
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"


def test_unauthenticated_sets_bearer_challenge():
    response = client.get("/api/v1/vehicles")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
