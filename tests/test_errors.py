from fastapi.testclient import TestClient
from app.main import app
import pytest

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert "message" in data
    assert data["code"] == "HTTP_ERROR"

def test_validation_error_structure():
    # We can define a temporary route to test validation
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "VALIDATION_ERROR"
    assert len(data["details"]) > 0
    assert data["details"][0]["loc"] == ["body", "price"]

@pytest.mark.parametrize("exc_name, status, code", [
    ("ResourceNotFoundError", 404, "NOT_FOUND"),
    ("ConflictError", 409, "CONFLICT"),
    ("AuthenticationError", 401, "AUTHENTICATION_FAILED"),
    ("UploadError", 502, "UPLOAD_FAILED"),
])
def test_custom_exception(exc_name, status, code):
    from app.core import exceptions

    path = f"/test-custom-error/{exc_name}"

    @app.get(path)
    def trigger_custom_error():
        raise getattr(exceptions, exc_name)("Something went wrong")

    response = client.get(path)
    assert response.status_code == status
    data = response.json()
    assert data == {"success": False, "message": "Something went wrong", "code": code, "details": None}

def test_unhandled_exception_is_wrapped():
    @app.get("/test-unhandled")
    def explode():
        raise RuntimeError("boom")

    # The catch-all handler answers; TestClient must not re-raise the server error
    safe_client = TestClient(app, raise_server_exceptions=False)
    response = safe_client.get("/test-unhandled")
    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "INTERNAL_ERROR"
