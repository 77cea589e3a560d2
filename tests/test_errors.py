from fastapi.testclient import TestClient
from pydantic import BaseModel

from app.main import app

client = TestClient(app)


def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert "error" in data
    assert data["code"] == "HTTP_ERROR"


def test_validation_error_structure():
    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "VALIDATION_ERROR"
    assert "price" in data["error"]
    assert len(data["details"]) > 0


def test_custom_exception():
    from app.core.exceptions import ResourceNotFoundError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ResourceNotFoundError(message="Item not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data == {"success": False, "error": "Item not found", "code": "NOT_FOUND", "details": None}


def test_processing_error_is_500():
    from app.core.exceptions import PdfProcessingError

    @app.get("/test-processing-error")
    def trigger_processing_error():
        raise PdfProcessingError()

    response = client.get("/test-processing-error")
    assert response.status_code == 500
    assert response.json()["code"] == "PROCESSING_ERROR"


def test_inactive_account_is_403():
    from app.core.exceptions import AccountInactiveError

    @app.get("/test-inactive")
    def trigger_inactive():
        raise AccountInactiveError()

    response = client.get("/test-inactive")
    assert response.status_code == 403
    assert response.json()["error"] == "Account is not active"


def test_protected_route_requires_token():
    response = client.get("/api/v1/files")
    assert response.status_code == 401
    assert response.json()["code"] == "AUTHENTICATION_FAILED"


def test_unhandled_exception_hides_cause(monkeypatch):
    from app.core.config import settings
    monkeypatch.setattr(settings, "DEBUG", False)

    @app.get("/test-unhandled-error")
    def trigger_unhandled_error():
        raise RuntimeError("code=7: premature end of data in png image")

    response = TestClient(app, raise_server_exceptions=False).get("/test-unhandled-error")
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert "png" not in data["error"]
