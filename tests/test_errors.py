def test_404_not_found(client):
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"


def test_body_type_error_is_400_with_field(client):
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @client.app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["field"] == "price"
    assert len(data["details"]) > 0


def test_custom_exception(client):
    from app.core.exceptions import ResourceNotFoundError

    @client.app.get("/test-custom-error")
    def trigger_custom_error():
        raise ResourceNotFoundError(message="Item not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Item not found"


def test_storage_error_hides_detail(client):
    from pymongo.errors import OperationFailure

    @client.app.get("/test-storage-error")
    def trigger_storage_error():
        raise OperationFailure("auth failed on replica set rs0")

    response = client.get("/test-storage-error")
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert "rs0" not in data["error"]


def test_liveness(client):
    response = client.get("/live")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_missing_database_is_500_without_detail():
    from fastapi.testclient import TestClient
    from app.main import app

    response = TestClient(app).post("/users/login", json={"username": "ada", "password": "analytical-engine"})
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert "connect_to_mongo" not in data["error"]


def test_slow_request_times_out(client, monkeypatch):
    import asyncio
    import app.main as main_module

    monkeypatch.setattr(
        main_module, "settings", main_module.settings.model_copy(update={"REQUEST_TIMEOUT_SECONDS": 0.05})
    )

    @client.app.get("/test-slow")
    async def slow():
        await asyncio.sleep(0.5)
        return {"status": "done"}

    response = client.get("/test-slow")
    assert response.status_code == 504
    assert response.json()["code"] == "TIMEOUT"
