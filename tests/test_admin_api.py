import copy


def test_admin_can_add_product(client, admin_auth, db):
    response = client.post(
        "/admin/add_product",
        json={
            "name": "Desk Lamp",
            "description": "LED, dimmable",
            "price": 24.99,
            "rating": 4.1,
            "image": "https://cdn.example.com/lamp.png"
        },
        headers={"token": admin_auth["token"]}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Desk Lamp"
    assert data["id"]
    assert len(db["products"].docs) == 1


def test_non_admin_is_forbidden(client, user_auth, db):
    response = client.post(
        "/admin/add_product",
        json={"name": "Desk Lamp", "description": "LED", "price": 24.99, "image": "https://cdn.example.com/lamp.png"},
        headers={"token": user_auth["token"]}
    )
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"
    assert db["products"].docs == []


def test_admin_route_without_token_is_401(client):
    response = client.post("/admin/add_product", json={})
    assert response.status_code == 401


def test_invalid_product_is_rejected(client, admin_auth):
    headers = {"token": admin_auth["token"]}

    response = client.post(
        "/admin/add_product",
        json={"name": "Lamp", "description": "LED", "price": 0, "image": "https://cdn.example.com/lamp.png"},
        headers=headers
    )
    assert response.status_code == 400
    assert response.json()["field"] == "price"

    response = client.post(
        "/admin/add_product",
        json={"name": "Lamp", "description": "LED", "price": "cheap", "image": "https://cdn.example.com/lamp.png"},
        headers=headers
    )
    assert response.status_code == 400
    assert response.json()["field"] == "price"

    response = client.post(
        "/admin/add_product",
        json={"name": "Lamp", "description": "LED", "price": 5, "rating": 9, "image": "https://cdn.example.com/lamp.png"},
        headers=headers
    )
    assert response.status_code == 400
    assert response.json()["field"] == "rating"


def _place_order(client, user_auth, make_product):
    product = make_product()
    response = client.post(
        "/cart/instant_buy",
        json={"product_ids": [product["id"]], "payment_method": "COD"},
        headers={"token": user_auth["token"]}
    )
    assert response.status_code == 201
    return response.json()


def test_admin_advances_order_status(client, admin_auth, user_auth, make_product):
    order = _place_order(client, user_auth, make_product)
    headers = {"token": admin_auth["token"]}

    shipped = client.post("/admin/order_status", json={"order_id": order["id"], "order_status": "Shipped"}, headers=headers)
    assert shipped.status_code == 200
    assert shipped.json()["order_status"] == "Shipped"

    delivered = client.post("/admin/order_status", json={"order_id": order["id"], "order_status": "Delivered"}, headers=headers)
    assert delivered.json()["order_status"] == "Delivered"

    backwards = client.post("/admin/order_status", json={"order_id": order["id"], "order_status": "Canceled"}, headers=headers)
    assert backwards.status_code == 409


def test_order_status_rejects_unknown_status(client, admin_auth, user_auth, make_product):
    order = _place_order(client, user_auth, make_product)
    response = client.post(
        "/admin/order_status",
        json={"order_id": order["id"], "order_status": "Lost"},
        headers={"token": admin_auth["token"]}
    )
    assert response.status_code == 400
    assert response.json()["field"] == "order_status"


def test_order_status_unknown_order(client, admin_auth):
    response = client.post(
        "/admin/order_status",
        json={"order_id": "64b7f0c2a1b2c3d4e5f60718", "order_status": "Shipped"},
        headers={"token": admin_auth["token"]}
    )
    assert response.status_code == 404


def test_non_finite_price_is_rejected_before_insert(client, admin_auth, db):
    body = (
        '{"name": "Desk Lamp", "description": "LED", "price": Infinity, "rating": 4,'
        ' "image": "https://cdn.example.com/lamp.png"}'
    )
    response = client.post(
        "/admin/add_product",
        content=body,
        headers={"token": admin_auth["token"], "Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["field"] == "price"
    assert db["products"].docs == []


def test_order_status_lost_update_conflicts(client, admin_auth, user_auth, make_product, db):
    order = _place_order(client, user_auth, make_product)
    orders = db["orders"]
    stale = copy.deepcopy(orders.docs[0])

    async def stale_find_one(query):
        return copy.deepcopy(stale)

    # The owner cancels after the admin's read but before the admin's write
    orders.docs[0]["order_status"] = "Canceled"
    orders.find_one = stale_find_one

    response = client.post(
        "/admin/order_status",
        json={"order_id": order["id"], "order_status": "Shipped"},
        headers={"token": admin_auth["token"]}
    )
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"
    assert orders.docs[0]["order_status"] == "Canceled"
