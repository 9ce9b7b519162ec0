import asyncio

import pytest
from bson import ObjectId

from app.services.cart_service import clear_cart


@pytest.fixture
def headers(user_auth):
    return {"token": user_auth["token"]}


def add(client, headers, product_id):
    return client.post("/cart/add_to_cart", json={"product_id": product_id}, headers=headers)


def test_new_user_has_empty_cart(client, headers):
    response = client.get("/cart/", headers=headers)
    assert response.status_code == 200
    assert response.json()["product_ids"] == []
    assert response.json()["total_price"] == 0


def test_add_and_remove_items(client, headers, make_product):
    keyboard = make_product(name="Keyboard", price=50)
    mouse = make_product(name="Mouse", price=20.25)

    add(client, headers, keyboard["id"])
    add(client, headers, keyboard["id"])
    response = add(client, headers, mouse["id"])
    assert response.status_code == 200
    cart = response.json()
    assert cart["product_ids"] == [keyboard["id"], keyboard["id"], mouse["id"]]
    assert cart["total_price"] == 120.25

    response = client.post("/cart/remove_item", json={"product_id": keyboard["id"]}, headers=headers)
    assert response.status_code == 200
    cart = response.json()
    assert cart["product_ids"] == [keyboard["id"], mouse["id"]]
    assert cart["total_price"] == 70.25


def test_add_unknown_product_is_404(client, headers):
    response = add(client, headers, "64b7f0c2a1b2c3d4e5f60718")
    assert response.status_code == 404


def test_add_malformed_product_id_is_400(client, headers):
    response = add(client, headers, "not-an-id")
    assert response.status_code == 400
    assert response.json()["field"] == "product_id"


def test_remove_item_not_in_cart_is_404(client, headers, make_product):
    product = make_product()
    response = client.post("/cart/remove_item", json={"product_id": product["id"]}, headers=headers)
    assert response.status_code == 404


def test_checkout_empty_cart_is_rejected(client, headers, db):
    response = client.post("/cart/cart_checkout", json={"payment_method": "COD"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["field"] == "product_ids"
    assert db["orders"].docs == []


def test_checkout_converts_cart_to_order(client, headers, make_product, user_auth):
    product = make_product(price=30)
    add(client, headers, product["id"])
    add(client, headers, product["id"])

    response = client.post("/cart/cart_checkout", json={"payment_method": "Digital"}, headers=headers)
    assert response.status_code == 201
    order = response.json()
    assert order["user_id"] == user_auth["user"]["id"]
    assert order["product_ids"] == [product["id"], product["id"]]
    assert order["total_price"] == 60
    assert order["payment_method"] == "Digital"
    assert order["order_status"] == "Pending"

    cart = client.get("/cart/", headers=headers).json()
    assert cart["product_ids"] == []
    assert cart["total_price"] == 0


def test_checkout_rejects_unknown_payment_method(client, headers, make_product):
    product = make_product()
    add(client, headers, product["id"])

    response = client.post("/cart/cart_checkout", json={"payment_method": "Bitcoin"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["field"] == "payment_method"

    # Cart is kept when checkout fails
    assert client.get("/cart/", headers=headers).json()["product_ids"] == [product["id"]]


def test_instant_buy_bypasses_cart(client, headers, make_product):
    product = make_product(price=12.5)
    add(client, headers, product["id"])

    other = make_product(name="Cable", price=7.5)
    response = client.post(
        "/cart/instant_buy",
        json={"product_ids": [other["id"]], "payment_method": "COD"},
        headers=headers
    )
    assert response.status_code == 201
    assert response.json()["total_price"] == 7.5

    assert client.get("/cart/", headers=headers).json()["product_ids"] == [product["id"]]


def test_instant_buy_requires_products(client, headers):
    response = client.post("/cart/instant_buy", json={"product_ids": [], "payment_method": "COD"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["field"] == "product_ids"


def test_instant_buy_unknown_product_is_404(client, headers):
    response = client.post(
        "/cart/instant_buy",
        json={"product_ids": ["64b7f0c2a1b2c3d4e5f60718"], "payment_method": "COD"},
        headers=headers
    )
    assert response.status_code == 404


def test_orders_listed_and_cancelled_by_owner(client, headers, make_product, signup_user):
    product = make_product()
    order = client.post(
        "/cart/instant_buy",
        json={"product_ids": [product["id"]], "payment_method": "COD"},
        headers=headers
    ).json()

    orders = client.get("/users/orders", headers=headers).json()
    assert [item["id"] for item in orders] == [order["id"]]

    stranger = signup_user(username="eve", email="eve@example.com")
    response = client.post("/users/cancel_order", json={"order_id": order["id"]}, headers={"token": stranger["token"]})
    assert response.status_code == 404

    response = client.post("/users/cancel_order", json={"order_id": order["id"]}, headers=headers)
    assert response.status_code == 200
    assert response.json()["order_status"] == "Canceled"

    again = client.post("/users/cancel_order", json={"order_id": order["id"]}, headers=headers)
    assert again.status_code == 409


def test_carts_are_per_user(client, headers, make_product, signup_user):
    product = make_product()
    add(client, headers, product["id"])

    other = signup_user(username="bob", email="bob@example.com")
    cart = client.get("/cart/", headers={"token": other["token"]}).json()
    assert cart["product_ids"] == []


def test_checkout_of_sub_cent_products_keeps_positive_total(client, headers, make_product):
    sticker = make_product(name="Sticker", price=0.001)
    add(client, headers, sticker["id"])

    response = client.post("/cart/cart_checkout", json={"payment_method": "COD"}, headers=headers)
    assert response.status_code == 201
    assert response.json()["total_price"] == 0.001


def test_clear_cart_keeps_items_added_during_checkout(client, headers, make_product, user_auth, db):
    keyboard = make_product(name="Keyboard")
    mouse = make_product(name="Mouse", price=20)
    add(client, headers, keyboard["id"])

    # Added after checkout read the cart
    db["carts"].docs[0]["product_ids"].append(ObjectId(mouse["id"]))

    cart = asyncio.run(clear_cart(db, user_auth["user"]["id"], [keyboard["id"]]))
    assert cart.product_ids == [mouse["id"]]
    assert cart.total_price == 20

    stored = client.get("/cart/", headers=headers).json()
    assert stored["product_ids"] == [mouse["id"]]
