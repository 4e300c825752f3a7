# tests/test_cart_api.py
import uuid


def _add(client, **payload):
    return client.post("/api/cart", json=payload)


def test_add_merge_and_list_scenario(client, make_product):
    product = make_product(name="Dragão Fantasia")

    first = _add(client, sessionId="s1", productId=product["id"], quantity=2)
    assert first.status_code == 201
    assert first.json()["quantity"] == 2

    second = _add(client, sessionId="s1", productId=product["id"], quantity=3)
    assert second.status_code == 201
    assert second.json()["quantity"] == 5
    assert second.json()["id"] == first.json()["id"]

    cart = client.get("/api/cart", params={"sessionId": "s1"})
    assert cart.status_code == 200
    items = cart.json()
    assert len(items) == 1
    assert items[0]["quantity"] == 5
    assert items[0]["product"]["id"] == product["id"]
    assert items[0]["product"]["name"] == "Dragão Fantasia"


def test_quantity_defaults_to_one(client, make_product):
    product = make_product()

    resp = _add(client, sessionId="s1", productId=product["id"])

    assert resp.status_code == 201
    assert resp.json()["quantity"] == 1


def test_cart_requires_an_owner_key(client, make_product):
    product = make_product()

    assert client.get("/api/cart").status_code == 400
    assert client.get("/api/cart", params={"sessionId": ""}).status_code == 400

    resp = _add(client, productId=product["id"], quantity=1)
    assert resp.status_code == 400
    assert resp.json()["errors"]


def test_add_rejects_bad_quantity_and_unknown_product(client, make_product):
    product = make_product()

    zero = _add(client, sessionId="s1", productId=product["id"], quantity=0)
    missing = _add(client, sessionId="s1", productId=str(uuid.uuid4()), quantity=1)

    assert zero.status_code == 400
    assert zero.json()["errors"][0]["field"] == "body.quantity"
    assert missing.status_code == 404


def test_customer_id_takes_precedence_over_session_id(client, make_product):
    product = make_product()
    customer = client.post("/api/customers", json={"email": "ana@example.com", "name": "Ana"}).json()

    resp = _add(client, sessionId="s1", customerId=customer["id"], productId=product["id"], quantity=2)

    assert resp.status_code == 201
    assert resp.json()["customerId"] == customer["id"]
    assert resp.json()["sessionId"] is None

    assert client.get("/api/cart", params={"sessionId": "s1"}).json() == []
    both = client.get("/api/cart", params={"sessionId": "s1", "customerId": customer["id"]})
    assert [it["quantity"] for it in both.json()] == [2]


def test_unknown_customer_cart_is_404(client, make_product):
    product = make_product()

    resp = _add(client, customerId=str(uuid.uuid4()), productId=product["id"], quantity=1)

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Customer not found"


def test_update_quantity(client, make_product):
    product = make_product()
    item = _add(client, sessionId="s1", productId=product["id"], quantity=2).json()

    resp = client.put(f"/api/cart/{item['id']}", json={"quantity": 7})

    assert resp.status_code == 200
    assert resp.json()["quantity"] == 7


def test_update_quantity_below_one_leaves_row_untouched(client, make_product):
    product = make_product()
    item = _add(client, sessionId="s1", productId=product["id"], quantity=2).json()

    for bad in (0, -3):
        resp = client.put(f"/api/cart/{item['id']}", json={"quantity": bad})
        assert resp.status_code == 400

    cart = client.get("/api/cart", params={"sessionId": "s1"}).json()
    assert cart[0]["quantity"] == 2


def test_update_missing_item_is_404(client):
    resp = client.put(f"/api/cart/{uuid.uuid4()}", json={"quantity": 1})

    assert resp.status_code == 404


def test_remove_item_twice(client, make_product):
    product = make_product()
    item = _add(client, sessionId="s1", productId=product["id"], quantity=1).json()

    first = client.delete(f"/api/cart/{item['id']}")
    second = client.delete(f"/api/cart/{item['id']}")

    assert first.status_code == 200
    assert second.status_code == 404


def test_clear_cart_with_body_or_query(client, make_product):
    cat = make_product(name="Cat")
    vase = make_product(name="Vase")
    _add(client, sessionId="s1", productId=cat["id"], quantity=1)
    _add(client, sessionId="s1", productId=vase["id"], quantity=1)
    _add(client, sessionId="s2", productId=cat["id"], quantity=1)

    resp = client.request("DELETE", "/api/cart/clear", json={"sessionId": "s1"})
    assert resp.status_code == 200
    assert resp.json()["removed"] == 2
    assert client.get("/api/cart", params={"sessionId": "s1"}).json() == []

    resp = client.post("/api/cart/clear", params={"sessionId": "s2"})
    assert resp.status_code == 200
    assert client.get("/api/cart", params={"sessionId": "s2"}).json() == []


def test_clear_cart_requires_an_owner_key(client):
    assert client.request("DELETE", "/api/cart/clear", json={}).status_code == 400
    assert client.post("/api/cart/clear").status_code == 400


def test_cart_line_for_deleted_product_has_null_product(client, make_product):
    product = make_product()
    _add(client, sessionId="s1", productId=product["id"], quantity=1)

    client.delete(f"/api/products/{product['id']}")
    cart = client.get("/api/cart", params={"sessionId": "s1"})

    assert cart.status_code == 200
    assert cart.json()[0]["product"] is None
