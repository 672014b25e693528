import json
import uuid

import pytest

from conftest import bearer, make_product, signup_user


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


# --- Accounts ---

def test_signup_then_login(client):
    response = client.post("/api/user/signup", json={"name": "A", "email": "a@x.com", "password": "secret1"})
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert set(body["data"]) == {"id", "name", "email", "token"}

    response = client.post("/api/user/login", json={"email": "a@x.com", "password": "secret1"})
    assert response.status_code == 200
    login = response.json()["data"]
    assert login["id"] == body["data"]["id"]
    assert login["token"] and login["token"] != body["data"]["token"]


def test_signup_missing_fields(client):
    response = client.post("/api/user/signup", json={"name": "A", "email": "a@x.com"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "All fields are required"}


def test_signup_existing_user(client):
    signup_user(client)
    response = client.post("/api/user/signup", json={"name": "B", "email": "a@x.com", "password": "other1"})
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists"


def test_signup_without_body(client):
    response = client.post("/api/user/signup")
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_login_missing_fields(client):
    response = client.post("/api/user/login", json={"email": "a@x.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "Email and password are required"


def test_login_failures_look_the_same(client):
    signup_user(client)
    wrong_password = client.post("/api/user/login", json={"email": "a@x.com", "password": "nope"})
    unknown_email = client.post("/api/user/login", json={"email": "b@x.com", "password": "secret1"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"success": False, "message": "Invalid credentials"}
    assert wrong_password.headers["WWW-Authenticate"] == "Bearer"


def test_me(client):
    user = signup_user(client)
    response = client.get("/api/user/me", headers=bearer(user["token"]))
    assert response.status_code == 200
    assert response.json()["data"] == {"id": user["id"], "name": "A", "email": "a@x.com"}


def test_me_requires_valid_token(client):
    assert client.get("/api/user/me").status_code == 401
    assert client.get("/api/user/me", headers=bearer("garbage")).status_code == 401


def test_logout(client):
    response = client.post("/api/user/logout")
    assert response.status_code == 200
    assert response.json()["success"] is True


# --- Products ---

def test_snacks_without_expiry_rejected(client):
    response = client.post("/api/products", json=make_product(category="snacks"))
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Expiry date is required for snacks"}


def test_product_lifecycle(client):
    response = client.post("/api/products", json=make_product())
    assert response.status_code == 201
    product = response.json()["data"]

    listed = client.get("/api/products").json()
    assert listed["success"] is True
    assert product["id"] in [p["id"] for p in listed["data"]]

    response = client.get(f"/api/products/{product['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Book"

    response = client.put(f"/api/products/{product['id']}", json={"price": 150})
    assert response.status_code == 200
    assert response.json()["data"]["price"] == 150

    response = client.delete(f"/api/products/{product['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {}, "message": "Product deleted successfully"}

    assert product["id"] not in [p["id"] for p in client.get("/api/products").json()["data"]]


def test_invalid_and_unknown_ids(client):
    response = client.put("/api/products/123", json={"price": 150})
    assert response.status_code == 404
    assert response.json()["message"] == "Invalid Product Id"

    response = client.delete(f"/api/products/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["message"] == "Product not found"

    assert client.get("/api/products/123").status_code == 404


def test_second_delete_is_not_found(client):
    product = client.post("/api/products", json=make_product()).json()["data"]
    assert client.delete(f"/api/products/{product['id']}").status_code == 200
    assert client.delete(f"/api/products/{product['id']}").status_code == 404


def test_bad_enum_value_is_a_400(client):
    response = client.post("/api/products", json=make_product(category="furniture"))
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"].startswith("category")


@pytest.mark.parametrize("price", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_price_rejected(client, price):
    body = json.dumps(make_product(price="PRICE")).replace('"PRICE"', price)
    response = client.post("/api/products", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Price must be positive"}

    # Nothing unserialisable was stored
    response = client.get("/api/products")
    assert response.status_code == 200
    assert response.json()["data"] == []


def test_missing_required_product_fields(client):
    response = client.post("/api/products", json={"name": "Book"})
    assert response.status_code == 400
    assert response.json()["message"] == "Please provide all fields"


def test_list_filters(client, future_date):
    client.post("/api/products", json=make_product(name="Calculus Notes"))
    client.post("/api/products", json=make_product(name="Scooty", type="rent", category="vehicles"))
    client.post("/api/products", json=make_product(name="Maggi", category="snacks", expiry=future_date))

    names = lambda response: sorted(p["name"] for p in response.json()["data"])
    assert names(client.get("/api/products")) == ["Calculus Notes", "Maggi", "Scooty"]
    assert names(client.get("/api/products", params={"type": "rent"})) == ["Scooty"]
    assert names(client.get("/api/products", params={"category": "snacks"})) == ["Maggi"]
    assert names(client.get("/api/products", params={"search": "calc"})) == ["Calculus Notes"]
    assert client.get("/api/products", params={"type": "swap"}).status_code == 400


# --- Ownership ---

def test_listing_created_with_token_is_owned(client):
    owner = signup_user(client)
    other = signup_user(client, name="B", email="b@x.com")

    response = client.post("/api/products", json=make_product(), headers=bearer(owner["token"]))
    product = response.json()["data"]
    assert product["owner_id"] == owner["id"]

    url = f"/api/products/{product['id']}"
    assert client.put(url, json={"price": 1}).status_code == 401
    assert client.put(url, json={"price": 1}, headers=bearer(other["token"])).status_code == 403
    assert client.delete(url, headers=bearer(other["token"])).status_code == 403

    response = client.put(url, json={"price": 1}, headers=bearer(owner["token"]))
    assert response.status_code == 200
    assert client.delete(url, headers=bearer(owner["token"])).status_code == 200


def test_invalid_token_creates_anonymous_listing(client):
    response = client.post("/api/products", json=make_product(), headers=bearer("expired-or-forged"))
    assert response.status_code == 201
    assert response.json()["data"]["owner_id"] is None


def test_my_products(client):
    owner = signup_user(client)
    client.post("/api/products", json=make_product(name="Mine"), headers=bearer(owner["token"]))
    client.post("/api/products", json=make_product(name="Anonymous"))

    response = client.get("/api/products/mine", headers=bearer(owner["token"]))
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["data"]] == ["Mine"]
    assert client.get("/api/products/mine").status_code == 401
