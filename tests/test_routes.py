from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from guestpost.app import create_app
from guestpost.repositories.kv_store import MemoryStore


@pytest.fixture()
def client():
    app = create_app(MemoryStore())
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


def _register(client, email, role="buyer", **overrides):
    data = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": email,
        "phone": "+351900000000",
        "country": "Portugal",
        "city": "Porto",
        "role": role,
        "password": "secret1",
        "confirm_password": "secret1",
    }
    data.update(overrides)
    return client.post("/register", data=data)


def _login(client, email, password):
    return client.post("/login", data={"email": email, "password": password})


def _listing(**overrides):
    data = {
        "title": "Tech blog post",
        "description": "Dofollow article",
        "price": "150",
        "website_url": "https://techblog.example",
        "da": "45",
        "dr": "50",
        "traffic": "20K",
    }
    data.update(overrides)
    return data


def test_dashboards_redirect_to_login_without_matching_role(client):
    for path in ("/buyer-dashboard", "/seller-dashboard", "/admin-dashboard"):
        resp = client.get(path)
        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"

    _register(client, "buyer@example.com")
    assert client.get("/buyer-dashboard").status_code == 200
    assert client.get("/admin-dashboard").headers["location"] == "/login"


def test_register_buyer_logs_in_and_seller_waits(client):
    resp = _register(client, "buyer@example.com")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/buyer-dashboard"

    client.post("/logout")
    resp = _register(client, "seller@example.com", role="seller")
    assert resp.status_code == 200
    assert resp.json()["redirect"] == "/login"
    assert client.get("/login").json()["user"] is None

    resp = _login(client, "seller@example.com", "secret1")
    assert resp.status_code == 403
    assert "pending approval" in resp.json()["error"]


def test_register_errors(client):
    assert _register(client, "a@example.com", confirm_password="nope").status_code == 400
    assert _register(client, "a@example.com").status_code == 303
    resp = _register(client, "a@example.com")
    assert resp.status_code == 409
    assert resp.json()["error"] == "Email already exists. Please use a different email."


def test_full_marketplace_flow(client):
    _register(client, "seller@example.com", role="seller", first_name="Sam", last_name="Seller")
    resp = _login(client, "admin@guestpost.com", "admin123")
    assert resp.headers["location"] == "/admin-dashboard"

    board = client.get("/admin-dashboard", params={"status": "pending"}).json()
    seller = next(u for u in board["users"] if u["email"] == "seller@example.com")
    resp = client.post(f"/admin-dashboard/users/{seller['id']}/approval", data={"approved": "true"})
    assert resp.json()["notice"] == "Sam's account has been approved!"
    client.post("/logout")

    assert _login(client, "seller@example.com", "secret1").headers["location"] == "/seller-dashboard"
    created = client.post("/seller-dashboard/services", data=_listing()).json()["service"]
    assert created["isApproved"] is False
    assert client.get("/services").json()["count"] == 0
    client.post("/logout")

    _login(client, "admin@guestpost.com", "admin123")
    client.post(f"/admin-dashboard/services/{created['id']}/approval", data={"approved": "1"})
    client.post("/logout")

    _register(client, "buyer@example.com")
    detail = client.get(f"/service/{created['id']}").json()["service"]
    assert detail["sellerName"] == "Sam Seller"
    resp = client.post(f"/service/{created['id']}/order", data={"message": "Article about AI"})
    order = resp.json()["order"]
    assert order["status"] == "pending"
    pending_tab = client.get("/buyer-dashboard", params={"tab": "pending"}).json()
    assert pending_tab["stats"]["pending"] == 1
    assert [o["id"] for o in pending_tab["orders"]] == [order["id"]]
    assert client.get("/buyer-dashboard", params={"tab": "completed"}).json()["orders"] == []
    client.post("/logout")

    _login(client, "seller@example.com", "secret1")
    status_url = f"/seller-dashboard/orders/{order['id']}/status"
    assert client.post(status_url, data={"status": "accepted"}).json()["order"]["status"] == "accepted"
    assert client.post(status_url, data={"status": "pending"}).status_code == 409
    assert client.post(status_url, data={"status": "completed"}).status_code == 200
    board = client.get("/seller-dashboard").json()
    assert board["stats"]["totalEarnings"] == 150

    resp = client.post(f"/seller-dashboard/services/{created['id']}", data=_listing(price="200"))
    assert resp.json()["service"]["isApproved"] is False
    assert client.get(f"/service/{created['id']}").headers["location"] == "/services"


def test_catalog_query_params(client):
    _register(client, "seller@example.com", role="seller")
    _login(client, "admin@guestpost.com", "admin123")
    seller = next(u for u in client.get("/admin-dashboard").json()["users"] if u["role"] == "seller")
    client.post(f"/admin-dashboard/users/{seller['id']}/approval", data={"approved": "true"})
    client.post("/logout")

    _login(client, "seller@example.com", "secret1")
    ids = [
        client.post("/seller-dashboard/services", data=_listing(title=f"Listing {price}", price=str(price))).json()["service"]["id"]
        for price in (50, 150, 300)
    ]
    client.post("/logout")

    _login(client, "admin@guestpost.com", "admin123")
    for service_id in ids:
        client.post(f"/admin-dashboard/services/{service_id}/approval", data={"approved": "true"})

    resp = client.get("/services", params={"min_price": "100", "max_price": "200"})
    assert [s["price"] for s in resp.json()["services"]] == [150]
    assert (resp.json()["count"], resp.json()["total"]) == (1, 3)
    resp = client.get("/services", params={"min_price": "", "sort": "price-high"})
    assert [s["price"] for s in resp.json()["services"]] == [300, 150, 50]
    assert client.get("/services", params={"min_da": "many"}).status_code == 400

    home = client.get("/").json()
    assert home["stats"]["totalServices"] == 3
    assert home["stats"]["totalSellers"] == 1
    assert home["nav"]["dashboard"] == "/admin-dashboard"


def test_non_buyer_cannot_order(client):
    _login(client, "admin@guestpost.com", "admin123")
    resp = client.post("/service/anything/order", data={"message": "hi"})
    assert resp.status_code == 403
    client.post("/logout")
    resp = client.post("/service/anything/order", data={"message": "hi"})
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


def test_admin_cannot_flip_buyers_or_delete_admins(client):
    _register(client, "buyer@example.com")
    client.post("/logout")
    _login(client, "admin@guestpost.com", "admin123")
    users = {u["email"]: u for u in client.get("/admin-dashboard").json()["users"]}

    resp = client.post(f"/admin-dashboard/users/{users['buyer@example.com']['id']}/approval", data={"approved": "false"})
    assert resp.status_code == 400
    assert client.post("/admin-dashboard/users/admin-001/delete").status_code == 400
    board = client.get("/admin-dashboard").json()
    assert [u["isApproved"] for u in board["users"]] == [True]
    assert client.get("/").json()["nav"]["dashboard"] == "/admin-dashboard"
