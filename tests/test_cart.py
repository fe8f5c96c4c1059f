import pytest
from sqlalchemy.exc import IntegrityError

from storefront.data.models import CartModel
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService

from conftest import auth_headers


def test_cart_is_created_on_first_read(client, user, user_headers):
    resp = client.get("/cart", headers=user_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["user_id"] == user.id
    assert body["items"] == []
    assert body["item_count"] == 0


def test_cart_requires_login(client):
    assert client.get("/cart").status_code == 401


def test_adding_same_product_merges_quantity(client, user_headers, make_product):
    product = make_product(price="100.00", stock=10)

    client.post("/cart/items", json={"product_id": product.id, "quantity": 2}, headers=user_headers)
    resp = client.post("/cart/items", json={"product_id": product.id, "quantity": 3}, headers=user_headers)

    body = resp.json()
    assert len(body["items"]) == 1
    assert body["items"][0]["quantity"] == 5
    assert body["item_count"] == 5
    assert float(body["total"]) == 500.0


def test_adding_more_than_stock_is_rejected(client, user_headers, make_product):
    product = make_product(stock=2)

    resp = client.post("/cart/items", json={"product_id": product.id, "quantity": 3}, headers=user_headers)

    assert resp.status_code == 400
    assert "in stock" in resp.json()["detail"]


def test_adding_unknown_product_is_404(client, user_headers):
    resp = client.post("/cart/items", json={"product_id": 999, "quantity": 1}, headers=user_headers)

    assert resp.status_code == 404


def test_update_quantity(client, user_headers, make_product):
    product = make_product(price="50.00", stock=10)
    item_id = client.post(
        "/cart/items", json={"product_id": product.id}, headers=user_headers
    ).json()["items"][0]["id"]

    resp = client.patch(f"/cart/items/{item_id}", json={"quantity": 4}, headers=user_headers)

    assert resp.status_code == 200
    assert resp.json()["items"][0]["quantity"] == 4
    assert float(resp.json()["total"]) == 200.0


def test_quantity_below_one_is_rejected(client, user_headers, make_product):
    product = make_product()
    item_id = client.post(
        "/cart/items", json={"product_id": product.id}, headers=user_headers
    ).json()["items"][0]["id"]

    resp = client.patch(f"/cart/items/{item_id}", json={"quantity": 0}, headers=user_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Quantity must be at least 1"


def test_remove_and_clear(client, user_headers, make_product):
    first = make_product("Oil")
    second = make_product("Mat")
    client.post("/cart/items", json={"product_id": first.id}, headers=user_headers)
    body = client.post("/cart/items", json={"product_id": second.id}, headers=user_headers).json()

    item_id = next(i["id"] for i in body["items"] if i["product_id"] == first.id)
    resp = client.delete(f"/cart/items/{item_id}", headers=user_headers)
    assert [i["product_id"] for i in resp.json()["items"]] == [second.id]

    resp = client.delete("/cart", headers=user_headers)
    assert resp.json()["items"] == []


def test_other_users_item_looks_missing(client, user_headers, make_user, make_product):
    product = make_product()
    item_id = client.post(
        "/cart/items", json={"product_id": product.id}, headers=user_headers
    ).json()["items"][0]["id"]
    other = auth_headers(make_user(email="ravi@example.com"))

    resp = client.delete(f"/cart/items/{item_id}", headers=other)

    assert resp.status_code == 404


def test_missing_email_is_backfilled(db_session, user):
    db_session.add(CartModel(user_id=user.id, user_email=None))
    db_session.commit()

    cart = CartService(db_session).ensure_cart(user)

    assert cart.user_email == user.email


class RacingCartRepo:
    """Loses the insert race: another request creates the cart first."""

    def __init__(self, real: CartRepo, always_conflict=False):
        self.real = real
        self.always_conflict = always_conflict
        self.reads = 0
        self.inserts = 0

    def get_cart_by_user(self, user_id):
        self.reads += 1
        if self.reads == 1 or self.always_conflict:
            return None
        return self.real.get_cart_by_user(user_id)

    def create_cart(self, cart):
        self.inserts += 1
        if self.inserts == 1:
            self.real.create_cart(CartModel(user_id=cart.user_id, user_email=cart.user_email))
        raise IntegrityError("INSERT INTO carts", {}, Exception("UNIQUE constraint failed: carts.user_id"))

    def rollback(self):
        self.real.rollback()

    def set_user_email(self, cart, email):
        self.real.set_user_email(cart, email)


def test_create_conflict_rereads_existing_cart(db_session, user):
    svc = CartService(db_session)
    racing = RacingCartRepo(svc.repo)
    svc.repo = racing

    cart = svc.ensure_cart(user)

    assert cart.user_id == user.id
    assert racing.reads == 2
    assert racing.inserts == 1


def test_repeated_conflict_is_reported(db_session, user):
    svc = CartService(db_session)
    svc.repo = RacingCartRepo(svc.repo, always_conflict=True)

    with pytest.raises(RuntimeError):
        svc.ensure_cart(user)
