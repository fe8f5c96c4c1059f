from conftest import PASSWORD


def signup_payload(**overrides):
    payload = {
        "email": "new@example.com",
        "password": "secret123",
        "confirm_password": "secret123",
        "full_name": "New Customer",
        "phone": "9876543210",
    }
    payload.update(overrides)
    return payload


def test_signup_creates_customer_profile(client, feed):
    resp = client.post("/auth/signup", json=signup_payload())

    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "new@example.com"
    assert body["role"] == "customer"
    assert "password_hash" not in body
    assert feed.events == [("profiles", "INSERT", body["id"])]


def test_signup_rejects_mismatched_passwords(client):
    resp = client.post("/auth/signup", json=signup_payload(confirm_password="other123"))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Passwords do not match"


def test_signup_rejects_duplicate_email(client, user):
    resp = client.post("/auth/signup", json=signup_payload(email=user.email.upper()))

    assert resp.status_code == 400


def test_signup_rejects_short_password(client):
    resp = client.post("/auth/signup", json=signup_payload(password="abc", confirm_password="abc"))

    assert resp.status_code == 422


def test_login_returns_token_for_me(client, user):
    resp = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == user.id


def test_login_with_wrong_password(client, user):
    resp = client.post("/auth/login", json={"email": user.email, "password": "wrong-pass"})

    assert resp.status_code == 401


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401


def test_me_rejects_garbage_token(client, db_session):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
