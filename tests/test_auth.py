import jwt

from freshharvest.core_settings import get_settings
from freshharvest.infrastructure.security import create_access_token, decode_access_token, verify_password


def register(client, email="new@example.com", password="hunter22", name="New Buyer"):
    return client.post("/auth/register", json={"name": name, "email": email, "password": password})


def test_register_creates_buyer(client):
    resp = register(client, email="New@Example.com")
    assert resp.status_code == 201
    body = resp.json()
    assert body["role"] == "BUYER"
    assert body["email"] == "new@example.com"
    assert "password" not in body and "password_hash" not in body


def test_register_ignores_role_in_payload(client):
    resp = client.post("/auth/register", json={
        "name": "Sneaky", "email": "sneaky@example.com", "password": "hunter22", "role": "ADMIN",
    })
    assert resp.status_code == 201
    assert resp.json()["role"] == "BUYER"


def test_duplicate_email_is_rejected(client):
    assert register(client).status_code == 201
    resp = register(client)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Email already registered"}


def test_register_validates_email(client):
    resp = register(client, email="not-an-email")
    assert resp.status_code == 400


def test_login_returns_usable_token(client):
    register(client)
    resp = client.post("/auth/login", json={"email": "new@example.com", "password": "hunter22"})
    assert resp.status_code == 200
    token = resp.json()["access_token"]
    assert resp.json()["token_type"] == "bearer"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new@example.com"


def test_login_with_wrong_password(client):
    register(client)
    resp = client.post("/auth/login", json={"email": "new@example.com", "password": "wrong-one"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Incorrect email or password"}


def test_login_unknown_email(client):
    resp = client.post("/auth/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert resp.status_code == 401


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401


def test_expired_token_is_rejected(client, buyer):
    token = create_access_token(buyer.id, buyer.role.value, expires_minutes=-1)
    assert decode_access_token(token) is None
    resp = client.get("/orders", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_token_claims(buyer):
    claims = decode_access_token(create_access_token(buyer.id, buyer.role.value))
    assert claims["sub"] == str(buyer.id)
    assert claims["role"] == "BUYER"


def test_password_is_hashed(buyer):
    assert buyer.password_hash != "secret123"
    assert verify_password("secret123", buyer.password_hash)
    assert not verify_password("secret124", buyer.password_hash)
    assert not verify_password("secret123", "plain-text")


def test_signed_token_with_malformed_subject_is_rejected(client):
    settings = get_settings()
    for claims in ({"sub": {"id": 1}, "role": "BUYER"}, {"sub": "1", "role": ["ADMIN"]}, {"role": "BUYER"}):
        token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
        resp = client.get("/orders", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401, claims
        assert resp.json()["message"].startswith("Invalid")
