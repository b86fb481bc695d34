"""Sign-up, sign-in, sign-out and session state."""

from datetime import datetime, timedelta

from jose import jwt
from sqlalchemy import text

from conftest import register_and_login
from app.core.auth import create_access_token, revoke_token, settings
from app.db.postgres import engine


def _register(client, **overrides):
    body = {
        "email": "asha@example.com",
        "password": "secret123",
        "confirm_password": "secret123",
        "full_name": "Asha Rao",
    }
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


def test_register_then_login_returns_token(client):
    response = _register(client)
    assert response.status_code == 201
    assert response.json()["success"] is True

    response = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["full_name"] == "Asha Rao"
    assert body["access_token"]


def test_register_rejects_mismatched_passwords(client):
    response = _register(client, confirm_password="secret124")
    assert response.status_code == 400
    assert response.json()["detail"] == "Passwords do not match"


def test_register_rejects_short_password(client):
    response = _register(client, password="abc", confirm_password="abc")
    assert response.status_code == 400
    assert response.json()["detail"] == "Password must be at least 6 characters long"


def test_register_rejects_duplicate_email(client):
    assert _register(client).status_code == 201
    response = _register(client)
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_login_with_wrong_password(client):
    _register(client)
    response = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "wrong-pass"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_with_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert response.status_code == 401


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_me_returns_current_user(client):
    headers = register_and_login(client, email="kiran@example.com", full_name="Kiran")
    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == "kiran@example.com"
    assert response.json()["full_name"] == "Kiran"


def test_session_reports_anonymous_and_signed_in(client):
    response = client.get("/api/auth/session")
    assert response.status_code == 200
    assert response.json() == {"authenticated": False, "user": None}

    headers = register_and_login(client)
    body = client.get("/api/auth/session", headers=headers).json()
    assert body["authenticated"] is True
    assert body["user"]["email"] == "priya@example.com"


def test_logout_revokes_token(client):
    headers = register_and_login(client)
    response = client.post("/api/auth/logout", headers=headers)
    assert response.status_code == 200

    assert client.get("/api/auth/me", headers=headers).status_code == 401
    assert client.get("/api/auth/session", headers=headers).json()["authenticated"] is False


def test_logout_leaves_other_tokens_valid(client):
    first = register_and_login(client)
    response = client.post("/api/auth/login", json={"email": "priya@example.com", "password": "secret123"})
    second = {"Authorization": f"Bearer {response.json()['access_token']}"}

    client.post("/api/auth/logout", headers=first)
    assert client.get("/api/auth/me", headers=second).status_code == 200


def _deactivate(email):
    with engine.begin() as connection:
        connection.execute(text("UPDATE users SET is_active = FALSE WHERE email = :email"), {"email": email})


def test_deactivated_account_cannot_login(client):
    _register(client)
    _deactivate("asha@example.com")
    response = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "secret123"})
    assert response.status_code == 403
    assert response.json()["detail"] == "Account deactivated"


def test_deactivated_account_token_is_refused(client):
    headers = register_and_login(client)
    _deactivate("priya@example.com")
    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 403
    assert client.get("/api/auth/session", headers=headers).json()["authenticated"] is False


def test_expired_token_is_rejected(client, user_id):
    token = create_access_token({"sub": str(user_id)}, expires_delta=timedelta(seconds=-1))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_without_jti_or_sub_is_rejected(client, user_id):
    expire = datetime.utcnow() + timedelta(minutes=5)
    without_jti = jwt.encode({"sub": str(user_id), "exp": expire}, settings.jwt_secret_key,
                             algorithm=settings.jwt_algorithm)
    without_sub = create_access_token({})

    for token in (without_jti, without_sub):
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


def test_revoking_twice_is_a_no_op(user_id):
    revoke_token("same-jti", user_id)
    revoke_token("same-jti", user_id)
    with engine.connect() as connection:
        count = connection.execute(text("SELECT COUNT(*) FROM revoked_tokens WHERE jti = 'same-jti'")).scalar()
    assert count == 1


def test_revoke_prunes_expired_entries(user_id):
    revoke_token("old-jti", user_id, expires_at=datetime.utcnow() - timedelta(hours=1))
    revoke_token("live-jti", user_id, expires_at=datetime.utcnow() + timedelta(hours=1))
    with engine.connect() as connection:
        rows = connection.execute(text("SELECT jti FROM revoked_tokens ORDER BY jti")).fetchall()
    assert [row[0] for row in rows] == ["live-jti"]
