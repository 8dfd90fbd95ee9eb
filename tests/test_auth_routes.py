from sqlmodel import select

from models.models import AccountStatus, AuditLog, UserSession

from tests.conftest import PASSWORD


def test_signup_returns_token_and_user(client, session):
    response = client.post(
        "/auth/signup",
        json={"name": "Carol", "email": "carol@example.com", "password": PASSWORD},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["email"] == "carol@example.com"
    assert body["user"]["plan"] == "Starter"
    assert "password_hash" not in body["user"]

    entry = session.exec(select(AuditLog).where(AuditLog.action == "user_signup")).one()
    assert entry.user_id == body["user"]["id"]


def test_signup_duplicate_email(client, user):
    response = client.post(
        "/auth/signup",
        json={"name": "Again", "email": user.email, "password": PASSWORD},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Email already exists"


def test_signup_weak_password(client):
    response = client.post(
        "/auth/signup",
        json={"name": "Weak", "email": "weak@example.com", "password": "123"},
    )

    assert response.status_code == 400


def test_login_creates_session(client, session, user):
    response = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["session_token"]
    assert body["user"]["last_login"] is not None

    stored = session.exec(select(UserSession).where(UserSession.user_id == user.id)).one()
    assert stored.session_token == body["session_token"]


def test_login_wrong_password(client, user):
    response = client.post("/auth/login", json={"email": user.email, "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_unknown_email_looks_the_same(client):
    response = client.post("/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_cancelled_account_cannot_log_in(client, session, user):
    user.status = AccountStatus.CANCELLED
    session.add(user)
    session.commit()

    response = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})

    assert response.status_code == 403


def test_admin_login(client, separate_admin):
    response = client.post("/auth/admin/login", json={"email": separate_admin.email, "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["role"] == "superadmin"
    assert body["user"]["plan"] is None


def test_admin_login_regular_user_forbidden(client, user):
    response = client.post("/auth/admin/login", json={"email": user.email, "password": PASSWORD})

    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized as admin"


def test_verify_returns_user_and_active_subscription(client, user, user_headers):
    client.post("/subscriptions/activate", json={"plan": "Pro"}, headers=user_headers)

    response = client.get("/auth/verify", headers=user_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == user.id
    assert body["subscription"]["plan"] == "Pro"


def test_verify_admin_from_admins_table(client, separate_admin):
    login = client.post("/auth/admin/login", json={"email": separate_admin.email, "password": PASSWORD})
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    response = client.get("/auth/verify", headers=headers)

    assert response.status_code == 200
    assert response.json()["user"]["id"] == separate_admin.id
    assert response.json()["subscription"] is None


def test_session_lookup_and_logout(client, user):
    login = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
    token = login.json()["session_token"]

    response = client.get("/auth/session", headers={"X-Session-Token": token})
    assert response.status_code == 200
    assert response.json()["user_id"] == user.id

    response = client.post("/auth/logout", headers={"X-Session-Token": token})
    assert response.json() == {"success": True, "session_removed": True}

    response = client.get("/auth/session", headers={"X-Session-Token": token})
    assert response.status_code == 401


def test_logout_requires_session_token(client):
    assert client.post("/auth/logout").status_code == 401


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
