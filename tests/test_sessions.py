from datetime import datetime, timedelta

from models.models import UserSession
from services import session_service


def test_create_and_lookup(session, user):
    created = session_service.create_session(session, user.id, user_agent="pytest", ip_address="127.0.0.1")

    found = session_service.lookup_session(session, created.session_token)

    assert found is not None
    assert found.user_id == user.id
    assert found.ip_address == "127.0.0.1"


def test_expired_session_is_not_returned_even_before_pruning(session, user):
    created = session_service.create_session(session, user.id, lifetime=timedelta(seconds=-1))

    assert session_service.lookup_session(session, created.session_token) is None
    assert session.get(UserSession, created.id) is not None


def test_unknown_or_empty_token(session):
    assert session_service.lookup_session(session, "nope") is None
    assert session_service.lookup_session(session, "") is None


def test_lookup_slides_expiry_forward(session, user):
    created = session_service.create_session(session, user.id, lifetime=timedelta(minutes=5))
    short_expiry = created.expires_at

    found = session_service.lookup_session(session, created.session_token)

    assert found.expires_at > short_expiry
    assert found.expires_at > datetime.utcnow() + timedelta(hours=23)


def test_lookup_never_shortens_expiry(session, user):
    created = session_service.create_session(session, user.id, lifetime=timedelta(days=30))
    long_expiry = created.expires_at

    found = session_service.lookup_session(session, created.session_token)

    assert found.expires_at == long_expiry


def test_delete_session(session, user):
    created = session_service.create_session(session, user.id)

    assert session_service.delete_session(session, created.session_token) is True
    assert session_service.delete_session(session, created.session_token) is False


def test_prune_removes_only_expired(session, user):
    live = session_service.create_session(session, user.id)
    session_service.create_session(session, user.id, lifetime=timedelta(seconds=-1))
    session_service.create_session(session, user.id, lifetime=timedelta(hours=-2))

    assert session_service.prune_expired_sessions(session) == 2

    session.expire_all()
    assert session_service.lookup_session(session, live.session_token) is not None


def test_prune_endpoint(client, session, user, admin_headers):
    session_service.create_session(session, user.id, lifetime=timedelta(seconds=-1))

    response = client.post("/admin/maintenance/prune-sessions", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"deleted": 1}


def test_expiry_is_stored_without_timezone(session, user):
    created = session_service.create_session(session, user.id, lifetime=timedelta(hours=1))
    expected = created.expires_at

    session.expire_all()
    reloaded = session.get(UserSession, created.id)

    assert reloaded.expires_at.tzinfo is None
    assert reloaded.expires_at == expected
