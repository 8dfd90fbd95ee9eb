from sqlalchemy.exc import OperationalError
from sqlmodel import select

from models.models import AuditLog
from services import account_service, audit_service


def test_record_keeps_known_actor(session, user):
    entry = audit_service.record(session, "user_login", actor_id=user.id, entity_type="user", entity_id=user.id)

    assert entry.user_id == user.id


def test_record_nulls_unknown_actor(session, separate_admin):
    entry = audit_service.record(session, "package_created", actor_id=separate_admin.id, entity_type="package")

    assert entry is not None
    assert entry.user_id is None


def test_failed_audit_write_is_swallowed(session, user, monkeypatch):
    def broken_commit():
        raise OperationalError("INSERT INTO audit_logs", {}, Exception("disk full"))

    monkeypatch.setattr(session, "commit", broken_commit)

    assert audit_service.record(session, "user_login", actor_id=user.id) is None


def test_deleting_user_keeps_their_audit_entries(session, user):
    audit_service.record(session, "user_login", actor_id=user.id)
    user_id = user.id

    account_service.delete_account(session, user_id)

    session.expire_all()
    entry = session.exec(select(AuditLog)).one()
    assert entry.user_id is None


def test_list_entries_filters(session, user):
    audit_service.record(session, "user_login", actor_id=user.id, entity_type="user")
    audit_service.record(session, "package_created", entity_type="package")

    assert [e.action for e in audit_service.list_entries(session, action="package_created")] == ["package_created"]
    assert len(audit_service.list_entries(session, entity_type="user")) == 1
    assert len(audit_service.list_entries(session, limit=1)) == 1


def test_separate_admin_writes_are_audited_with_null_actor(client, session, separate_admin):
    login = client.post("/auth/admin/login", json={"email": separate_admin.email, "password": "pw123456"})
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    response = client.post("/packages/", json={"name": "Pack", "price": 1}, headers=headers)
    assert response.status_code == 201

    entry = session.exec(select(AuditLog).where(AuditLog.action == "package_created")).one()
    assert entry.user_id is None
    assert entry.entity_id == response.json()["id"]


def test_audit_log_endpoint(client, admin_headers, user):
    client.post("/auth/login", json={"email": user.email, "password": "pw123456"})

    response = client.get("/admin/audit-logs", params={"action": "user_login"}, headers=admin_headers)

    assert response.status_code == 200
    assert [e["action"] for e in response.json()] == ["user_login"]
