from datetime import datetime, timedelta

from mouna.audit.models import AuditAction, AuditLog
from mouna.audit.service import record_action


def test_audit_logs_newest_first_capped_at_fifty(client, admin, session_factory):
    base = datetime(2026, 1, 1)
    with session_factory() as db:
        for i in range(60):
            db.add(AuditLog(
                action="UPDATE", target=f"item {i}", details="", user_id=admin["id"],
                created_at=base + timedelta(minutes=i),
            ))
        db.commit()

    logs = client.get("/api/audit-logs").json()

    assert len(logs) == 50
    assert logs[0]["target"] == "item 59"
    assert logs[-1]["target"] == "item 10"
    assert logs[0]["user"]["name"] == "المدير العام"


def test_record_action_without_user_is_skipped(session_factory):
    with session_factory() as db:
        assert record_action(db, AuditAction.UPDATE, "x", "details", None) is None
        assert db.query(AuditLog).count() == 0


def test_record_action_failure_is_not_raised(session_factory):
    with session_factory() as db:
        # user 4242 does not exist; the foreign key rejects the row
        assert record_action(db, AuditAction.DELETE, "x", "details", 4242) is None
        assert db.query(AuditLog).count() == 0
