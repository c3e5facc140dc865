from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from mouna.audit.models import AuditAction, AuditLog

RECENT_LIMIT = 50


def record_action(
    db: Session,
    action: AuditAction,
    target: str,
    details: str,
    user_id: Optional[int],
) -> Optional[AuditLog]:
    """
    Append an audit row after the main write has been committed.

    A failed audit write is logged and rolled back, never raised: losing an
    audit entry is tolerable, failing an already-committed stock change is not.
    Without a user id nothing is recorded.
    """
    if user_id is None:
        logger.debug(f"Audit {action.value} on '{target}' skipped: no user id")
        return None

    entry = AuditLog(
        action=action.value,
        target=target,
        details=details,
        user_id=user_id,
    )
    try:
        db.add(entry)
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Audit write failed: {action.value} '{target}' by user {user_id}")
        return None

    return entry


def list_recent(db: Session, limit: int = RECENT_LIMIT):
    return (
        db.query(AuditLog)
        .options(joinedload(AuditLog.user))
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
        .all()
    )
