from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mouna.audit import schemas, service
from mouna.database import get_db

router = APIRouter()


@router.get("/audit-logs", response_model=List[schemas.AuditLogOut])
def list_audit_logs(db: Session = Depends(get_db)):
    """Latest 50 entries, newest first, with the acting user's name and role."""
    return service.list_recent(db)
