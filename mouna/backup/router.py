from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from mouna.database import get_db

from . import schemas, service

router = APIRouter()


@router.get("/backup", response_model=schemas.BackupDocument)
def backup(db: Session = Depends(get_db)):
    """Snapshot of users, products, categories and audit logs. The barcode memory is not included."""
    return service.create_backup(db)


@router.post("/restore", response_model=schemas.RestoreOut)
def restore(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    return service.restore_backup(db, payload)
