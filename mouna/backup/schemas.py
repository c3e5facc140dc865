from datetime import datetime
from typing import List, Optional

from pydantic import Field

from mouna.schemas import CamelModel
from mouna.users.schemas import Role

BACKUP_VERSION = "1.0"


class UserBackup(CamelModel):
    id: int
    username: str
    password: str
    name: str
    role: Role = Role.user
    created_at: Optional[datetime] = None


class CategoryBackup(CamelModel):
    id: int
    name: str
    created_at: Optional[datetime] = None


class ProductBackup(CamelModel):
    id: int
    barcode: Optional[str] = None
    name: str
    category: Optional[str] = None
    expiry: Optional[datetime] = None
    department: Optional[str] = None
    quantity: int = Field(default=1, ge=0)
    image: Optional[str] = None
    added_by_user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuditLogBackup(CamelModel):
    id: int
    action: str
    target: str
    details: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None


class BackupData(CamelModel):
    users: List[UserBackup]
    products: List[ProductBackup]
    categories: List[CategoryBackup] = []
    audit_logs: List[AuditLogBackup] = []


class BackupDocument(CamelModel):
    timestamp: datetime
    version: str = BACKUP_VERSION
    data: BackupData


class RestoreOut(CamelModel):
    message: str
    restored: dict
