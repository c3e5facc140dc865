from datetime import datetime
from typing import Optional

from mouna.schemas import CamelModel
from mouna.users.schemas import UserBrief


class AuditLogOut(CamelModel):
    id: int
    action: str
    target: str
    details: Optional[str] = None
    user_id: Optional[int] = None
    created_at: datetime
    user: Optional[UserBrief] = None
