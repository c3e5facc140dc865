from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from mouna.schemas import CamelModel


# ================= CREATE =================
class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


# ================= UPDATE =================
class CategoryUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


# ================= RESPONSE =================
class CategoryOut(CamelModel):
    id: int
    name: str
    created_at: Optional[datetime] = None
