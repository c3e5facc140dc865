from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from mouna.schemas import CamelModel


class Role(str, Enum):
    admin = "admin"
    supervisor = "supervisor"
    user = "user"


# -------- LOGIN --------
class LoginSchema(BaseModel):
    username: str
    password: str


# -------- USERS --------
class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)
    role: Role = Role.user


class UserUpdate(BaseModel):
    name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None  # blank keeps the current password
    role: Optional[Role] = None


class UserOut(CamelModel):
    id: int
    username: str
    name: str
    role: Role
    created_at: Optional[datetime] = None


class UserBrief(CamelModel):
    name: str
    role: Optional[Role] = None
