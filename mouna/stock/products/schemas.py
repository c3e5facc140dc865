from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from mouna.schemas import CamelModel


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# -------------------------------
# Create (or merge into an existing batch)
# -------------------------------
class ProductCreate(CamelModel):
    barcode: Optional[str] = None
    name: str = Field(min_length=1)
    category: Optional[str] = None
    expiry: datetime
    department: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    image: Optional[str] = None
    added_by_user_id: int

    @field_validator("barcode", "category", "department", "image", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v


# -------------------------------
# Update (full replacement of editable fields)
# -------------------------------
class ProductUpdate(CamelModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    expiry: datetime
    department: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    image: Optional[str] = None
    user_id: Optional[int] = None

    @field_validator("category", "department", "image", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v


# -------------------------------
# Delete reasons
# -------------------------------
# sold / expired / returned to supplier
class StandardDeletion(CamelModel):
    user_id: int
    reason: Literal["تم البيع", "انتهت الصلاحية", "مرتجع للشركة"]

    def audit_details(self) -> str:
        return f"حذف: {self.reason}"


# "other" is the only reason that carries free text
class OtherDeletion(CamelModel):
    user_id: int
    reason: Literal["أخرى"]
    reason_details: Optional[str] = None

    @field_validator("reason_details", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    def audit_details(self) -> str:
        if self.reason_details:
            return f"حذف: {self.reason} - {self.reason_details}"
        return f"حذف: {self.reason}"


ProductDelete = Annotated[
    Union[StandardDeletion, OtherDeletion],
    Field(discriminator="reason"),
]


# -------------------------------
# Output
# -------------------------------
class AddedBy(CamelModel):
    name: str


class ProductOut(CamelModel):
    id: Optional[int] = None  # None for a remembered product that is not in stock
    barcode: Optional[str] = None
    name: str
    category: Optional[str] = None
    expiry: Optional[datetime] = None
    department: Optional[str] = None
    quantity: int = 0
    image: Optional[str] = None
    added_by_user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    added_by: Optional[AddedBy] = None
    from_memory: bool = False


class ProductWriteOut(ProductOut):
    merged: bool = False


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class ProductListOut(CamelModel):
    data: List[ProductOut]
    pagination: Pagination


class LookupOut(CamelModel):
    found: bool
    exists: bool = False
    from_memory: bool = False
    source: Optional[Literal["stock", "memory", "external"]] = None
    product: Optional[ProductOut] = None


class DeleteOut(BaseModel):
    message: str
