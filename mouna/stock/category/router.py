from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mouna.database import get_db

from . import schemas, service

router = APIRouter()


# ================= CREATE =================
@router.post(
    "/categories",
    response_model=schemas.CategoryOut,
    status_code=status.HTTP_201_CREATED
)
def create_category(category: schemas.CategoryCreate, db: Session = Depends(get_db)):
    return service.create_category(db, category)


# ================= LIST =================
@router.get("/categories", response_model=List[schemas.CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return service.list_categories(db)


# ================= UPDATE =================
@router.put("/categories/{category_id}", response_model=schemas.CategoryOut)
def update_category(
    category_id: int,
    category: schemas.CategoryUpdate,
    db: Session = Depends(get_db)
):
    return service.update_category(db, category_id, category)


# ================= DELETE =================
@router.delete("/categories/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    return service.delete_category(db, category_id)
