from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from mouna.exceptions import NotFoundError, ValidationFailure

from . import models, schemas


def _get_or_404(db: Session, category_id: int) -> models.Category:
    db_category = (
        db.query(models.Category)
        .filter(models.Category.id == category_id)
        .first()
    )
    if not db_category:
        raise NotFoundError("Category not found")
    return db_category


# ================= CREATE =================
def create_category(db: Session, category: schemas.CategoryCreate):
    name = category.name.strip()
    if not name:
        raise ValidationFailure("Category name is required")

    existing = (
        db.query(models.Category)
        .filter(models.Category.name == name)
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category '{name}' already exists"
        )

    db_category = models.Category(name=name)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


# ================= LIST =================
def list_categories(db: Session):
    return db.query(models.Category).order_by(models.Category.name).all()


# ================= UPDATE =================
def update_category(db: Session, category_id: int, category: schemas.CategoryUpdate):
    db_category = _get_or_404(db, category_id)
    name = category.name.strip()

    name_exists = (
        db.query(models.Category)
        .filter(models.Category.name == name)
        .filter(models.Category.id != category_id)
        .first()
    )
    if name_exists:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another category with this name already exists"
        )

    db_category.name = name
    db.commit()
    db.refresh(db_category)
    return db_category


# ================= DELETE =================
def delete_category(db: Session, category_id: int):
    db_category = _get_or_404(db, category_id)
    db.delete(db_category)
    db.commit()
    return {"message": "Category deleted"}
