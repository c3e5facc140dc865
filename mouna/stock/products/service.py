import math
from datetime import datetime
from typing import Optional, Tuple

from loguru import logger
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from mouna.audit import service as audit_service
from mouna.audit.models import AuditAction
from mouna.exceptions import IntegrityConflict, NotFoundError, ValidationFailure
from mouna.stock.memory import service as memory_service
from mouna.stock.memory.models import SavedProduct
from mouna.timeutils import expiry_day
from mouna.users.models import User

from . import schemas
from .models import Product


def _require_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise ValidationFailure(f"User {user_id} does not exist")
    return user


def memory_row(saved: SavedProduct) -> dict:
    """A remembered product shaped like a stock row: no id, no expiry, nothing on the shelf."""
    return {
        "id": None,
        "barcode": saved.barcode,
        "name": saved.name,
        "category": saved.category,
        "image": saved.image,
        "expiry": None,
        "quantity": 0,
        "department": None,
        "from_memory": True,
    }


# --------------------------------------------------
# Read
# --------------------------------------------------
def get_product(db: Session, product_id: int) -> Product:
    product = (
        db.query(Product)
        .options(joinedload(Product.added_by))
        .filter(Product.id == product_id)
        .first()
    )
    if not product:
        raise NotFoundError("Product not found")
    return product


def list_products(
    db: Session,
    barcode: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> dict:
    """
    Exact barcode match returns every batch and ignores paging. Otherwise an
    optional case-insensitive search on name or barcode, newest first.
    A barcode with no stock falls back to the memory table.
    """
    query = db.query(Product)

    if barcode:
        query = query.filter(Product.barcode == barcode)
    elif search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(Product.name.ilike(pattern), Product.barcode.ilike(pattern))
        )

    total = query.count()

    query = query.options(joinedload(Product.added_by)).order_by(
        Product.created_at.desc(), Product.id.desc()
    )
    if not barcode:
        query = query.offset((page - 1) * limit).limit(limit)

    data = query.all()

    if barcode and not data:
        saved = memory_service.get_saved_product(db, barcode)
        if saved:
            logger.info(f"Product found in memory: {saved.name}")
            data = [memory_row(saved)]

    return {
        "data": data,
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit) if limit else 0,
        },
    }


# --------------------------------------------------
# Create or merge
# --------------------------------------------------
def _merge_target_id(db: Session, barcode: str, day) -> Optional[int]:
    # The unique constraint allows one match; older data may hold more, first by id wins
    return (
        db.query(Product.id)
        .filter(Product.barcode == barcode, Product.expiry_day == day)
        .order_by(Product.id)
        .limit(1)
        .scalar()
    )


def create_or_merge_product(db: Session, payload: schemas.ProductCreate) -> Tuple[Product, bool]:
    """
    Add stock. A batch with the same barcode and expiry day absorbs the
    quantity instead of a new row being created. Returns ``(product, merged)``.
    """
    user = _require_user(db, payload.added_by_user_id)

    memory_service.remember_product(
        db, payload.barcode, payload.name, payload.category, payload.image
    )

    day = expiry_day(payload.expiry)

    if payload.barcode:
        target_id = _merge_target_id(db, payload.barcode, day)
        if target_id is not None:
            values = {
                Product.quantity: Product.quantity + payload.quantity,
                Product.name: payload.name,
                Product.category: payload.category,
                Product.updated_at: datetime.utcnow(),
            }
            if payload.image:
                values[Product.image] = payload.image

            # Single UPDATE with an in-database increment: no lost update between concurrent merges
            updated = (
                db.query(Product)
                .filter(Product.id == target_id)
                .update(values, synchronize_session=False)
            )
            db.commit()

            if updated:
                product = get_product(db, target_id)
                logger.info(f"Merged +{payload.quantity} into batch {product.id} ({product.name})")
                audit_service.record_action(
                    db,
                    action=AuditAction.UPDATE,
                    target=product.name,
                    details=f"Merged stock (+{payload.quantity}, total {product.quantity})",
                    user_id=user.id,
                )
                return product, True

    product = Product(
        barcode=payload.barcode,
        name=payload.name,
        category=payload.category,
        expiry=payload.expiry,
        department=payload.department,
        quantity=payload.quantity,
        image=payload.image,
        added_by_user_id=user.id,
    )
    db.add(product)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent create for barcode {payload.barcode} on {day}")
        raise IntegrityConflict(
            "Another request created this batch at the same time, retry to merge into it"
        )
    db.refresh(product)

    logger.info(f"Created product {product.id} ({product.name}, qty {product.quantity})")
    audit_service.record_action(
        db,
        action=AuditAction.CREATE,
        target=product.name,
        details=f"Added new product (Qty: {payload.quantity})",
        user_id=user.id,
    )
    return product, False


# --------------------------------------------------
# Update
# --------------------------------------------------
def update_product(db: Session, product_id: int, payload: schemas.ProductUpdate) -> Product:
    product = get_product(db, product_id)

    if payload.user_id is not None:
        _require_user(db, payload.user_id)

    product.name = payload.name
    product.category = payload.category
    product.expiry = payload.expiry
    product.department = payload.department
    if payload.quantity is not None:
        product.quantity = payload.quantity
    if payload.image is not None:
        product.image = payload.image

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise IntegrityConflict(
            "Another batch with this barcode already expires on that day"
        )
    db.refresh(product)

    if product.barcode:
        memory_service.remember_product(
            db, product.barcode, product.name, product.category, product.image
        )

    audit_service.record_action(
        db,
        action=AuditAction.UPDATE,
        target=product.name,
        details="Updated product details",
        user_id=payload.user_id,
    )
    return product


# --------------------------------------------------
# Delete
# --------------------------------------------------
def delete_product(db: Session, product_id: int, payload) -> dict:
    """Remove a batch. ``payload`` is a StandardDeletion or OtherDeletion."""
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")

    _require_user(db, payload.user_id)
    target = product.name

    db.delete(product)
    db.commit()

    logger.info(f"Deleted product {product_id} ({target}): {payload.reason}")
    audit_service.record_action(
        db,
        action=AuditAction.DELETE,
        target=target,
        details=payload.audit_details(),
        user_id=payload.user_id,
    )
    return {"message": "Product deleted successfully"}
