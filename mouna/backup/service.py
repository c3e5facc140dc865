from datetime import datetime
from typing import Any

import pytz
from loguru import logger
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mouna.audit.models import AuditLog
from mouna.exceptions import TransactionFailure, ValidationFailure
from mouna.security.passwords import hash_password, pwd_context
from mouna.stock.category.models import Category
from mouna.stock.products.models import Product
from mouna.users.models import User

from .schemas import BACKUP_VERSION, BackupData

# Delete children first; restore parents first. saved_products is never touched.
DELETE_ORDER = (AuditLog, Product, Category, User)
SEQUENCED_TABLES = ("users", "categories", "products", "audit_logs")


def create_backup(db: Session) -> dict:
    return {
        "timestamp": datetime.now(pytz.utc),
        "version": BACKUP_VERSION,
        "data": {
            "users": db.query(User).order_by(User.id).all(),
            "products": db.query(Product).order_by(Product.id).all(),
            "categories": db.query(Category).order_by(Category.id).all(),
            "audit_logs": db.query(AuditLog).order_by(AuditLog.id).all(),
        },
    }


def _describe_errors(exc: ValidationError) -> list:
    # ('products', 3, 'quantity') -> "products[3].quantity"
    problems = []
    for error in exc.errors():
        path = ""
        for part in error["loc"]:
            path += f"[{part}]" if isinstance(part, int) else (f".{part}" if path else str(part))
        problems.append(f"{path}: {error['msg']}")
    return problems


def parse_backup(payload: Any) -> BackupData:
    """Structural check first (users and products must be arrays), then every row."""
    data = payload.get("data") if isinstance(payload, dict) else None
    if (
        not isinstance(data, dict)
        or not isinstance(data.get("users"), list)
        or not isinstance(data.get("products"), list)
    ):
        raise ValidationFailure("Invalid backup file format")

    try:
        return BackupData.model_validate(data)
    except ValidationError as e:
        raise ValidationFailure({"error": "Invalid backup file format", "problems": _describe_errors(e)})


def _stored_password(value: str) -> str:
    # Older backups carry plaintext passwords; never store those as-is
    if pwd_context.identify(value, required=False):
        return value
    return hash_password(value)


def _reset_sequences(db: Session):
    if db.get_bind().dialect.name != "postgresql":
        return
    for table in SEQUENCED_TABLES:
        db.execute(text(
            f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
            f"COALESCE((SELECT MAX(id) FROM {table}), 1), "
            f"(SELECT MAX(id) FROM {table}) IS NOT NULL)"
        ))


def restore_backup(db: Session, payload: Any) -> dict:
    """
    Replace users, categories, products and audit logs with the backup content
    in one transaction. Any failure rolls the whole restore back.
    """
    backup = parse_backup(payload)
    logger.info("[RESTORE] Starting restore process...")

    try:
        for model in DELETE_ORDER:
            db.query(model).delete(synchronize_session=False)
        db.flush()

        for row in backup.users:
            fields = row.model_dump(exclude_none=True)
            fields["password"] = _stored_password(row.password)
            fields["role"] = row.role.value
            db.add(User(**fields))
        db.flush()

        for row in backup.categories:
            db.add(Category(**row.model_dump(exclude_none=True)))
        db.flush()

        batch_keys = set()
        for row in sorted(backup.products, key=lambda r: r.id):
            product = Product(**row.model_dump(exclude_none=True))
            key = (product.barcode, product.expiry_day)
            if product.barcode and product.expiry_day and key in batch_keys:
                # Older data may hold several rows per batch; the first by id keeps the merge key
                logger.warning(f"[RESTORE] Product {row.id} duplicates batch {key}, restored without a merge key")
                product.expiry_day = None
            batch_keys.add(key)
            db.add(product)
        db.flush()

        for row in backup.audit_logs:
            db.add(AuditLog(**row.model_dump(exclude_none=True)))
        db.flush()

        _reset_sequences(db)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Restore failed")
        raise TransactionFailure(f"Restore failed: {getattr(e, 'orig', e)}")

    restored = {
        "users": len(backup.users),
        "categories": len(backup.categories),
        "products": len(backup.products),
        "auditLogs": len(backup.audit_logs),
    }
    logger.info(f"[RESTORE] Completed successfully: {restored}")
    return {"message": "Restore successful", "restored": restored}
