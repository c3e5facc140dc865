#!/usr/bin/env python3
"""Create the default accounts and categories. Safe to run more than once."""
import argparse
import sys

from loguru import logger
from sqlalchemy.orm import Session

from mouna.config import settings
from mouna.database import build_engine, build_session_factory, init_db
from mouna.logger import configure_logging
from mouna.security.passwords import hash_password
from mouna.stock.category.models import Category
from mouna.users.models import User

DEFAULT_USERS = [
    {"username": "admin", "password": "admin", "name": "المدير العام", "role": "admin"},
    {"username": "navid", "password": "123", "name": "مساعد مدير", "role": "supervisor"},
]

DEFAULT_CATEGORIES = ["الألبان", "الزيوت", "الحبوب", "المشروبات", "الأجبان"]


def seed(db: Session) -> dict:
    created = {"users": 0, "categories": 0}

    for account in DEFAULT_USERS:
        if db.query(User).filter(User.username == account["username"]).first():
            continue
        db.add(User(
            username=account["username"],
            password=hash_password(account["password"]),
            name=account["name"],
            role=account["role"],
        ))
        created["users"] += 1

    for name in DEFAULT_CATEGORIES:
        if db.query(Category).filter(Category.name == name).first():
            continue
        db.add(Category(name=name))
        created["categories"] += 1

    db.commit()
    return created


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed default Mouna accounts and categories.")
    parser.add_argument(
        "--database-url", default=settings.DATABASE_URL,
        help="Database URL (default: DATABASE_URL from the environment)"
    )
    args = parser.parse_args(argv)

    configure_logging(settings)
    engine = build_engine(args.database_url)
    init_db(engine)
    db = build_session_factory(engine)()
    try:
        created = seed(db)
    finally:
        db.close()
        engine.dispose()

    logger.info(f"Seed complete: {created}")
    logger.warning("Default passwords are in use; change them from the user management screen.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
