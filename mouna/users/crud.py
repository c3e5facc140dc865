from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from mouna.exceptions import NotFoundError
from mouna.security.passwords import hash_password, verify_password
from mouna.users import schemas as user_schemas
from mouna.users.models import User


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_all_users(db: Session):
    return db.query(User).order_by(User.id).all()


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = get_user_by_username(db, username.strip())
    if not user or not verify_password(password, user.password):
        return None
    return user


def create_user(db: Session, user: user_schemas.UserCreate) -> User:
    username = user.username.strip()
    if get_user_by_username(db, username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    new_user = User(
        username=username,
        password=hash_password(user.password),
        name=user.name.strip(),
        role=user.role.value,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user


def update_user(db: Session, user_id: int, updated_user: user_schemas.UserUpdate) -> User:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    if updated_user.username and updated_user.username.strip() != user.username:
        username = updated_user.username.strip()
        if get_user_by_username(db, username):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
        user.username = username

    if updated_user.name:
        user.name = updated_user.name.strip()

    # Only re-hash when a new password is actually typed in
    if updated_user.password and updated_user.password.strip():
        user.password = hash_password(updated_user.password)

    if updated_user.role is not None:
        user.role = updated_user.role.value

    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int):
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    db.delete(user)
    db.commit()
    return {"message": "User deleted"}
