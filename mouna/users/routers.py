from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session

from mouna.audit import service as audit_service
from mouna.audit.models import AuditAction
from mouna.database import get_db
from mouna.users import crud as user_crud, schemas

router = APIRouter()


@router.post("/login", response_model=schemas.UserOut)
def login(credentials: schemas.LoginSchema, db: Session = Depends(get_db)):
    user = user_crud.authenticate_user(db, credentials.username, credentials.password)
    if not user:
        logger.warning(f"Authentication denied for username: {credentials.username}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    logger.info(f"User authenticated: {user.username}")
    audit_service.record_action(
        db,
        action=AuditAction.LOGIN,
        target=user.username,
        details="تسجيل دخول",
        user_id=user.id,
    )
    return user


@router.get("/users", response_model=List[schemas.UserOut])
def list_users(db: Session = Depends(get_db)):
    return user_crud.get_all_users(db)


@router.post("/users", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
def create_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    created = user_crud.create_user(db, user)
    logger.info(f"User {created.username} created")
    return created


@router.put("/users/{user_id}", response_model=schemas.UserOut)
def update_user(user_id: int, updated_user: schemas.UserUpdate, db: Session = Depends(get_db)):
    user = user_crud.update_user(db, user_id, updated_user)
    logger.info(f"User {user.username} updated successfully")
    return user


@router.delete("/users/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    result = user_crud.delete_user(db, user_id)
    logger.info(f"User {user_id} deleted successfully")
    return result
