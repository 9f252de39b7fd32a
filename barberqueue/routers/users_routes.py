# barberqueue/routers/users_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberqueue.db import get_session
from barberqueue.models import User, utcnow
from barberqueue.schemas import UserCreate, UserPublic, UserUpdate
from barberqueue.auth import get_current_user, hash_password, user_to_dict
from barberqueue.errors import InvalidInput

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserPublic)
def update_me(
    changes: UserUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    # Only the profile fields; email and role are fixed at sign-up
    db_user = session.get(User, current_user["id"])
    updates = changes.model_dump(exclude_unset=True)
    if "full_name" in updates:
        if not updates["full_name"] or not updates["full_name"].strip():
            raise InvalidInput("full_name cannot be empty")
        db_user.full_name = updates["full_name"].strip()
    if "phone" in updates:
        db_user.phone = updates["phone"] or None
    db_user.updated_at = utcnow()

    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return user_to_dict(db_user)


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    email = user.email.strip().lower()

    # 1) Check if email already exists
    existing = session.exec(
        select(User).where(User.email == email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 2) Create user in DB
    db_user = User(
        email=email,
        password_hash=hash_password(user.password),
        full_name=user.full_name.strip(),
        role=user.role.value,
        phone=user.phone,
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id
    logger.info(f"User {db_user.id} signed up as {db_user.role}")

    # 3) Return public user
    return user_to_dict(db_user)
