# barberqueue/deps.py

from fastapi import Depends, HTTPException

from barberqueue.auth import get_current_user
from barberqueue.schemas import UserRole


def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail=f"Only {role}s can do this")


def current_barber(current_user: dict = Depends(get_current_user)) -> dict:
    require_role(current_user, UserRole.barber.value)
    return current_user


def current_customer(current_user: dict = Depends(get_current_user)) -> dict:
    require_role(current_user, UserRole.customer.value)
    return current_user
