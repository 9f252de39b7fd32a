# barberqueue/routers/shops_routes.py

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from barberqueue import directory, queue_manager
from barberqueue.auth import get_current_user
from barberqueue.db import get_session
from barberqueue.events import bus
from barberqueue.schemas import (
    ERROR_RESPONSES,
    AppointmentStatus,
    QueueVersion,
    QueueView,
    ShopBarberPublic,
    ShopCreate,
    ShopPublic,
    ShopUpdate,
)

router = APIRouter(
    prefix="/shops",
    tags=["shops"],
    responses=ERROR_RESPONSES,
)


@router.get("", response_model=List[ShopPublic])
def list_shops(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return directory.list_shops(session)


@router.get("/{shop_id}", response_model=ShopPublic)
def get_shop(
    shop_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return directory.get_shop(session, shop_id)


# role checks happen in the directory so non-barbers get not_barber_role
@router.post("", response_model=ShopPublic, status_code=201)
def create_shop(
    shop: ShopCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return directory.create_shop(session, current_user, shop)


@router.patch("/{shop_id}", response_model=ShopPublic)
def update_shop(
    shop_id: int,
    changes: ShopUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return directory.update_shop(session, current_user, shop_id, changes)


@router.put("/{shop_id}/barbers/me", response_model=ShopBarberPublic)
def register_at_shop(
    shop_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return directory.register_barber_at_shop(session, current_user, shop_id)


@router.delete("/{shop_id}/barbers/me", status_code=204)
def leave_shop(
    shop_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    directory.deregister_barber_from_shop(session, current_user, shop_id)
    return Response(status_code=204)


@router.get("/{shop_id}/queue", response_model=QueueView)
def shop_queue(
    shop_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    appts = queue_manager.list_waiting_and_in_progress(session, shop_id, current_user)
    return {
        "shop_id": shop_id,
        "waiting": [a for a in appts if a.status == AppointmentStatus.waiting.value],
        "in_progress": [a for a in appts if a.status == AppointmentStatus.in_progress.value],
    }


@router.get("/{shop_id}/queue/version", response_model=QueueVersion)
def shop_queue_version(
    shop_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    # Poll this and re-fetch the queue when the number moves
    directory.get_shop(session, shop_id)
    return {"shop_id": shop_id, "version": bus.version(shop_id)}
