# barberqueue/routers/barbers_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberqueue import directory
from barberqueue.db import get_session
from barberqueue.deps import current_barber
from barberqueue.schemas import ShopPublic

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.get("/me/shops", response_model=List[ShopPublic])
def list_my_shops(
    session: Session = Depends(get_session),
    barber: dict = Depends(current_barber),
):
    return directory.list_barber_shops(session, barber["id"])
