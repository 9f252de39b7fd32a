# barberqueue/routers/appointments_routes.py

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from barberqueue import queue_manager
from barberqueue.auth import get_current_user
from barberqueue.db import get_session
from barberqueue.deps import current_customer
from barberqueue.schemas import ERROR_RESPONSES, AppointmentCreate, AppointmentPublic

router = APIRouter(
    tags=["appointments"],
    responses=ERROR_RESPONSES,
)


@router.post("/shops/{shop_id}/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    shop_id: int,
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
    customer: dict = Depends(current_customer),
):
    return queue_manager.create_appointment(
        session, customer, shop_id, appt.service_type, appt.notes
    )


@router.get("/customers/me/appointments", response_model=List[AppointmentPublic])
def list_my_appointments(
    session: Session = Depends(get_session),
    customer: dict = Depends(current_customer),
):
    return queue_manager.list_own_active(session, customer["id"])


@router.patch("/appointments/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return queue_manager.cancel_appointment(session, appt_id, current_user)


@router.patch("/appointments/{appt_id}/start", response_model=AppointmentPublic)
def start_service(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return queue_manager.start_service(session, appt_id, current_user)


@router.patch("/appointments/{appt_id}/complete", response_model=AppointmentPublic)
def complete_service(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return queue_manager.complete_service(session, appt_id, current_user)


@router.delete("/appointments/{appt_id}", status_code=204)
def delete_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    queue_manager.delete_appointment(session, appt_id, current_user)
    return Response(status_code=204)
