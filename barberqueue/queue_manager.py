# barberqueue/queue_manager.py

"""Appointment lifecycle for a shop's walk-in queue.

    (new) -> waiting -> in_progress -> completed
                  \\-> cancelled

Positions come from a per-shop counter bumped inside the admission
transaction, so concurrent admissions never share a position and positions
are never reused. Every status change is an UPDATE guarded by the expected
current status; losing a race raises InvalidState and leaves the row alone.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, update
from sqlmodel import Session, col, select

from barberqueue import config
from barberqueue.directory import barber_shop_ids, get_shop, is_open
from barberqueue.errors import AppointmentNotFound, InvalidInput, InvalidState
from barberqueue.events import bus
from barberqueue.models import Appointment, Shop, utcnow
from barberqueue.policies import ensure_barber_serves_shop, ensure_customer_owns, ensure_role
from barberqueue.schemas import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    AppointmentStatus,
    ServiceType,
    UserRole,
)

logger = logging.getLogger(__name__)

SERVICE_TYPES = {s.value for s in ServiceType}


def _get_appointment(session: Session, appointment_id: int) -> Appointment:
    appointment = session.get(Appointment, appointment_id)
    if appointment is None:
        raise AppointmentNotFound(f"Appointment {appointment_id} not found")
    return appointment


def _allocate_position(session: Session, shop_id: int) -> int:
    # The UPDATE takes the write lock; concurrent admissions queue up behind it
    # until this transaction commits or rolls back.
    session.connection().execute(
        update(Shop)
        .where(Shop.id == shop_id)
        .values(next_queue_position=Shop.next_queue_position + 1)
    )
    next_position = session.exec(
        select(Shop.next_queue_position).where(Shop.id == shop_id)
    ).one()
    return next_position - 1


def create_appointment(
    session: Session,
    customer: dict,
    shop_id: int,
    service_type: str,
    notes: Optional[str] = None,
) -> Appointment:
    ensure_role(customer, UserRole.customer.value)

    # 1) Validate input
    service_type = (service_type or "").strip()
    if not service_type:
        raise InvalidInput("service_type is required")
    if service_type not in SERVICE_TYPES:
        raise InvalidInput(f"Unknown service_type '{service_type}'")
    notes = (notes or "").strip() or None

    # 2) Shop must exist (and be open, when enforced)
    shop = get_shop(session, shop_id)
    if config.ENFORCE_SHOP_HOURS and not is_open(shop):
        raise InvalidInput("Shop is closed")

    # 3) Allocate a position and insert in one transaction
    try:
        position = _allocate_position(session, shop_id)
        appointment = Appointment(
            shop_id=shop_id,
            customer_id=customer["id"],
            status=AppointmentStatus.waiting.value,
            queue_position=position,
            service_type=service_type,
            notes=notes,
        )
        session.add(appointment)
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(appointment)  # fills appointment.id
    logger.info(
        f"Appointment {appointment.id} queued at shop {shop_id} "
        f"position {position} for customer {customer['id']}"
    )
    bus.publish(shop_id, "created", appointment.id)
    return appointment


def _transition(
    session: Session,
    appointment: Appointment,
    expected: AppointmentStatus,
    target: AppointmentStatus,
    **values,
) -> Appointment:
    if appointment.status != expected.value:
        raise InvalidState(
            f"Appointment {appointment.id} is {appointment.status}, expected {expected.value}"
        )

    result = session.connection().execute(
        update(Appointment)
        .where(Appointment.id == appointment.id)
        .where(Appointment.status == expected.value)
        .values(status=target.value, updated_at=utcnow(), **values)
    )
    if result.rowcount != 1:
        # someone else moved it first
        session.rollback()
        logger.warning(
            f"Appointment {appointment.id}: {expected.value} -> {target.value} lost a race"
        )
        raise InvalidState(f"Appointment {appointment.id} is no longer {expected.value}")

    session.commit()
    session.refresh(appointment)
    logger.info(f"Appointment {appointment.id}: {expected.value} -> {target.value}")
    bus.publish(appointment.shop_id, target.value, appointment.id)
    return appointment


def cancel_appointment(session: Session, appointment_id: int, customer: dict) -> Appointment:
    appointment = _get_appointment(session, appointment_id)
    ensure_customer_owns(customer, appointment)
    return _transition(
        session, appointment, AppointmentStatus.waiting, AppointmentStatus.cancelled
    )


def start_service(session: Session, appointment_id: int, barber: dict) -> Appointment:
    appointment = _get_appointment(session, appointment_id)
    ensure_barber_serves_shop(barber, appointment.shop_id, barber_shop_ids(session, barber["id"]))
    return _transition(
        session,
        appointment,
        AppointmentStatus.waiting,
        AppointmentStatus.in_progress,
        started_at=utcnow(),
        barber_id=barber["id"],
    )


def complete_service(session: Session, appointment_id: int, barber: dict) -> Appointment:
    appointment = _get_appointment(session, appointment_id)
    ensure_barber_serves_shop(barber, appointment.shop_id, barber_shop_ids(session, barber["id"]))
    return _transition(
        session,
        appointment,
        AppointmentStatus.in_progress,
        AppointmentStatus.completed,
        completed_at=utcnow(),
    )


def delete_appointment(session: Session, appointment_id: int, barber: dict) -> None:
    appointment = _get_appointment(session, appointment_id)
    shop_id = appointment.shop_id
    ensure_barber_serves_shop(barber, shop_id, barber_shop_ids(session, barber["id"]))

    if appointment.status in TERMINAL_STATUSES:
        raise InvalidState(f"Appointment {appointment_id} is already {appointment.status}")

    result = session.connection().execute(
        delete(Appointment)
        .where(Appointment.id == appointment_id)
        .where(col(Appointment.status).in_([s.value for s in ACTIVE_STATUSES]))
    )
    if result.rowcount != 1:
        session.rollback()
        still_there = session.exec(
            select(Appointment.id).where(Appointment.id == appointment_id)
        ).first()
        if still_there is None:
            raise AppointmentNotFound(f"Appointment {appointment_id} not found")
        logger.warning(f"Appointment {appointment_id}: delete lost a race")
        raise InvalidState(f"Appointment {appointment_id} is no longer active")

    session.expunge(appointment)
    session.commit()
    logger.info(f"Appointment {appointment_id} deleted by barber {barber['id']}")
    bus.publish(shop_id, "deleted", appointment_id)


def list_waiting_and_in_progress(session: Session, shop_id: int, barber: dict) -> List[Appointment]:
    """Barber view: waiting by queue position, then in-progress by start time."""
    get_shop(session, shop_id)
    ensure_barber_serves_shop(barber, shop_id, barber_shop_ids(session, barber["id"]))

    waiting = session.exec(
        select(Appointment)
        .where(Appointment.shop_id == shop_id)
        .where(Appointment.status == AppointmentStatus.waiting.value)
        .order_by(Appointment.queue_position)
    ).all()
    in_progress = session.exec(
        select(Appointment)
        .where(Appointment.shop_id == shop_id)
        .where(Appointment.status == AppointmentStatus.in_progress.value)
        .order_by(Appointment.started_at, Appointment.id)
    ).all()
    return list(waiting) + list(in_progress)


def list_own_active(session: Session, customer_id: int) -> List[Appointment]:
    return session.exec(
        select(Appointment)
        .where(Appointment.customer_id == customer_id)
        .where(col(Appointment.status).in_([s.value for s in ACTIVE_STATUSES]))
        .order_by(col(Appointment.created_at).desc(), col(Appointment.id).desc())
    ).all()
