# barberqueue/policies.py

"""Authorization predicates evaluated before every mutation.

These take facts that were already loaded (the acting user, the appointment,
the shops a barber serves) and never touch storage.
"""

from typing import Iterable

from barberqueue.errors import NotAuthorized, NotBarberRole, NotOwner
from barberqueue.schemas import UserRole


def ensure_role(user: dict, role: str) -> None:
    if user["role"] != role:
        if role == UserRole.barber.value:
            raise NotBarberRole("Only barbers can do this")
        raise NotAuthorized(f"Only {role}s can do this")


def ensure_customer_owns(user: dict, appointment) -> None:
    if appointment.customer_id != user["id"]:
        raise NotOwner("Appointment belongs to another customer")


def ensure_barber_serves_shop(user: dict, shop_id: int, shop_ids: Iterable[int]) -> None:
    if user["role"] != UserRole.barber.value or shop_id not in set(shop_ids):
        raise NotAuthorized("Barber is not associated with this shop")
