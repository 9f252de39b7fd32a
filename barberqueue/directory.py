# barberqueue/directory.py

import logging
from datetime import datetime
from typing import List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barberqueue.errors import InvalidInput, NotAuthorized, ShopNotFound
from barberqueue.models import Shop, ShopBarber, utcnow
from barberqueue.policies import ensure_barber_serves_shop, ensure_role
from barberqueue.schemas import ShopCreate, ShopUpdate, UserRole

logger = logging.getLogger(__name__)


def list_shops(session: Session) -> List[Shop]:
    return session.exec(select(Shop).order_by(Shop.name)).all()


def get_shop(session: Session, shop_id: int) -> Shop:
    shop = session.get(Shop, shop_id)
    if shop is None:
        raise ShopNotFound(f"Shop {shop_id} not found")
    return shop


def is_open(shop: Shop, at: Optional[datetime] = None) -> bool:
    now = (at or datetime.now()).time()
    if shop.opening_time <= shop.closing_time:
        return shop.opening_time <= now < shop.closing_time
    # hours run past midnight
    return now >= shop.opening_time or now < shop.closing_time


def barber_shop_ids(session: Session, barber_id: int) -> Set[int]:
    rows = session.exec(
        select(ShopBarber.shop_id).where(ShopBarber.barber_id == barber_id)
    ).all()
    return set(rows)


def list_barber_shops(session: Session, barber_id: int) -> List[Shop]:
    return session.exec(
        select(Shop)
        .join(ShopBarber, ShopBarber.shop_id == Shop.id)
        .where(ShopBarber.barber_id == barber_id)
        .order_by(Shop.name)
    ).all()


def _check_hours(opening_time, closing_time) -> None:
    if opening_time == closing_time:
        raise InvalidInput("opening_time and closing_time cannot be equal")


def create_shop(session: Session, barber: dict, data: ShopCreate) -> Shop:
    ensure_role(barber, UserRole.barber.value)
    if not data.name.strip() or not data.address.strip():
        raise InvalidInput("name and address are required")
    _check_hours(data.opening_time, data.closing_time)

    shop = Shop(
        name=data.name.strip(),
        address=data.address.strip(),
        phone=data.phone,
        opening_time=data.opening_time,
        closing_time=data.closing_time,
    )
    session.add(shop)
    session.flush()  # fills shop.id

    # the creating barber serves the new shop
    session.add(ShopBarber(shop_id=shop.id, barber_id=barber["id"]))
    session.commit()
    session.refresh(shop)

    logger.info(f"Shop {shop.id} '{shop.name}' created by barber {barber['id']}")
    return shop


def update_shop(session: Session, barber: dict, shop_id: int, changes: ShopUpdate) -> Shop:
    shop = get_shop(session, shop_id)
    ensure_barber_serves_shop(barber, shop_id, barber_shop_ids(session, barber["id"]))

    updates = changes.model_dump(exclude_unset=True)
    for field in ("name", "address"):
        if field in updates:
            if updates[field] is None or not updates[field].strip():
                raise InvalidInput(f"{field} cannot be empty")
            updates[field] = updates[field].strip()
    for field in ("opening_time", "closing_time"):
        if field in updates and updates[field] is None:
            raise InvalidInput(f"{field} cannot be empty")
    _check_hours(
        updates.get("opening_time", shop.opening_time),
        updates.get("closing_time", shop.closing_time),
    )

    for field, value in updates.items():
        setattr(shop, field, value)
    shop.updated_at = utcnow()

    session.add(shop)
    session.commit()
    session.refresh(shop)
    logger.info(f"Shop {shop.id} updated by barber {barber['id']}: {sorted(updates)}")
    return shop


def register_barber_at_shop(session: Session, barber: dict, shop_id: int) -> ShopBarber:
    ensure_role(barber, UserRole.barber.value)
    get_shop(session, shop_id)

    existing = session.exec(
        select(ShopBarber)
        .where(ShopBarber.shop_id == shop_id)
        .where(ShopBarber.barber_id == barber["id"])
    ).first()
    if existing is not None:
        return existing

    association = ShopBarber(shop_id=shop_id, barber_id=barber["id"])
    session.add(association)
    try:
        session.commit()
    except IntegrityError:
        # registered concurrently by the same barber
        session.rollback()
        return session.exec(
            select(ShopBarber)
            .where(ShopBarber.shop_id == shop_id)
            .where(ShopBarber.barber_id == barber["id"])
        ).one()

    session.refresh(association)
    logger.info(f"Barber {barber['id']} registered at shop {shop_id}")
    return association


def deregister_barber_from_shop(session: Session, barber: dict, shop_id: int) -> None:
    ensure_role(barber, UserRole.barber.value)
    association = session.exec(
        select(ShopBarber)
        .where(ShopBarber.shop_id == shop_id)
        .where(ShopBarber.barber_id == barber["id"])
    ).first()
    if association is None:
        raise NotAuthorized("Barber is not associated with this shop")

    session.delete(association)
    session.commit()
    logger.info(f"Barber {barber['id']} left shop {shop_id}")
