import logging
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from eventhub.controller.club_controller import is_club_chairperson, retrieve_club_controller
from eventhub.errors import ForbiddenError, NotFoundError, ValidationError
from eventhub.models.event_model import Event
from eventhub.models.registration_model import Registration
from eventhub.models.timestamps import as_naive_utc, utcnow
from eventhub.models.user_model import User

logger = logging.getLogger(__name__)

DATE_FIELDS = ("event_date", "end_date", "registration_open_date", "registration_close_date")
SORT_ORDERS = {
    "upcoming": Event.event_date.asc(),
    "latest": Event.created_at.desc(),
    "popular": Event.registered_count.desc(),
}


def _normalize_dates(event_data: dict):
    for field in DATE_FIELDS:
        if field in event_data:
            event_data[field] = as_naive_utc(event_data[field])
    return event_data


def _check_merged_schedule(event: Event, update_data: dict):
    merged = {field: update_data.get(field, getattr(event, field)) for field in DATE_FIELDS}
    if merged["end_date"] and merged["event_date"] and merged["end_date"] < merged["event_date"]:
        raise ValidationError("end_date must not be before event_date")
    open_date, close_date = merged["registration_open_date"], merged["registration_close_date"]
    if open_date and close_date and close_date < open_date:
        raise ValidationError("registration_close_date must not be before registration_open_date")


def ensure_can_manage(event: Event, user: User):
    """Admins manage every event, chairpersons only the ones they created."""
    if user.role == "admin":
        return
    if user.role != "chairperson" or event.created_by != user.id:
        raise ForbiddenError("You do not manage this event")


# ------------------ Add New Event ------------------
async def add_event_controller(db: Session, user: User, event_data: dict):
    await retrieve_club_controller(db, event_data["club_id"])

    if user.role == "chairperson" and not is_club_chairperson(db, event_data["club_id"], user.id):
        raise ForbiddenError("You are not authorized for this club")

    new_event = Event(**_normalize_dates(event_data.copy()), created_by=user.id, registered_count=0)
    db.add(new_event)
    db.commit()
    db.refresh(new_event)

    logger.info("Event %s created by user %s", new_event.id, user.id)
    return new_event


# ------------------ Retrieve Events ------------------
async def retrieve_events_controller(
    db: Session,
    search: str = "",
    club_id: int = None,
    event_type: str = None,
    sort: str = "upcoming",
    limit: int = 20,
    offset: int = 0,
):
    query = (
        db.query(Event)
        .options(joinedload(Event.club))
        .filter(Event.is_published.is_(True), Event.event_date > utcnow())
    )

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Event.title.ilike(pattern), Event.description.ilike(pattern)))
    if club_id:
        query = query.filter(Event.club_id == club_id)
    if event_type:
        query = query.filter(Event.event_type == event_type)

    order = SORT_ORDERS.get(sort, SORT_ORDERS["upcoming"])
    return query.order_by(order, Event.id.asc()).limit(limit).offset(offset).all()


async def retrieve_event_controller(db: Session, event_id: int):
    event = db.query(Event).options(joinedload(Event.club)).filter(Event.id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


# ------------------ Update Event ------------------
async def update_event_controller(db: Session, user: User, event_id: int, update_data: dict):
    event = await retrieve_event_controller(db, event_id)
    ensure_can_manage(event, user)

    update_data = _normalize_dates(update_data.copy())
    new_capacity = update_data.get("max_capacity")
    if new_capacity is not None and new_capacity < event.registered_count:
        raise ValidationError(
            f"max_capacity cannot be lower than the {event.registered_count} current registrations"
        )
    _check_merged_schedule(event, update_data)

    for key, val in update_data.items():
        setattr(event, key, val)
    db.commit()
    db.refresh(event)
    return event


# ------------------ Delete Event ------------------
async def delete_event_controller(db: Session, user: User, event_id: int):
    event = await retrieve_event_controller(db, event_id)
    ensure_can_manage(event, user)

    db.delete(event)
    db.commit()
    logger.info("Event %s deleted by user %s", event_id, user.id)
    return event_id


# ------------------ Chairperson views ------------------
async def retrieve_chairperson_events(db: Session, user: User):
    attended = (
        db.query(Registration.event_id, func.count(Registration.id).label("attended_count"))
        .filter(Registration.status != "cancelled", Registration.attendance_marked.is_(True))
        .group_by(Registration.event_id)
        .subquery()
    )

    rows = (
        db.query(Event, func.coalesce(attended.c.attended_count, 0))
        .options(joinedload(Event.club))
        .outerjoin(attended, attended.c.event_id == Event.id)
        .filter(Event.created_by == user.id)
        .order_by(Event.event_date.desc())
        .all()
    )
    return [(event, attended_count) for event, attended_count in rows]


async def retrieve_event_attendees(db: Session, user: User, event_id: int):
    event = await retrieve_event_controller(db, event_id)
    ensure_can_manage(event, user)

    return (
        db.query(Registration)
        .options(joinedload(Registration.user))
        .join(User, Registration.user_id == User.id)
        .filter(Registration.event_id == event_id, Registration.status != "cancelled")
        .order_by(User.full_name.asc())
        .all()
    )
