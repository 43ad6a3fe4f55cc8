import logging
from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from eventhub.controller.audit_controller import record_audit
from eventhub.controller.event_controller import retrieve_event_controller
from eventhub.controller.qr_code_controller import issue_qr_credentials
from eventhub.errors import (
    AlreadyRegisteredError,
    ConflictError,
    EventFullError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from eventhub.models.event_model import Event
from eventhub.models.registration_model import Registration
from eventhub.models.timestamps import utcnow
from eventhub.models.user_model import User

logger = logging.getLogger(__name__)


def _active_registration(db: Session, event_id: int, user_id: int):
    return db.query(Registration).filter(
        Registration.event_id == event_id,
        Registration.user_id == user_id,
        Registration.status != "cancelled",
    ).first()


def _reserve_seat(db: Session, event_id: int) -> bool:
    # increment-with-limit in one statement so concurrent requests cannot overbook
    result = db.execute(
        update(Event)
        .where(
            Event.id == event_id,
            or_(Event.max_capacity.is_(None), Event.registered_count < Event.max_capacity),
        )
        .values(registered_count=Event.registered_count + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _release_seat(db: Session, event_id: int):
    db.execute(
        update(Event)
        .where(Event.id == event_id, Event.registered_count > 0)
        .values(registered_count=Event.registered_count - 1)
        .execution_options(synchronize_session=False)
    )


# ------------------ Register for Event ------------------
async def register_for_event_controller(db: Session, event_id: int, user: User):
    event = await retrieve_event_controller(db, event_id)
    if not event.is_published:
        raise NotFoundError("Event not found")

    now = utcnow()
    if event.registration_open_date and now < event.registration_open_date:
        raise ValidationError("Registration has not opened yet", code="REGISTRATION_CLOSED")
    if event.registration_close_date and now > event.registration_close_date:
        raise ValidationError("Registration is closed", code="REGISTRATION_CLOSED")

    if _active_registration(db, event_id, user.id):
        raise AlreadyRegisteredError()

    if not _reserve_seat(db, event_id):
        db.rollback()
        raise EventFullError()

    registration = Registration(event_id=event_id, user_id=user.id, status="registered")
    db.add(registration)
    try:
        db.flush()
    except IntegrityError:
        # lost a race with a concurrent registration for the same pair
        db.rollback()
        raise AlreadyRegisteredError()

    issue_qr_credentials(registration)
    record_audit(db, user.id, "EVENT_REGISTER", "registrations", registration.id)
    db.commit()
    db.refresh(registration)

    logger.info("User %s registered for event %s (registration %s)", user.id, event_id, registration.id)
    return registration


# ------------------ Cancel Registration ------------------
async def cancel_registration_controller(db: Session, registration_id: int, user: User):
    registration = db.query(Registration).filter(Registration.id == registration_id).first()
    if not registration:
        raise NotFoundError("Registration not found")
    if registration.user_id != user.id:
        raise ForbiddenError()

    result = db.execute(
        update(Registration)
        .where(Registration.id == registration_id, Registration.status == "registered")
        .values(status="cancelled", cancelled_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise ConflictError("Registration cannot be cancelled", code="NOT_CANCELLABLE")

    _release_seat(db, registration.event_id)
    record_audit(db, user.id, "EVENT_CANCEL", "registrations", registration_id)
    db.commit()
    db.refresh(registration)

    logger.info("Registration %s cancelled by user %s", registration_id, user.id)
    return registration


# ------------------ Student views ------------------
async def retrieve_student_registrations(db: Session, user: User, event_id: int = None):
    query = (
        db.query(Registration)
        .options(joinedload(Registration.event).joinedload(Event.club))
        .join(Event, Registration.event_id == Event.id)
        .filter(Registration.user_id == user.id, Registration.status != "cancelled")
    )
    if event_id:
        query = query.filter(Registration.event_id == event_id)
    return query.order_by(Event.event_date.desc()).all()


async def retrieve_own_registration(db: Session, registration_id: int, user: User, event_id: int = None):
    query = db.query(Registration).filter(Registration.id == registration_id)
    if event_id is not None:
        query = query.filter(Registration.event_id == event_id)
    registration = query.first()
    if not registration:
        raise NotFoundError("Registration not found")
    if registration.user_id != user.id:
        raise ForbiddenError()
    return registration


# ------------------ Feedback ------------------
async def submit_feedback_controller(db: Session, registration_id: int, user: User, rating: int, comment: str = None):
    registration = await retrieve_own_registration(db, registration_id, user)

    if registration.status != "attended":
        raise ValidationError("Feedback is only accepted after attending the event", code="NOT_ATTENDED")
    if registration.feedback_submitted_at is not None:
        raise ConflictError("Feedback already submitted", code="FEEDBACK_EXISTS")

    registration.feedback_rating = rating
    registration.feedback_comment = comment
    registration.feedback_submitted_at = utcnow()
    db.commit()
    db.refresh(registration)
    return registration
