import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user, require_role
from eventhub.controller.event_controller import (
    add_event_controller,
    delete_event_controller,
    retrieve_event_controller,
    retrieve_events_controller,
    update_event_controller,
)
from eventhub.controller.qr_code_sender import send_qr_ticket_email
from eventhub.controller.registration_controller import (
    register_for_event_controller,
    retrieve_own_registration,
)
from eventhub.database import get_db
from eventhub.errors import AppError, ConflictError, ServerError
from eventhub.models.user_model import User
from eventhub.response_model import ResponseModel
from eventhub.schema.event_schema import EventCreate, EventDetailOut, EventUpdate
from eventhub.schema.registration_schema import RegisterConfirm, RegistrationOut

logger = logging.getLogger(__name__)

router = APIRouter()


# ----------------------- GET ALL Events -----------------------
@router.get("", response_description="Retrieve upcoming published events")
async def get_events(
    search: str = "",
    club_id: Optional[int] = Query(None, alias="clubId"),
    event_type: Optional[str] = Query(None, alias="type"),
    sort: str = "upcoming",
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    events = await retrieve_events_controller(db, search, club_id, event_type, sort, limit, offset)
    return ResponseModel([EventDetailOut.model_validate(e) for e in events], "Events retrieved successfully")


# ----------------------- ADD Event -----------------------
@router.post("", status_code=status.HTTP_201_CREATED, response_description="Create a new event")
async def add_event(
    body: EventCreate,
    user: User = Depends(require_role("chairperson", "admin")),
    db: Session = Depends(get_db),
):
    try:
        new_event = await add_event_controller(db, user, body.model_dump())
        return ResponseModel(EventDetailOut.model_validate(new_event), "Event created successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Event creation failed")
        raise ServerError()


# ----------------------- GET Event -----------------------
@router.get("/{event_id}", response_description="Retrieve event")
async def get_event(event_id: int, db: Session = Depends(get_db)):
    event = await retrieve_event_controller(db, event_id)
    return ResponseModel(EventDetailOut.model_validate(event), "Event retrieved successfully")


# ------------------ Update Event ------------------
@router.put("/{event_id}", response_description="Update event")
async def update_event(
    event_id: int,
    update_data: EventUpdate,
    user: User = Depends(require_role("chairperson", "admin")),
    db: Session = Depends(get_db),
):
    try:
        updated_event = await update_event_controller(db, user, event_id, update_data.model_dump(exclude_unset=True))
        return ResponseModel(EventDetailOut.model_validate(updated_event), "Event updated successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Event update failed")
        raise ServerError()


# ------------------ Delete Event ------------------
@router.delete("/{event_id}", response_description="Delete event")
async def delete_event(
    event_id: int,
    user: User = Depends(require_role("chairperson", "admin")),
    db: Session = Depends(get_db),
):
    try:
        deleted_id = await delete_event_controller(db, user, event_id)
        return ResponseModel({"id": deleted_id}, "Event deleted successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Event delete failed")
        raise ServerError()


# ------------------ Register ------------------
@router.post("/{event_id}/register", status_code=status.HTTP_201_CREATED, response_description="Register for event")
async def register_for_event(event_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        registration = await register_for_event_controller(db, event_id, user)
        return ResponseModel(RegistrationOut.model_validate(registration), "Registered successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Event registration failed")
        raise ServerError()


# ------------------ Send ticket ------------------
@router.post("/{event_id}/register/confirm", response_description="E-mail the QR ticket")
async def confirm_registration(
    event_id: int,
    body: RegisterConfirm,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    registration = await retrieve_own_registration(db, body.registration_id, user, event_id)
    if registration.status == "cancelled":
        raise ConflictError("Registration has been cancelled", code="REGISTRATION_CANCELLED")
    event = registration.event
    sent = await send_qr_ticket_email(
        email=user.email,
        user_name=user.full_name,
        event_title=event.title,
        event_date=event.event_date,
        venue=event.online_link if event.is_online else event.venue_address,
        qr_data_url=registration.qr_code_data or "",
    )
    return ResponseModel({"registration_id": registration.id, "sent": sent}, "Ticket processed")


__all__ = ["router"]
