import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user
from eventhub.controller.registration_controller import (
    cancel_registration_controller,
    retrieve_student_registrations,
    submit_feedback_controller,
)
from eventhub.database import get_db
from eventhub.errors import AppError, ServerError
from eventhub.models.user_model import User
from eventhub.response_model import ResponseModel
from eventhub.schema.event_schema import EventDetailOut
from eventhub.schema.registration_schema import FeedbackCreate, RegistrationOut

logger = logging.getLogger(__name__)

router = APIRouter()


# ----------------------- My registrations -----------------------
@router.get("/registrations", response_description="Retrieve own registrations")
async def get_registrations(
    event_id: Optional[int] = Query(None, alias="eventId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    registrations = await retrieve_student_registrations(db, user, event_id)
    data = [
        {
            **RegistrationOut.model_validate(r).model_dump(),
            "event": EventDetailOut.model_validate(r.event).model_dump(),
        }
        for r in registrations
    ]
    return ResponseModel(data, "Registrations retrieved successfully")


# ----------------------- Cancel -----------------------
@router.post("/registrations/{registration_id}/cancel", response_description="Cancel registration")
async def cancel_registration(registration_id: int, user: User = Depends(get_current_user),
                              db: Session = Depends(get_db)):
    try:
        registration = await cancel_registration_controller(db, registration_id, user)
        return ResponseModel(RegistrationOut.model_validate(registration), "Registration cancelled")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Cancel registration failed")
        raise ServerError()


# ----------------------- Feedback -----------------------
@router.post("/registrations/{registration_id}/feedback", response_description="Submit feedback")
async def submit_feedback(registration_id: int, body: FeedbackCreate, user: User = Depends(get_current_user),
                          db: Session = Depends(get_db)):
    try:
        registration = await submit_feedback_controller(db, registration_id, user, body.rating, body.comment)
        return ResponseModel(RegistrationOut.model_validate(registration), "Feedback submitted")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Feedback submission failed")
        raise ServerError()


__all__ = ["router"]
