import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.auth import require_role
from eventhub.controller.analytics_controller import club_analytics_controller, event_analytics_controller
from eventhub.controller.attendance_controller import manual_attendance_controller, scan_attendance_controller
from eventhub.controller.event_controller import retrieve_chairperson_events, retrieve_event_attendees
from eventhub.database import get_db
from eventhub.errors import AppError, ServerError
from eventhub.models.user_model import User
from eventhub.response_model import ResponseModel
from eventhub.schema.attendance_schema import ManualAttendanceRequest, ScanRequest
from eventhub.schema.event_schema import ChairpersonEventOut
from eventhub.schema.registration_schema import RegistrationOut
from eventhub.schema.user_schema import UserOut

logger = logging.getLogger(__name__)

router = APIRouter()

chairperson_only = require_role("chairperson")


# ----------------------- My events -----------------------
@router.get("/events", response_description="Events created by the chairperson")
async def get_my_events(user: User = Depends(chairperson_only), db: Session = Depends(get_db)):
    rows = await retrieve_chairperson_events(db, user)
    data = [
        ChairpersonEventOut.model_validate(event).model_copy(update={"attended_count": attended_count})
        for event, attended_count in rows
    ]
    return ResponseModel(data, "Events retrieved successfully")


@router.get("/events/{event_id}/registrations", response_description="Attendees of an event")
async def get_event_registrations(event_id: int, user: User = Depends(chairperson_only),
                                  db: Session = Depends(get_db)):
    registrations = await retrieve_event_attendees(db, user, event_id)
    data = [
        {
            **RegistrationOut.model_validate(r).model_dump(exclude={"qr_code_data"}),
            "user": UserOut.model_validate(r.user).model_dump(),
        }
        for r in registrations
    ]
    return ResponseModel(data, "Registrations retrieved successfully")


# ----------------------- Attendance -----------------------
@router.post("/attendance/scan", response_description="Mark attendance from a scanned QR code")
async def scan_attendance(body: ScanRequest, user: User = Depends(chairperson_only), db: Session = Depends(get_db)):
    try:
        registration = await scan_attendance_controller(
            db, user, body.qr_data, body.event_id, body.latitude, body.longitude
        )
        return ResponseModel(
            {"id": registration.id, "status": registration.attendance_status},
            "Attendance marked",
        )
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Attendance scan failed")
        raise ServerError()


@router.post("/attendance/manual", response_description="Set attendance manually")
async def manual_attendance(body: ManualAttendanceRequest, user: User = Depends(chairperson_only),
                            db: Session = Depends(get_db)):
    try:
        registration = await manual_attendance_controller(
            db, user, body.registration_id, body.event_id, body.status, body.notes
        )
        return ResponseModel(
            {"id": registration.id, "status": registration.attendance_status},
            "Attendance updated",
        )
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Manual attendance failed")
        raise ServerError()


# ----------------------- Analytics -----------------------
@router.get("/analytics/clubs/{club_id}", response_description="Club attendance analytics")
async def get_club_analytics(club_id: int, user: User = Depends(require_role("chairperson", "admin")),
                             db: Session = Depends(get_db)):
    analytics = await club_analytics_controller(db, user, club_id)
    return ResponseModel(analytics, "Analytics retrieved successfully")


@router.get("/analytics/{event_id}", response_description="Event attendance analytics")
async def get_event_analytics(event_id: int, user: User = Depends(require_role("chairperson", "admin")),
                              db: Session = Depends(get_db)):
    analytics = await event_analytics_controller(db, user, event_id)
    return ResponseModel(analytics, "Analytics retrieved successfully")


__all__ = ["router"]
