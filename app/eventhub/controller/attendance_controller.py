import hmac
import logging
from sqlalchemy import update
from sqlalchemy.orm import Session

from eventhub.controller.audit_controller import record_audit
from eventhub.controller.event_controller import ensure_can_manage, retrieve_event_controller
from eventhub.controller.qr_code_controller import parse_qr_payload
from eventhub.errors import ConflictError, DuplicateScanError, NotFoundError, ValidationError
from eventhub.models.attendance_model import AttendanceLog
from eventhub.models.registration_model import Registration
from eventhub.models.timestamps import utcnow
from eventhub.models.user_model import User

logger = logging.getLogger(__name__)

# attendance statuses that count as having attended the event
ATTENDED_STATUSES = ("present", "late")


def registration_status_for(attendance_status: str) -> str:
    return "attended" if attendance_status in ATTENDED_STATUSES else "registered"


def _append_log(db: Session, registration: Registration, status: str, marked_by: int,
                latitude=None, longitude=None, notes=None):
    log = AttendanceLog(
        registration_id=registration.id,
        event_id=registration.event_id,
        user_id=registration.user_id,
        status=status,
        marked_by=marked_by,
        marked_at=utcnow(),
        latitude=latitude,
        longitude=longitude,
        notes=notes,
    )
    db.add(log)
    return log


# ------------------ QR scan ------------------
async def scan_attendance_controller(db: Session, chairperson: User, qr_data: str, event_id: int,
                                     latitude: float = None, longitude: float = None):
    qr_info = parse_qr_payload(qr_data)

    event = await retrieve_event_controller(db, event_id)
    ensure_can_manage(event, chairperson)

    registration = db.query(Registration).filter(Registration.id == qr_info["registration_id"]).first()
    if not registration:
        raise NotFoundError("Registration not found")
    if registration.event_id != event_id:
        raise ValidationError("QR code does not match event", code="EVENT_MISMATCH")
    if not qr_info["token"] or not registration.qr_secret or not hmac.compare_digest(
        str(qr_info["token"]), registration.qr_secret
    ):
        raise ValidationError("Invalid QR code", code="INVALID_QR")
    if registration.status == "cancelled":
        raise ConflictError("Registration has been cancelled", code="REGISTRATION_CANCELLED")

    marked_at = utcnow()
    # compare-and-set on the latch; a second scan updates nothing
    result = db.execute(
        update(Registration)
        .where(
            Registration.id == registration.id,
            Registration.attendance_marked.is_(False),
            Registration.status != "cancelled",
        )
        .values(
            attendance_marked=True,
            attendance_status="present",
            attended_at=marked_at,
            status=registration_status_for("present"),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise DuplicateScanError()

    _append_log(db, registration, "present", chairperson.id, latitude, longitude)
    record_audit(db, chairperson.id, "ATTENDANCE_SCAN", "registrations", registration.id)
    db.commit()
    db.refresh(registration)

    logger.info("Attendance marked present for registration %s by %s", registration.id, chairperson.id)
    return registration


# ------------------ Manual override ------------------
async def manual_attendance_controller(db: Session, chairperson: User, registration_id: int,
                                       event_id: int, status: str, notes: str = None):
    event = await retrieve_event_controller(db, event_id)
    ensure_can_manage(event, chairperson)

    registration = db.query(Registration).filter(
        Registration.id == registration_id,
        Registration.event_id == event_id,
    ).first()
    if not registration:
        raise NotFoundError("Registration not found")
    if registration.status == "cancelled":
        raise ConflictError("Registration has been cancelled", code="REGISTRATION_CANCELLED")

    registration.attendance_marked = True
    registration.attendance_status = status
    registration.attended_at = utcnow()
    registration.status = registration_status_for(status)

    _append_log(db, registration, status, chairperson.id, notes=notes)
    record_audit(db, chairperson.id, "ATTENDANCE_MANUAL", "registrations", registration.id)
    db.commit()
    db.refresh(registration)

    logger.info("Attendance set to %s for registration %s by %s", status, registration.id, chairperson.id)
    return registration
