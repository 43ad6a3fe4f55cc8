from sqlalchemy import case, func
from sqlalchemy.orm import Session

from eventhub.controller.club_controller import is_club_chairperson, retrieve_club_controller
from eventhub.controller.event_controller import ensure_can_manage, retrieve_event_controller
from eventhub.errors import ForbiddenError
from eventhub.models.event_model import Event
from eventhub.models.registration_model import Registration
from eventhub.models.user_model import User


def percentage(part, total) -> float:
    if not total:
        return 0.0
    return round(part / total * 100, 2)


def summarize_attendance(counts: dict) -> dict:
    """Add the derived percentages to raw attendance counts."""
    total = counts.get("total_registrations", 0)
    avg_rating = counts.get("avg_rating")
    return {
        **counts,
        "avg_rating": round(float(avg_rating), 2) if avg_rating is not None else None,
        "attendance_percentage": percentage(counts.get("attendance_present", 0), total),
        "no_show_percentage": percentage(counts.get("attendance_absent", 0), total),
    }


def _status_count(status: str):
    return func.sum(
        case(
            (Registration.attendance_marked.is_(True) & (Registration.attendance_status == status), 1),
            else_=0,
        )
    )


def _aggregate(db: Session, *criteria) -> dict:
    row = (
        db.query(
            func.count(Registration.id).label("total_registrations"),
            _status_count("present").label("attendance_present"),
            _status_count("absent").label("attendance_absent"),
            _status_count("late").label("attendance_late"),
            _status_count("excused").label("attendance_excused"),
            func.sum(case((Registration.attendance_marked.is_(False), 1), else_=0)).label("attendance_pending"),
            func.count(Registration.feedback_submitted_at).label("feedback_count"),
            func.avg(Registration.feedback_rating).label("avg_rating"),
        )
        .select_from(Registration)
        .join(Event, Registration.event_id == Event.id)
        .filter(Registration.status != "cancelled", *criteria)
        .one()
    )

    counts = {
        key: int(getattr(row, key) or 0)
        for key in (
            "total_registrations",
            "attendance_present",
            "attendance_absent",
            "attendance_late",
            "attendance_excused",
            "attendance_pending",
            "feedback_count",
        )
    }
    counts["avg_rating"] = row.avg_rating
    return summarize_attendance(counts)


# ------------------ Event analytics ------------------
async def event_analytics_controller(db: Session, user: User, event_id: int):
    event = await retrieve_event_controller(db, event_id)
    ensure_can_manage(event, user)
    return {"event_id": event.id, "title": event.title, **_aggregate(db, Registration.event_id == event_id)}


# ------------------ Club analytics ------------------
async def club_analytics_controller(db: Session, user: User, club_id: int):
    club = await retrieve_club_controller(db, club_id)
    if user.role != "admin" and not is_club_chairperson(db, club_id, user.id):
        raise ForbiddenError("You are not authorized for this club")

    event_count = db.query(func.count(Event.id)).filter(Event.club_id == club_id).scalar()
    return {
        "club_id": club.id,
        "name": club.name,
        "total_events": int(event_count or 0),
        **_aggregate(db, Event.club_id == club_id),
    }
