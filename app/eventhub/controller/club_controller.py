from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.errors import NotFoundError, ValidationError
from eventhub.models.club_model import Club, ClubMember
from eventhub.models.user_model import User


# ------------------ Add New Club ------------------
async def add_club_controller(db: Session, club_data: dict):
    club_data = club_data.copy()
    club_data["name"] = club_data["name"].strip()

    if db.query(Club).filter(Club.name == club_data["name"]).first():
        raise ValidationError("Club already exists", code="CLUB_EXISTS")

    new_club = Club(**club_data)
    db.add(new_club)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Club already exists", code="CLUB_EXISTS")
    db.refresh(new_club)
    return new_club


# ------------------ Retrieve Clubs ------------------
async def retrieve_clubs_controller(db: Session, search: str = ""):
    query = db.query(Club).filter(Club.is_active.is_(True))
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Club.name.ilike(pattern), Club.description.ilike(pattern)))
    return query.order_by(Club.name.asc()).limit(100).all()


async def retrieve_club_controller(db: Session, club_id: int):
    club = db.query(Club).filter(Club.id == club_id).first()
    if not club:
        raise NotFoundError("Club not found")
    return club


# ------------------ Memberships ------------------
async def add_club_member_controller(db: Session, club_id: int, user_id: int, role: str):
    await retrieve_club_controller(db, club_id)
    if not db.query(User).filter(User.id == user_id).first():
        raise NotFoundError("User not found")

    member = db.query(ClubMember).filter(
        ClubMember.club_id == club_id,
        ClubMember.user_id == user_id,
    ).first()

    if member:
        member.role = role
    else:
        member = ClubMember(club_id=club_id, user_id=user_id, role=role)
        db.add(member)
    db.commit()
    db.refresh(member)
    return member


def is_club_chairperson(db: Session, club_id: int, user_id: int) -> bool:
    return db.query(ClubMember).filter(
        ClubMember.club_id == club_id,
        ClubMember.user_id == user_id,
        ClubMember.role == "chairperson",
    ).first() is not None
