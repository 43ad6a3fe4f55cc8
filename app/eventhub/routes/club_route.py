import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.auth import require_role
from eventhub.controller.club_controller import (
    add_club_controller,
    add_club_member_controller,
    retrieve_club_controller,
    retrieve_clubs_controller,
)
from eventhub.database import get_db
from eventhub.errors import AppError, ServerError
from eventhub.models.user_model import User
from eventhub.response_model import ResponseModel
from eventhub.schema.club_schema import ClubCreate, ClubMemberCreate, ClubMemberOut, ClubOut

logger = logging.getLogger(__name__)

router = APIRouter()


# ----------------------- GET ALL Clubs -----------------------
@router.get("", response_description="Retrieve clubs")
async def get_clubs(search: str = "", db: Session = Depends(get_db)):
    clubs = await retrieve_clubs_controller(db, search)
    return ResponseModel([ClubOut.model_validate(c) for c in clubs], "Clubs retrieved successfully")


@router.get("/{club_id}", response_description="Retrieve club")
async def get_club(club_id: int, db: Session = Depends(get_db)):
    club = await retrieve_club_controller(db, club_id)
    return ResponseModel(ClubOut.model_validate(club), "Club retrieved successfully")


# ----------------------- ADD Club -----------------------
@router.post("", status_code=status.HTTP_201_CREATED, response_description="Create a new club")
async def add_club(body: ClubCreate, admin: User = Depends(require_role("admin")), db: Session = Depends(get_db)):
    try:
        club = await add_club_controller(db, body.model_dump())
        return ResponseModel(ClubOut.model_validate(club), "Club created successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Club creation failed")
        raise ServerError()


# ----------------------- ADD Member -----------------------
@router.post("/{club_id}/members", status_code=status.HTTP_201_CREATED, response_description="Add club member")
async def add_member(club_id: int, body: ClubMemberCreate, admin: User = Depends(require_role("admin")),
                     db: Session = Depends(get_db)):
    try:
        member = await add_club_member_controller(db, club_id, body.user_id, body.role)
        return ResponseModel(ClubMemberOut.model_validate(member), "Club member saved successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Adding club member failed")
        raise ServerError()


__all__ = ["router"]
