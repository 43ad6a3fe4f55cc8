import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user, require_role
from eventhub.controller.user_controller import (
    retrieve_users,
    update_profile_controller,
    update_role_controller,
)
from eventhub.database import get_db
from eventhub.errors import AppError, ServerError
from eventhub.models.user_model import User
from eventhub.response_model import ResponseModel
from eventhub.schema.user_schema import ProfileUpdate, RoleUpdate, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()


# ----------------------- PROFILE -----------------------
@router.get("/profile", response_description="Retrieve own profile")
async def get_profile(user: User = Depends(get_current_user)):
    return ResponseModel(UserOut.model_validate(user), "Profile retrieved successfully")


@router.put("/profile", response_description="Update own profile")
async def update_profile(body: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        updated = await update_profile_controller(db, user, body.model_dump(exclude_none=True))
        return ResponseModel(UserOut.model_validate(updated), "Profile updated successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Profile update failed")
        raise ServerError()


# ----------------------- ADMIN -----------------------
@router.get("", response_description="Retrieve all users")
async def get_users(role: str = None, admin: User = Depends(require_role("admin")), db: Session = Depends(get_db)):
    users = await retrieve_users(db, role)
    return ResponseModel([UserOut.model_validate(u) for u in users], "Users retrieved successfully")


@router.put("/{user_id}/role", response_description="Change a user's role")
async def change_role(user_id: int, body: RoleUpdate, admin: User = Depends(require_role("admin")),
                      db: Session = Depends(get_db)):
    try:
        updated = await update_role_controller(db, user_id, body.role)
        return ResponseModel(UserOut.model_validate(updated), "Role updated successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Role update failed")
        raise ServerError()


__all__ = ["router"]
