import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user
from eventhub.controller.user_controller import login_controller, signup_controller
from eventhub.database import get_db
from eventhub.errors import AppError, ServerError
from eventhub.models.user_model import User
from eventhub.response_model import ResponseModel
from eventhub.schema.user_schema import LoginRequest, SignupRequest, UserDetailOut, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()


# ----------------------- SIGNUP -----------------------
@router.post("/signup", status_code=status.HTTP_201_CREATED, response_description="Create account")
async def signup(body: SignupRequest, db: Session = Depends(get_db)):
    try:
        user, token = await signup_controller(db, body.model_dump())
        return ResponseModel({"token": token, "user": UserOut.model_validate(user)}, "Account created successfully")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Signup failed")
        raise ServerError()


# ----------------------- LOGIN -----------------------
@router.post("/login", response_description="User login")
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    try:
        user, token = await login_controller(db, body.email, body.password)
        return ResponseModel({"token": token, "user": UserOut.model_validate(user)}, "Successfully logged in")
    except AppError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Login failed")
        raise ServerError()


# ----------------------- CURRENT USER -----------------------
@router.get("/me", response_description="Current user")
async def me(user: User = Depends(get_current_user)):
    return ResponseModel(UserDetailOut.model_validate(user), "User retrieved successfully")


__all__ = ["router"]
