import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.controller.audit_controller import record_audit
from eventhub.errors import NotFoundError, UnauthorizedError, ValidationError
from eventhub.models.user_model import User
from eventhub.security import generate_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def _issue_token(user: User) -> str:
    return generate_token(user.id, user.email, user.role)


# ------------------ Signup ------------------
async def signup_controller(db: Session, user_data: dict):
    existing = await retrieve_user_by_email(db, user_data["email"])
    if existing:
        raise ValidationError("Email already registered", code="EMAIL_TAKEN")

    user_data = user_data.copy()
    password = user_data.pop("password")
    new_user = User(**user_data, password_hash=hash_password(password))
    db.add(new_user)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Email already registered", code="EMAIL_TAKEN")

    record_audit(db, new_user.id, "USER_SIGNUP", "users", new_user.id)
    db.commit()
    db.refresh(new_user)

    logger.info("User %s signed up as %s", new_user.id, new_user.role)
    return new_user, _issue_token(new_user)


# ------------------ Login ------------------
async def login_controller(db: Session, email: str, password: str):
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await retrieve_user_by_email(db, email.strip().lower())
    if not user or not user.is_active:
        raise UnauthorizedError("Invalid email or password")
    if not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")

    record_audit(db, user.id, "USER_LOGIN", "users", user.id)
    db.commit()
    return user, _issue_token(user)


async def retrieve_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


async def retrieve_user(db: Session, user_id: int):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


async def retrieve_users(db: Session, role: str = None):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return query.order_by(User.full_name).all()


# ------------------ Profile ------------------
async def update_profile_controller(db: Session, user: User, update_data: dict):
    for key, val in update_data.items():
        setattr(user, key, val)
    db.commit()
    db.refresh(user)
    return user


async def update_role_controller(db: Session, user_id: int, role: str):
    user = await retrieve_user(db, user_id)
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("User %s role changed to %s", user.id, role)
    return user
