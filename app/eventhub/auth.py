from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.errors import ForbiddenError, UnauthorizedError
from eventhub.models.user_model import User
from eventhub.security import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise UnauthorizedError("Missing authorization token")

    payload = verify_token(credentials.credentials)
    if not payload or "userId" not in payload:
        raise UnauthorizedError("Invalid or expired token")

    user = db.query(User).filter(User.id == payload["userId"]).first()
    if not user or not user.is_active:
        raise UnauthorizedError("User not found")
    return user


def require_role(*roles):
    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise ForbiddenError("Insufficient permissions")
        return user

    return dependency
