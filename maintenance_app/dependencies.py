# maintenance_app/dependencies.py
import logging
from typing import Iterable

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from maintenance_app import config
from maintenance_app.errors import Forbidden, Unauthenticated
from maintenance_app.models import Role

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def is_role_allowed(role: Role, required_roles: Iterable[Role]) -> bool:
    """An empty requirement admits any authenticated caller."""
    required = set(required_roles)
    return not required or role in required


def get_current_user(token: str = Depends(oauth2_scheme)) -> dict:
    if not token:
        raise Unauthenticated("Access token required")
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        logger.warning("Rejected bearer token")
        raise Unauthenticated("Could not validate credentials")

    user_id = payload.get("sub")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise Unauthenticated("Could not validate credentials")
    if not user_id:
        raise Unauthenticated("Could not validate credentials")

    return {
        "id": user_id,
        "email": payload.get("email"),
        "name": payload.get("name"),
        "role": role,
    }


def require_role(*roles: Role):
    def role_checker(user: dict = Depends(get_current_user)):
        if not is_role_allowed(user["role"], roles):
            logger.warning("Role %s denied, requires one of %s", user["role"].value, [r.value for r in roles])
            raise Forbidden("Access denied. Insufficient permissions.")
        return user
    return role_checker
