# maintenance_app/auth.py
import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from jose import jwt
from passlib.context import CryptContext

from maintenance_app import config, user_service
from maintenance_app.database import get_conn
from maintenance_app.dependencies import get_current_user
from maintenance_app.models import Role, Token, User, UserCreate, UserSummary

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
router = APIRouter()


def hash_password(plain_password):
    return pwd_context.hash(plain_password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_minutes: int = None):
    to_encode = data.copy()
    minutes = expires_minutes if expires_minutes is not None else config.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def token_for(user: dict):
    return create_access_token({
        "sub": user["id"],
        "email": user["email"],
        "name": user["name"],
        "role": user["role"].value,
    })


def seed_manager(conn: sqlite3.Connection):
    """Create the configured first manager account unless it already exists."""
    if not (config.SEED_MANAGER_EMAIL and config.SEED_MANAGER_PASSWORD):
        return
    if user_service.find_credentials(conn, config.SEED_MANAGER_EMAIL) is not None:
        return
    data = UserCreate(
        name=config.SEED_MANAGER_NAME,
        email=config.SEED_MANAGER_EMAIL,
        password=config.SEED_MANAGER_PASSWORD,
        role=Role.MANAGER,
    )
    user_service.create_user(conn, data, hash_password(data.password))
    logger.info("Seeded manager account %s", data.email)


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), conn=Depends(get_conn)):
    row = user_service.find_credentials(conn, form_data.username)
    if row is None or not verify_password(form_data.password, row["password"]):
        logger.warning("Failed login for %s", form_data.username)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user = user_service.row_to_user(row)
    return {
        "access_token": token_for(user),
        "token_type": "bearer",
        "role": user["role"],
        "user": user,
    }


# --- Current caller's stored profile ---
@router.get("/me", response_model=User)
def who_am_i(user=Depends(get_current_user), conn=Depends(get_conn)):
    return user_service.get_user(conn, user["id"])


# --- Technicians available for assignment ---
@router.get("/technicians", response_model=List[UserSummary])
def list_technicians(user=Depends(get_current_user), conn=Depends(get_conn)):
    return user_service.list_users(conn, role=Role.TECHNICIAN)
