# maintenance_app/users.py
from typing import List

from fastapi import APIRouter, Depends

from maintenance_app import user_service
from maintenance_app.auth import hash_password
from maintenance_app.database import get_conn
from maintenance_app.dependencies import require_role
from maintenance_app.models import Message, Role, User, UserCreate

router = APIRouter()


# --- List all users (manager only) ---
@router.get("", response_model=List[User], dependencies=[Depends(require_role(Role.MANAGER))])
def list_users(conn=Depends(get_conn)):
    return user_service.list_users(conn)


# --- Add a new user (manager only) ---
@router.post("", response_model=User, status_code=201, dependencies=[Depends(require_role(Role.MANAGER))])
def add_user(data: UserCreate, conn=Depends(get_conn)):
    return user_service.create_user(conn, data, hash_password(data.password))


# --- Delete user by ID (manager only) ---
@router.delete("/{user_id}", response_model=Message, dependencies=[Depends(require_role(Role.MANAGER))])
def delete_user(user_id: str, conn=Depends(get_conn)):
    user_service.delete_user(conn, user_id)
    return {"message": "User deleted successfully"}
