# maintenance_app/models.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    TECHNICIAN = "technician"
    SUPERVISOR = "supervisor"
    MANAGER = "manager"


class EquipmentStatus(str, Enum):
    OPERATIONAL = "operational"
    MAINTENANCE = "maintenance"
    BROKEN = "broken"


class WorkOrderPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class WorkOrderStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_WORK_ORDER_STATUSES = (WorkOrderStatus.PENDING, WorkOrderStatus.IN_PROGRESS)


class CamelModel(BaseModel):
    """Fields are read and written in camelCase; snake_case is accepted on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Equipment ---
class EquipmentIn(CamelModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    status: EquipmentStatus = EquipmentStatus.OPERATIONAL
    last_maintenance_date: Optional[datetime] = None
    next_maintenance_date: datetime


class EquipmentUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    status: Optional[EquipmentStatus] = None
    last_maintenance_date: Optional[datetime] = None
    next_maintenance_date: Optional[datetime] = None


class Equipment(EquipmentIn):
    id: str = Field(..., alias="_id")
    created_at: datetime
    updated_at: datetime


# --- Reference summaries (read-only views of referenced records) ---
class EquipmentSummary(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    type: str


class UserSummary(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    email: str


# --- Work orders ---
def _blank_to_none(value):
    # The browser form posts "" for an unassigned technician
    if isinstance(value, str) and not value.strip():
        return None
    return value


class WorkOrderIn(CamelModel):
    title: str = Field(..., min_length=1)
    equipment: str = Field(..., min_length=1)
    priority: WorkOrderPriority = WorkOrderPriority.MEDIUM
    status: WorkOrderStatus = WorkOrderStatus.PENDING
    assigned_technician: Optional[str] = None
    description: str = Field(..., min_length=1)
    due_date: datetime

    @field_validator("assigned_technician", mode="before")
    @classmethod
    def blank_technician_is_unassigned(cls, value):
        return _blank_to_none(value)


class WorkOrderUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    equipment: Optional[str] = Field(None, min_length=1)
    priority: Optional[WorkOrderPriority] = None
    status: Optional[WorkOrderStatus] = None
    assigned_technician: Optional[str] = None
    description: Optional[str] = Field(None, min_length=1)
    due_date: Optional[datetime] = None

    @field_validator("assigned_technician", mode="before")
    @classmethod
    def blank_technician_is_unassigned(cls, value):
        return _blank_to_none(value)


class WorkOrder(CamelModel):
    id: str = Field(..., alias="_id")
    title: str
    equipment: Optional[EquipmentSummary] = None
    priority: WorkOrderPriority
    status: WorkOrderStatus
    assigned_technician: Optional[UserSummary] = None
    description: str
    due_date: datetime
    created_by: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


# --- Users ---
class UserCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    role: Role = Role.TECHNICIAN


class User(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role
    user: User


class Message(BaseModel):
    message: str
