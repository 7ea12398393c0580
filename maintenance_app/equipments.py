# maintenance_app/equipments.py
from typing import List

from fastapi import APIRouter, Depends

from maintenance_app import equipment_service
from maintenance_app.database import get_conn
from maintenance_app.dependencies import get_current_user, require_role
from maintenance_app.models import Equipment, EquipmentIn, EquipmentUpdate, Message, Role

router = APIRouter()


# List equipment (allowed for all authenticated users)
@router.get("", response_model=List[Equipment])
def list_equipment(user=Depends(get_current_user), conn=Depends(get_conn)):
    return equipment_service.list_equipment(conn)


@router.get("/{equipment_id}", response_model=Equipment)
def get_equipment(equipment_id: str, user=Depends(get_current_user), conn=Depends(get_conn)):
    return equipment_service.get_equipment(conn, equipment_id)


# Add equipment (supervisor/manager only)
@router.post(
    "",
    response_model=Equipment,
    status_code=201,
    dependencies=[Depends(require_role(Role.SUPERVISOR, Role.MANAGER))],
)
def add_equipment(data: EquipmentIn, conn=Depends(get_conn)):
    return equipment_service.create_equipment(conn, data)


# Update equipment (supervisor/manager only)
@router.put(
    "/{equipment_id}",
    response_model=Equipment,
    dependencies=[Depends(require_role(Role.SUPERVISOR, Role.MANAGER))],
)
def update_equipment(equipment_id: str, data: EquipmentUpdate, conn=Depends(get_conn)):
    return equipment_service.update_equipment(conn, equipment_id, data)


# Delete equipment (manager only)
@router.delete("/{equipment_id}", response_model=Message, dependencies=[Depends(require_role(Role.MANAGER))])
def delete_equipment(equipment_id: str, conn=Depends(get_conn)):
    equipment_service.delete_equipment(conn, equipment_id)
    return {"message": "Equipment deleted successfully"}
