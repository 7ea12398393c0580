# maintenance_app/work_orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from maintenance_app import work_order_service
from maintenance_app.database import get_conn
from maintenance_app.dependencies import get_current_user, require_role
from maintenance_app.models import Message, Role, WorkOrder, WorkOrderIn, WorkOrderUpdate

router = APIRouter()


# --- List work orders, optionally filtered by status and/or assigned technician ---
@router.get("", response_model=List[WorkOrder])
def list_work_orders(
    status: Optional[str] = Query(None),
    technician: Optional[str] = Query(None, description="Assigned technician id"),
    user=Depends(get_current_user),
    conn=Depends(get_conn),
):
    return work_order_service.list_work_orders(conn, status=status, technician=technician)


@router.get("/{work_order_id}", response_model=WorkOrder)
def get_work_order(work_order_id: str, user=Depends(get_current_user), conn=Depends(get_conn)):
    return work_order_service.get_work_order(conn, work_order_id)


# --- Create (supervisor/manager); createdBy is taken from the token ---
@router.post("", response_model=WorkOrder, status_code=201)
def add_work_order(
    data: WorkOrderIn,
    user=Depends(require_role(Role.SUPERVISOR, Role.MANAGER)),
    conn=Depends(get_conn),
):
    return work_order_service.create_work_order(conn, data, caller=user)


# --- Update (any authenticated user, e.g. a technician moving status along) ---
# No ownership check: any caller may edit any work order.
@router.put("/{work_order_id}", response_model=WorkOrder)
def update_work_order(
    work_order_id: str,
    data: WorkOrderUpdate,
    user=Depends(get_current_user),
    conn=Depends(get_conn),
):
    return work_order_service.update_work_order(conn, work_order_id, data)


# --- Delete (manager only) ---
@router.delete("/{work_order_id}", response_model=Message, dependencies=[Depends(require_role(Role.MANAGER))])
def delete_work_order(work_order_id: str, conn=Depends(get_conn)):
    work_order_service.delete_work_order(conn, work_order_id)
    return {"message": "Work order deleted successfully"}
