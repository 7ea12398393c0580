# maintenance_app/work_order_service.py
"""
Work orders and their lifecycle.

Rows are read from the work_orders table first, then the referenced
equipment and users are fetched in a second step and folded in as read-only
summaries (see resolve_work_orders). References that no longer exist
resolve to None.
"""
import logging

from maintenance_app.database import from_db_timestamp, new_id, to_db_timestamp, to_db_value, utc_now
from maintenance_app.equipment_service import equipment_exists, fetch_equipment_summaries
from maintenance_app.errors import NotFound, ValidationFailure
from maintenance_app.models import (
    WorkOrderIn,
    WorkOrderPriority,
    WorkOrderStatus,
    WorkOrderUpdate,
)
from maintenance_app.user_service import fetch_user_summaries

logger = logging.getLogger(__name__)

WORK_ORDER_NOT_FOUND = "Work order not found"

# Model field -> column
COLUMNS = {
    "title": "title",
    "equipment": "equipment_id",
    "priority": "priority",
    "status": "status",
    "assigned_technician": "assigned_technician_id",
    "description": "description",
    "due_date": "due_date",
}
REQUIRED_FIELDS = ("title", "equipment", "priority", "status", "description", "due_date")


def row_to_record(row) -> dict:
    """Unresolved record: references are still plain ids."""
    return {
        "id": row["id"],
        "title": row["title"],
        "equipment": row["equipment_id"],
        "priority": WorkOrderPriority(row["priority"]),
        "status": WorkOrderStatus(row["status"]),
        "assigned_technician": row["assigned_technician_id"],
        "description": row["description"],
        "due_date": from_db_timestamp(row["due_date"]),
        "created_by": row["created_by_id"],
        "created_at": from_db_timestamp(row["created_at"]),
        "updated_at": from_db_timestamp(row["updated_at"]),
    }


def resolve_work_orders(records, equipment_lookup: dict, user_lookup: dict):
    """Replace reference ids with summaries from the lookup maps."""
    resolved = []
    for record in records:
        item = dict(record)
        item["equipment"] = equipment_lookup.get(record["equipment"])
        item["assigned_technician"] = user_lookup.get(record["assigned_technician"])
        item["created_by"] = user_lookup.get(record["created_by"])
        resolved.append(item)
    return resolved


def _resolve(conn, records):
    equipment_lookup = fetch_equipment_summaries(conn, [r["equipment"] for r in records])
    user_ids = [r["assigned_technician"] for r in records] + [r["created_by"] for r in records]
    user_lookup = fetch_user_summaries(conn, user_ids)
    return resolve_work_orders(records, equipment_lookup, user_lookup)


def query_work_orders(conn, status=None, technician=None, statuses=None,
                      created_from=None, created_to=None, newest_first=True):
    """
    Equality filters are ANDed together; any argument left as None is ignored.
    An unknown status value simply matches nothing.
    created_from/created_to bound createdAt inclusively and only apply together.
    """
    clauses = []
    params = []
    if status:
        clauses.append("status = ?")
        params.append(to_db_value(status))
    if statuses:
        values = [to_db_value(s) for s in statuses]
        clauses.append(f"status IN ({','.join('?' * len(values))})")
        params.extend(values)
    if technician:
        clauses.append("assigned_technician_id = ?")
        params.append(technician)
    if created_from is not None and created_to is not None:
        clauses.append("created_at >= ? AND created_at <= ?")
        params.extend([to_db_timestamp(created_from), to_db_timestamp(created_to)])

    query = "SELECT * FROM work_orders"
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    order = "DESC" if newest_first else "ASC"
    query += f" ORDER BY created_at {order}, rowid {order}"

    records = [row_to_record(row) for row in conn.execute(query, params).fetchall()]
    return _resolve(conn, records)


def list_work_orders(conn, status=None, technician=None):
    return query_work_orders(conn, status=status, technician=technician)


def get_work_order(conn, work_order_id: str) -> dict:
    row = conn.execute("SELECT * FROM work_orders WHERE id = ?", (work_order_id,)).fetchone()
    if row is None:
        raise NotFound(WORK_ORDER_NOT_FOUND)
    return _resolve(conn, [row_to_record(row)])[0]


def _check_equipment(conn, equipment_id):
    if not equipment_exists(conn, equipment_id):
        raise ValidationFailure(f"Work order validation failed: equipment {equipment_id} does not exist")


def create_work_order(conn, data: WorkOrderIn, caller: dict) -> dict:
    """createdBy always comes from the authenticated caller."""
    _check_equipment(conn, data.equipment)

    now = to_db_timestamp(utc_now())
    work_order_id = new_id()
    conn.execute(
        """
        INSERT INTO work_orders (id, title, equipment_id, priority, status, assigned_technician_id,
                                 description, due_date, created_by_id, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            work_order_id,
            data.title,
            data.equipment,
            data.priority.value,
            data.status.value,
            data.assigned_technician,
            data.description,
            to_db_timestamp(data.due_date),
            caller["id"],
            now,
            now,
        ),
    )
    conn.commit()
    logger.info("Work order %s created by %s", work_order_id, caller["id"])
    return get_work_order(conn, work_order_id)


def update_work_order(conn, work_order_id: str, data: WorkOrderUpdate) -> dict:
    # Any status may follow any other
    changes = data.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise ValidationFailure(f"Work order validation failed: {field} is required")

    exists = conn.execute("SELECT 1 FROM work_orders WHERE id = ?", (work_order_id,)).fetchone()
    if exists is None:
        raise NotFound(WORK_ORDER_NOT_FOUND)
    if "equipment" in changes:
        _check_equipment(conn, changes["equipment"])

    assignments = [f"{COLUMNS[field]} = ?" for field in changes]
    params = [to_db_value(value) for value in changes.values()]
    assignments.append("updated_at = ?")
    params.append(to_db_timestamp(utc_now()))
    params.append(work_order_id)

    conn.execute(f"UPDATE work_orders SET {', '.join(assignments)} WHERE id = ?", params)
    conn.commit()
    logger.info("Updated work order %s fields=%s", work_order_id, sorted(changes))
    return get_work_order(conn, work_order_id)


def delete_work_order(conn, work_order_id: str):
    cursor = conn.execute("DELETE FROM work_orders WHERE id = ?", (work_order_id,))
    conn.commit()
    if cursor.rowcount == 0:
        raise NotFound(WORK_ORDER_NOT_FOUND)
    logger.info("Deleted work order %s", work_order_id)
