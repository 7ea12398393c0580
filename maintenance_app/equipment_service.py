# maintenance_app/equipment_service.py
"""Equipment registry: create, read, merge-update and delete equipment records."""
import logging

from maintenance_app.database import from_db_timestamp, new_id, to_db_timestamp, to_db_value, utc_now
from maintenance_app.errors import NotFound, ValidationFailure
from maintenance_app.models import EquipmentIn, EquipmentStatus, EquipmentUpdate

logger = logging.getLogger(__name__)

EQUIPMENT_NOT_FOUND = "Equipment not found"

# Model field -> column
COLUMNS = {
    "name": "name",
    "type": "type",
    "status": "status",
    "last_maintenance_date": "last_maintenance_date",
    "next_maintenance_date": "next_maintenance_date",
}
REQUIRED_FIELDS = ("name", "type", "status", "next_maintenance_date")


def row_to_equipment(row) -> dict:
    return {
        "id": row["id"],
        "name": row["name"],
        "type": row["type"],
        "status": EquipmentStatus(row["status"]),
        "last_maintenance_date": from_db_timestamp(row["last_maintenance_date"]),
        "next_maintenance_date": from_db_timestamp(row["next_maintenance_date"]),
        "created_at": from_db_timestamp(row["created_at"]),
        "updated_at": from_db_timestamp(row["updated_at"]),
    }


def list_equipment(conn, newest_first: bool = True):
    order = "DESC" if newest_first else "ASC"
    rows = conn.execute(f"SELECT * FROM equipment ORDER BY created_at {order}, rowid {order}").fetchall()
    return [row_to_equipment(row) for row in rows]


def get_equipment(conn, equipment_id: str) -> dict:
    row = conn.execute("SELECT * FROM equipment WHERE id = ?", (equipment_id,)).fetchone()
    if row is None:
        raise NotFound(EQUIPMENT_NOT_FOUND)
    return row_to_equipment(row)


def equipment_exists(conn, equipment_id: str) -> bool:
    return conn.execute("SELECT 1 FROM equipment WHERE id = ?", (equipment_id,)).fetchone() is not None


def create_equipment(conn, data: EquipmentIn) -> dict:
    now = to_db_timestamp(utc_now())
    equipment_id = new_id()
    conn.execute(
        """
        INSERT INTO equipment (id, name, type, status, last_maintenance_date, next_maintenance_date,
                               created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            equipment_id,
            data.name,
            data.type,
            data.status.value,
            to_db_timestamp(data.last_maintenance_date),
            to_db_timestamp(data.next_maintenance_date),
            now,
            now,
        ),
    )
    conn.commit()
    logger.info("Created equipment %s (%s)", equipment_id, data.name)
    return get_equipment(conn, equipment_id)


def update_equipment(conn, equipment_id: str, data: EquipmentUpdate) -> dict:
    changes = data.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise ValidationFailure(f"Equipment validation failed: {field} is required")

    if not equipment_exists(conn, equipment_id):
        raise NotFound(EQUIPMENT_NOT_FOUND)

    assignments = [f"{COLUMNS[field]} = ?" for field in changes]
    params = [to_db_value(value) for value in changes.values()]
    assignments.append("updated_at = ?")
    params.append(to_db_timestamp(utc_now()))
    params.append(equipment_id)

    conn.execute(f"UPDATE equipment SET {', '.join(assignments)} WHERE id = ?", params)
    conn.commit()
    logger.info("Updated equipment %s fields=%s", equipment_id, sorted(changes))
    return get_equipment(conn, equipment_id)


def delete_equipment(conn, equipment_id: str):
    # Work orders referencing this equipment are left as they are
    cursor = conn.execute("DELETE FROM equipment WHERE id = ?", (equipment_id,))
    conn.commit()
    if cursor.rowcount == 0:
        raise NotFound(EQUIPMENT_NOT_FOUND)
    logger.info("Deleted equipment %s", equipment_id)


def fetch_equipment_summaries(conn, equipment_ids) -> dict:
    """Map of id -> {id, name, type} for the ids that still exist."""
    ids = sorted({i for i in equipment_ids if i})
    if not ids:
        return {}
    placeholders = ",".join("?" * len(ids))
    rows = conn.execute(f"SELECT id, name, type FROM equipment WHERE id IN ({placeholders})", ids).fetchall()
    return {row["id"]: {"id": row["id"], "name": row["name"], "type": row["type"]} for row in rows}
