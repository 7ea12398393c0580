# maintenance_app/user_service.py
import logging
import sqlite3

from maintenance_app.database import from_db_timestamp, new_id, to_db_timestamp, utc_now
from maintenance_app.errors import NotFound, ValidationFailure
from maintenance_app.models import Role, UserCreate

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, email, role, created_at, updated_at"


def row_to_user(row) -> dict:
    return {
        "id": row["id"],
        "name": row["name"],
        "email": row["email"],
        "role": Role(row["role"]),
        "created_at": from_db_timestamp(row["created_at"]),
        "updated_at": from_db_timestamp(row["updated_at"]),
    }


def list_users(conn, role: Role = None):
    query = f"SELECT {USER_COLUMNS} FROM users"
    params = []
    if role is not None:
        query += " WHERE role = ?"
        params.append(role.value)
    query += " ORDER BY name, created_at"
    return [row_to_user(row) for row in conn.execute(query, params).fetchall()]


def get_user(conn, user_id: str) -> dict:
    row = conn.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
    if row is None:
        raise NotFound("User not found")
    return row_to_user(row)


def find_credentials(conn, email: str):
    """Row including the password hash, or None."""
    return conn.execute(
        f"SELECT {USER_COLUMNS}, password FROM users WHERE email = ?", (email.strip().lower(),)
    ).fetchone()


def create_user(conn, data: UserCreate, password_hash: str) -> dict:
    now = to_db_timestamp(utc_now())
    user_id = new_id()
    try:
        conn.execute(
            """
            INSERT INTO users (id, name, email, password, role, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, data.name, data.email.strip().lower(), password_hash, data.role.value, now, now),
        )
        conn.commit()
    except sqlite3.IntegrityError:
        conn.rollback()
        raise ValidationFailure("A user with this email already exists")
    logger.info("Created %s account %s", data.role.value, user_id)
    return get_user(conn, user_id)


def delete_user(conn, user_id: str):
    cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
    conn.commit()
    if cursor.rowcount == 0:
        raise NotFound("User not found")
    logger.info("Deleted user %s", user_id)


def fetch_user_summaries(conn, user_ids) -> dict:
    """Map of id -> {id, name, email} for the ids that still exist."""
    ids = sorted({i for i in user_ids if i})
    if not ids:
        return {}
    placeholders = ",".join("?" * len(ids))
    rows = conn.execute(f"SELECT id, name, email FROM users WHERE id IN ({placeholders})", ids).fetchall()
    return {row["id"]: {"id": row["id"], "name": row["name"], "email": row["email"]} for row in rows}
