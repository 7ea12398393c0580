# maintenance_app/database.py
import logging
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from enum import Enum

from fastapi import Request

logger = logging.getLogger(__name__)

# References between tables are plain ids: deleting equipment or a user
# leaves work orders pointing at a record that no longer exists.
SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    role TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS equipment (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'operational',
    last_maintenance_date TEXT,
    next_maintenance_date TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS work_orders (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    equipment_id TEXT NOT NULL,
    priority TEXT NOT NULL DEFAULT 'medium',
    status TEXT NOT NULL DEFAULT 'pending',
    assigned_technician_id TEXT,
    description TEXT NOT NULL,
    due_date TEXT NOT NULL,
    created_by_id TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_work_orders_status ON work_orders (status);
CREATE INDEX IF NOT EXISTS idx_work_orders_technician ON work_orders (assigned_technician_id);
CREATE INDEX IF NOT EXISTS idx_work_orders_created_at ON work_orders (created_at);
"""


def get_db(db_path: str) -> sqlite3.Connection:
    """
    Open a connection to the sqlite database at db_path.

    Connections may be closed from a different worker thread than the one
    that opened them, so the same-thread check is disabled.
    """
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str):
    directory = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(directory, exist_ok=True)
    conn = get_db(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    logger.info("Using database path: %s", os.path.abspath(db_path))


def get_conn(request: Request):
    """Per-request connection, closed once the response has been produced."""
    conn = get_db(request.app.state.database_path)
    try:
        yield conn
    finally:
        conn.close()


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_db_timestamp(value):
    """Store timestamps as fixed-width UTC ISO strings so they sort and compare as text."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_timestamp(value):
    if value is None:
        return None
    return datetime.fromisoformat(value)


def to_db_value(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return to_db_timestamp(value)
    return value
