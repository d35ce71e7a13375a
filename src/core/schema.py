"""SQLite schema management (code-first approach)."""

import logging

from src.core import db_client


logger = logging.getLogger(__name__)


# Central list of all collections, in dependency order
COLLECTIONS = [
    "users",
    "homes",
    "home_members",
    "home_invitations",
    "rooms",
    "task_groups",
    "tasks",
    "habits",
    "habit_completions",
]


TABLE_SCHEMAS: dict[str, str] = {
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            name TEXT,
            photo_url TEXT,
            created_at TEXT NOT NULL,
            last_login_at TEXT NOT NULL
        )
    """,
    "homes": """
        CREATE TABLE IF NOT EXISTS homes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            created_by INTEGER NOT NULL,
            created_at TEXT NOT NULL
        )
    """,
    "home_members": """
        CREATE TABLE IF NOT EXISTS home_members (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            home_id INTEGER NOT NULL REFERENCES homes(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL,
            joined_at TEXT NOT NULL,
            UNIQUE (home_id, user_id)
        )
    """,
    "home_invitations": """
        CREATE TABLE IF NOT EXISTS home_invitations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            home_id INTEGER NOT NULL REFERENCES homes(id) ON DELETE CASCADE,
            invited_email TEXT NOT NULL,
            invited_by INTEGER NOT NULL,
            status TEXT NOT NULL CHECK (status IN ('pending', 'accepted', 'declined')),
            created_at TEXT NOT NULL
        )
    """,
    "rooms": """
        CREATE TABLE IF NOT EXISTS rooms (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            home_id INTEGER NOT NULL REFERENCES homes(id) ON DELETE CASCADE,
            color TEXT NOT NULL,
            created_at TEXT NOT NULL
        )
    """,
    "task_groups": """
        CREATE TABLE IF NOT EXISTS task_groups (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            home_id INTEGER NOT NULL REFERENCES homes(id) ON DELETE CASCADE,
            created_by INTEGER NOT NULL,
            created_at TEXT NOT NULL
        )
    """,
    "tasks": """
        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            status TEXT NOT NULL CHECK (status IN ('pending', 'in_progress', 'completed')),
            due_date TEXT,
            recurrence_days INTEGER CHECK (recurrence_days IS NULL OR recurrence_days > 0),
            home_id INTEGER NOT NULL REFERENCES homes(id) ON DELETE CASCADE,
            room_id INTEGER,
            group_id INTEGER,
            assigned_to INTEGER,
            created_by INTEGER NOT NULL,
            created_at TEXT NOT NULL,
            completed_at TEXT
        )
    """,
    "habits": """
        CREATE TABLE IF NOT EXISTS habits (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            home_id INTEGER NOT NULL REFERENCES homes(id) ON DELETE CASCADE,
            room_id INTEGER,
            group_id INTEGER,
            created_by INTEGER NOT NULL,
            created_at TEXT NOT NULL
        )
    """,
    "habit_completions": """
        CREATE TABLE IF NOT EXISTS habit_completions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            habit_id INTEGER NOT NULL REFERENCES habits(id) ON DELETE CASCADE,
            completed_by INTEGER NOT NULL,
            completed_at TEXT NOT NULL,
            home_id INTEGER NOT NULL
        )
    """,
}


INDEXES: list[str] = [
    "CREATE INDEX IF NOT EXISTS idx_home_members_user ON home_members (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_invitations_home_status ON home_invitations (home_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_invitations_email_status ON home_invitations (invited_email, status)",
    "CREATE INDEX IF NOT EXISTS idx_rooms_home ON rooms (home_id)",
    "CREATE INDEX IF NOT EXISTS idx_task_groups_home ON task_groups (home_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_home_status ON tasks (home_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_habits_home ON habits (home_id)",
    "CREATE INDEX IF NOT EXISTS idx_habit_completions_habit ON habit_completions (habit_id, completed_at)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes if they do not exist yet."""
    conn = await db_client.get_connection(db_path=db_path)

    for collection in COLLECTIONS:
        await conn.execute(TABLE_SCHEMAS[collection])

    for index_sql in INDEXES:
        await conn.execute(index_sql)

    await conn.commit()
    logger.info("Schema initialized", extra={"collections": len(COLLECTIONS)})
