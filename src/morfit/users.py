"""
User account queries.

The users and roles tables belong to the studio database; this module only
reads and writes rows. Rows come back as dicts keyed by column name.
"""

from datetime import datetime, timezone

from psycopg.errors import UniqueViolation
from psycopg.rows import dict_row

from .db import get_db
from .errors import ConflictError
from .security.crypto import generate_uuid

_USER_COLUMNS = """
    u.id, u.email, u.password, u."fullName", u."roleId",
    u."isActive", u."lastLogin", u."createdAt"
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_user_by_email(email: str) -> dict | None:
    with get_db().cursor(row_factory=dict_row) as cur:
        cur.execute(
            f"SELECT {_USER_COLUMNS} FROM users u WHERE u.email = %s",
            (email,),
        )
        return cur.fetchone()


def get_user(user_id: str) -> dict | None:
    with get_db().cursor(row_factory=dict_row) as cur:
        cur.execute(
            f"SELECT {_USER_COLUMNS} FROM users u WHERE u.id = %s",
            (user_id,),
        )
        return cur.fetchone()


def role_exists(role_id: str) -> bool:
    with get_db().cursor() as cur:
        cur.execute(
            'SELECT 1 FROM roles WHERE id = %s AND "isActive" = true', (role_id,)
        )
        return cur.fetchone() is not None


def create_user(email: str, password_hash: str, full_name: str, role_id: str) -> dict:
    """
    Insert a user and return the new row.

    Raises:
        ConflictError: Email already registered.
    """
    user_id = generate_uuid()
    try:
        with get_db().cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                INSERT INTO users
                    (id, email, password, "fullName", "roleId", "isActive", "createdAt")
                VALUES (%s, %s, %s, %s, %s, true, %s)
                RETURNING id, email, password, "fullName", "roleId",
                          "isActive", "lastLogin", "createdAt"
                """,
                (user_id, email, password_hash, full_name, role_id, _now()),
            )
            return cur.fetchone()
    except UniqueViolation:
        raise ConflictError("Email already registered")


def touch_last_login(user_id: str) -> None:
    with get_db().cursor() as cur:
        cur.execute(
            'UPDATE users SET "lastLogin" = %s WHERE id = %s', (_now(), user_id)
        )


def count_users() -> int:
    with get_db().cursor() as cur:
        cur.execute("SELECT count(*) FROM users")
        return cur.fetchone()[0]


def list_users(limit: int, offset: int) -> list[dict]:
    with get_db().cursor(row_factory=dict_row) as cur:
        cur.execute(
            f"""
            SELECT {_USER_COLUMNS} FROM users u
            ORDER BY u."fullName", u.id
            LIMIT %s OFFSET %s
            """,
            (limit, offset),
        )
        return cur.fetchall()


def to_public(user: dict) -> dict:
    """User row as returned by the API. Never includes the password hash."""
    return {
        "id": user["id"],
        "email": user["email"],
        "fullName": user["fullName"],
        "roleId": user["roleId"],
        "isActive": user["isActive"],
        "lastLogin": user.get("lastLogin"),
        "createdAt": user.get("createdAt"),
    }
