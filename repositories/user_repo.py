"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
"""

from typing import Optional

from db.connection import dict_cursor, get_connection, release_connection
from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """Repository for CRUD operations on the users table."""

    def ensure_user(self, uid: str, name: Optional[str] = None) -> User:
        """
        Insert a user if they don't exist, or refresh the name of the existing one.
        Uses PostgreSQL's ON CONFLICT (upsert) for atomicity.

        Args:
            uid: Stable user id.
            name: Optional display name; an empty name keeps the stored one.

        Returns:
            The stored User.
        """
        sql = """
            INSERT INTO users (uid, name)
            VALUES (%s, %s)
            ON CONFLICT (uid) DO UPDATE
                SET name = COALESCE(EXCLUDED.name, users.name), updated_at = NOW()
            RETURNING uid, name, email, picture, custom_user_id;
        """
        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, (uid, name or None))
                row = cur.fetchone()
            conn.commit()
            return User(**row)
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to ensure user {uid}: {e}")
            raise
        finally:
            release_connection(conn)

    def get_by_uid(self, uid: str) -> Optional[User]:
        """Fetch a user by id, or None."""
        sql = "SELECT uid, name, email, picture, custom_user_id FROM users WHERE uid = %s;"
        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, (uid,))
                row = cur.fetchone()
                return User(**row) if row else None
        finally:
            release_connection(conn)

    def is_custom_id_taken(self, custom_user_id: str, exclude_uid: Optional[str] = None) -> bool:
        """True if another user already uses this custom id."""
        sql = "SELECT 1 FROM users WHERE custom_user_id = %s"
        params: list = [custom_user_id]
        if exclude_uid:
            sql += " AND uid <> %s"
            params.append(exclude_uid)
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql + ";", params)
                return cur.fetchone() is not None
        finally:
            release_connection(conn)

    def set_custom_id(self, uid: str, custom_user_id: str) -> bool:
        """Store a (validated, lowercased) custom id for a user."""
        sql = "UPDATE users SET custom_user_id = %s, updated_at = NOW() WHERE uid = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (custom_user_id, uid))
                updated = cur.rowcount > 0
            conn.commit()
            return updated
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to set custom id for {uid}: {e}")
            raise
        finally:
            release_connection(conn)
