"""
repositories/account_repo.py
----------------------------
Data access layer for accounts.
All SQL queries related to the `accounts` table live here.
"""

from typing import Optional

from db.connection import as_json, dict_cursor, get_connection, release_connection
from models.account import Account, IncomeSchedule, MonthlyPayment
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, user_id, name, balance, due_date, description, type, "
    "monthly_payment, income_schedule, created_at, updated_at"
)


class AccountRepository:
    """Repository for CRUD operations on the accounts table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, account: Account) -> Account:
        """
        Insert a new account.

        Args:
            account: The Account to persist (balance already normalized).

        Returns:
            The same object with `id`, `created_at` and `updated_at` populated.
        """
        sql = """
            INSERT INTO accounts
                (user_id, name, balance, due_date, description, type,
                 monthly_payment, income_schedule)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at, updated_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    account.user_id, account.name, account.balance,
                    account.due_date, account.description, account.type,
                    as_json(account.monthly_payment.to_document() if account.monthly_payment else None),
                    as_json(account.income_schedule.to_document() if account.income_schedule else None),
                ))
                row = cur.fetchone()
                account.id, account.created_at, account.updated_at = row
            conn.commit()
            logger.info(f"Added {account.type} account '{account.name}' #{account.id}")
            return account
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add account: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_all(self, user_id: str, account_type: Optional[str] = None) -> list[Account]:
        """
        Get all accounts for a user, newest first.

        Args:
            user_id: Owner's user id.
            account_type: Optional filter ('savings' or 'debt').
        """
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE user_id = %s"
        params: list = [user_id]
        if account_type:
            sql += " AND type = %s"
            params.append(account_type)
        sql += " ORDER BY created_at DESC, id DESC;"

        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, params)
                return [self._row_to_account(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_by_id(self, account_id: int, user_id: str) -> Optional[Account]:
        """Fetch a single account by ID, scoped to its owner."""
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE id = %s AND user_id = %s;"
        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql, (account_id, user_id))
                row = cur.fetchone()
                return self._row_to_account(row) if row else None
        finally:
            release_connection(conn)

    def get_user_ids_with_accounts(self) -> list[str]:
        """Distinct owners that have at least one account (used by scheduled jobs)."""
        sql = "SELECT DISTINCT user_id FROM accounts ORDER BY user_id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [r[0] for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, account: Account) -> bool:
        """
        Persist every mutable field of an existing account.

        Returns:
            True if a row was updated.
        """
        sql = """
            UPDATE accounts
            SET name = %s, balance = %s, due_date = %s, description = %s,
                monthly_payment = %s, income_schedule = %s, updated_at = NOW()
            WHERE id = %s AND user_id = %s
            RETURNING updated_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    account.name, account.balance, account.due_date, account.description,
                    as_json(account.monthly_payment.to_document() if account.monthly_payment else None),
                    as_json(account.income_schedule.to_document() if account.income_schedule else None),
                    account.id, account.user_id,
                ))
                row = cur.fetchone()
                if row:
                    account.updated_at = row[0]
            conn.commit()
            return row is not None
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update account #{account.id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, account_id: int, user_id: str) -> bool:
        """Delete an account by ID, scoped to its owner."""
        sql = "DELETE FROM accounts WHERE id = %s AND user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (account_id, user_id))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted account #{account_id}")
            return deleted
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete account #{account_id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_account(row: dict) -> Account:
        """Convert a RealDictCursor row into an Account domain object."""
        return Account(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            balance=float(row["balance"]),
            due_date=row["due_date"],
            description=row["description"] or "",
            type=row["type"],
            monthly_payment=MonthlyPayment.from_document(row["monthly_payment"]),
            income_schedule=IncomeSchedule.from_document(row["income_schedule"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
