"""
repositories/transaction_repo.py
--------------------------------
Data access layer for the account activity log.
All SQL queries related to the `transactions` table live here.
"""

from typing import Optional

from db.connection import dict_cursor, get_connection, release_connection
from models.transaction import Transaction
from utils.logger import get_logger

logger = get_logger(__name__)


class TransactionRepository:
    """Repository for the append-only transactions table."""

    def add(self, transaction: Transaction) -> Transaction:
        """
        Insert a transaction record.

        Returns:
            The same Transaction with its `id` populated.
        """
        sql = """
            INSERT INTO transactions
                (account_id, account_name, user_id, type,
                 previous_balance, new_balance, description, timestamp)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    str(transaction.account_id), transaction.account_name,
                    transaction.user_id, transaction.type,
                    transaction.previous_balance, transaction.new_balance,
                    transaction.description, transaction.timestamp,
                ))
                transaction.id = cur.fetchone()[0]
            conn.commit()
            logger.info(
                f"Logged {transaction.type} on account #{transaction.account_id} "
                f"as transaction #{transaction.id}"
            )
            return transaction
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to log transaction: {e}")
            raise
        finally:
            release_connection(conn)

    def get_all(
        self, user_id: str, account_id: Optional[str] = None, limit: Optional[int] = None
    ) -> list[Transaction]:
        """
        Fetch a user's transactions, newest first.

        Args:
            user_id: Owner's user id.
            account_id: Optional filter on a single account.
            limit: Optional maximum number of rows.
        """
        sql = "SELECT * FROM transactions WHERE user_id = %s"
        params: list = [user_id]
        if account_id is not None:
            sql += " AND account_id = %s"
            params.append(str(account_id))
        sql += " ORDER BY timestamp DESC, id DESC"
        if limit:
            sql += " LIMIT %s"
            params.append(limit)

        conn = get_connection()
        try:
            with dict_cursor(conn) as cur:
                cur.execute(sql + ";", params)
                return [self._row_to_transaction(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_transaction(row: dict) -> Transaction:
        prev = row["previous_balance"]
        new = row["new_balance"]
        return Transaction(
            id=row["id"],
            account_id=row["account_id"],
            account_name=row["account_name"],
            user_id=row["user_id"],
            type=row["type"],
            previous_balance=float(prev) if prev is not None else None,
            new_balance=float(new) if new is not None else None,
            description=row["description"],
            timestamp=row["timestamp"],
        )
