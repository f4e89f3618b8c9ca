"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of the transaction history.
"""

import io
from typing import Optional

import pandas as pd

from repositories.transaction_repo import TransactionRepository
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = ["Date", "Account", "Type", "Previous balance", "New balance", "Change", "Description"]


class ExportService:
    """Builds downloadable history files."""

    def __init__(self):
        self.repo = TransactionRepository()

    def history_frame(self, user_id: str, account_id: Optional[str] = None) -> pd.DataFrame:
        """The user's transactions as a DataFrame, newest first."""
        transactions = self.repo.get_all(user_id, account_id)
        rows = [
            {
                "Date": t.timestamp.strftime("%Y-%m-%d %H:%M"),
                "Account": t.account_name,
                "Type": t.type,
                "Previous balance": t.previous_balance,
                "New balance": t.new_balance,
                "Change": t.change,
                "Description": t.description,
            }
            for t in transactions
        ]
        return pd.DataFrame(rows, columns=COLUMNS)

    def export_csv(self, user_id: str, account_id: Optional[str] = None) -> io.BytesIO:
        """
        Export the transaction history as CSV.

        Returns:
            A BytesIO buffer positioned at the start.
        """
        df = self.history_frame(user_id, account_id)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} transactions as CSV for user {user_id}")
        return buffer

    def export_excel(self, user_id: str, account_id: Optional[str] = None) -> io.BytesIO:
        """
        Export the transaction history as .xlsx with a per-account summary sheet.

        Returns:
            A BytesIO buffer positioned at the start.
        """
        df = self.history_frame(user_id, account_id)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Transactions", index=False)

            if not df.empty:
                summary = (
                    df.groupby("Account")
                    .agg(Transactions=("Type", "size"), **{"Net change": ("Change", "sum")})
                    .reset_index()
                )
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} transactions as Excel for user {user_id}")
        return buffer
