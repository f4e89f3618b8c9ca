"""
services/transaction_service.py
-------------------------------
Read side of the account activity log.
"""

from typing import Optional

from models.transaction import Transaction
from repositories.transaction_repo import TransactionRepository
from utils.formatters import format_currency
from utils.logger import get_logger

logger = get_logger(__name__)

_TYPE_ICONS = {"create": "🆕", "update": "✏️", "delete": "🗑️"}


class TransactionService:
    """Lists and formats the transaction history."""

    def __init__(self):
        self.repo = TransactionRepository()

    def get_history(
        self, user_id: str, account_id: Optional[str] = None, limit: Optional[int] = None
    ) -> list[Transaction]:
        return self.repo.get_all(user_id, account_id, limit)

    def format_history(self, user_id: str, account_id: Optional[str] = None, limit: int = 20) -> str:
        transactions = self.get_history(user_id, account_id, limit)
        if not transactions:
            return "📭 No transactions yet."

        scope = f" for account #{account_id}" if account_id else ""
        lines = [f"🧾 Last {len(transactions)} transactions{scope}:\n"]
        for t in transactions:
            icon = _TYPE_ICONS.get(t.type, "•")
            line = f"  {icon} {t.timestamp:%Y-%m-%d} | {t.account_name} | {t.description}"
            if t.previous_balance is not None and t.new_balance is not None:
                line += f" ({format_currency(t.previous_balance)} → {format_currency(t.new_balance)})"
            elif t.new_balance is not None:
                line += f" ({format_currency(t.new_balance)})"
            lines.append(line)
        return "\n".join(lines)
