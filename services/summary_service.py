"""
services/summary_service.py
---------------------------
Dashboard totals: assets, liabilities and net worth.
"""

from typing import Iterable

from models.account import Account
from models.summary import FinancialSummary
from repositories.account_repo import AccountRepository
from utils.formatters import format_currency


def summarize(accounts: Iterable[Account]) -> FinancialSummary:
    """Aggregate balances; both sides are summed as absolute values."""
    summary = FinancialSummary()
    for account in accounts:
        if account.is_savings():
            summary.total_assets += abs(account.balance)
            summary.savings_accounts += 1
        elif account.is_debt():
            summary.total_liabilities += abs(account.balance)
            summary.debt_accounts += 1
    summary.net_worth = summary.total_assets - summary.total_liabilities
    return summary


class SummaryService:
    """Builds the financial overview for a user."""

    def __init__(self):
        self.repo = AccountRepository()

    def get_summary(self, user_id: str) -> FinancialSummary:
        return summarize(self.repo.get_all(user_id))

    def format_summary(self, user_id: str) -> str:
        s = self.get_summary(user_id)
        if not s.savings_accounts and not s.debt_accounts:
            return "📭 No accounts yet. Add one with /add_account."

        icon = "📈" if s.net_worth >= 0 else "📉"
        return "\n".join([
            "💼 *Financial summary*\n",
            f"🏦 Assets: {format_currency(s.total_assets)} ({s.savings_accounts} savings)",
            f"💳 Liabilities: {format_currency(s.total_liabilities)} ({s.debt_accounts} debt)",
            f"\n{icon} *Net worth: {format_currency(s.net_worth)}*",
        ])
