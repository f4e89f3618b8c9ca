"""
models/summary.py
-----------------
Aggregate view over a user's accounts.
"""

from dataclasses import dataclass


@dataclass
class FinancialSummary:
    """
    Totals shown on the dashboard.

    Attributes:
        total_assets: Sum of |balance| over savings accounts.
        total_liabilities: Sum of |balance| over debt accounts.
        net_worth: Assets minus liabilities.
        savings_accounts: Number of savings accounts.
        debt_accounts: Number of debt accounts.
    """
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    net_worth: float = 0.0
    savings_accounts: int = 0
    debt_accounts: int = 0
