"""
models/transaction.py
---------------------
Domain model for the account activity log.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

TRANSACTION_TYPES = ("create", "update", "delete")


@dataclass
class Transaction:
    """
    A single change to an account, recorded for the history view.

    Attributes:
        id: Database primary key (None for new records).
        account_id: The account that changed.
        account_name: Account name at the time of the change.
        user_id: Owner's user id.
        type: 'create' | 'update' | 'delete'.
        previous_balance: Balance before the change (None on create).
        new_balance: Balance after the change (None on delete).
        description: Human-readable note.
        timestamp: When the change happened.
    """
    account_id: str
    account_name: str
    user_id: str
    type: str  # 'create' | 'update' | 'delete'
    description: str
    previous_balance: Optional[float] = None
    new_balance: Optional[float] = None
    timestamp: datetime = field(default_factory=datetime.now)
    id: Optional[int] = None

    def __post_init__(self):
        if self.type not in TRANSACTION_TYPES:
            raise ValueError(f"Transaction type must be one of {', '.join(TRANSACTION_TYPES)}")

    @property
    def change(self) -> float:
        """Balance delta of this change (0 when either side is unknown)."""
        if self.previous_balance is None or self.new_balance is None:
            return 0.0
        return self.new_balance - self.previous_balance

    def __str__(self) -> str:
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M")
        return f"{stamp} | {self.account_name} | {self.type} | {self.description}"
