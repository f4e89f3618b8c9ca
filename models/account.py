"""
models/account.py
-----------------
Domain models for tracked accounts and their optional schedules.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from utils.dates import parse_iso_date

ACCOUNT_TYPES = ("savings", "debt")
FREQUENCIES = ("weekly", "bi-weekly", "monthly")
NAME_MAX_LENGTH = 100


@dataclass
class MonthlyPayment:
    """
    A scheduled recurring payment towards a debt account.

    Attributes:
        amount: Payment amount (>= 0).
        linked_account_id: Account the payment is drawn from.
        next_payment_date: ISO date (YYYY-MM-DD) of the next payment.
    """
    amount: float
    linked_account_id: str
    next_payment_date: str

    def validate(self) -> None:
        if self.amount < 0:
            raise ValueError("Monthly payment amount cannot be negative")
        if not self.linked_account_id:
            raise ValueError("Monthly payment needs a linked account")
        parse_iso_date(self.next_payment_date)

    def to_document(self) -> dict:
        return {
            "amount": self.amount,
            "linkedAccountId": str(self.linked_account_id),
            "nextPaymentDate": self.next_payment_date,
        }

    @classmethod
    def from_document(cls, doc: Optional[dict]) -> Optional["MonthlyPayment"]:
        if not doc:
            return None
        return cls(
            amount=float(doc.get("amount", 0)),
            linked_account_id=str(doc.get("linkedAccountId", "")),
            next_payment_date=doc.get("nextPaymentDate") or "",
        )


@dataclass
class IncomeSchedule:
    """
    A recurring payday on a savings account that represents an income source.

    Attributes:
        pay_day_date: ISO date of the first payday.
        estimated_earnings: Expected earnings per payday (>= 0).
        frequency: 'weekly' | 'bi-weekly' | 'monthly'.
    """
    pay_day_date: str
    estimated_earnings: float
    frequency: str

    def validate(self) -> None:
        if self.estimated_earnings < 0:
            raise ValueError("Estimated earnings cannot be negative")
        if self.frequency not in FREQUENCIES:
            raise ValueError(f"Unknown frequency '{self.frequency}'")
        parse_iso_date(self.pay_day_date)

    def to_document(self) -> dict:
        return {
            "payDayDate": self.pay_day_date,
            "estimatedEarnings": self.estimated_earnings,
            "frequency": self.frequency,
        }

    @classmethod
    def from_document(cls, doc: Optional[dict]) -> Optional["IncomeSchedule"]:
        if not doc:
            return None
        return cls(
            pay_day_date=doc.get("payDayDate") or "",
            estimated_earnings=float(doc.get("estimatedEarnings", 0)),
            frequency=doc.get("frequency") or "",
        )


@dataclass
class Account:
    """
    A savings or debt ledger entry owned by a user.

    Debt balances are stored negative and savings balances non-negative;
    use `normalize_balance` before persisting.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Owner's user id.
        name: Display name.
        type: 'savings' | 'debt'.
        balance: Signed balance.
        due_date: Optional ISO date on which a debt payment is due.
        description: Free text.
        monthly_payment: Optional schedule, debt accounts only.
        income_schedule: Optional schedule, savings accounts only.
        created_at / updated_at: Row timestamps.
    """
    user_id: str
    name: str
    type: str  # 'savings' | 'debt'
    balance: float = 0.0
    due_date: Optional[str] = None
    description: str = ""
    monthly_payment: Optional[MonthlyPayment] = None
    income_schedule: Optional[IncomeSchedule] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_debt(self) -> bool:
        return self.type == "debt"

    def is_savings(self) -> bool:
        return self.type == "savings"

    @staticmethod
    def normalize_balance(account_type: str, balance: float) -> float:
        """Apply the sign convention: debt is negative, savings non-negative."""
        balance = abs(balance or 0.0)
        return -balance if account_type == "debt" else balance

    def validate(self) -> None:
        """
        Check field values and schedule consistency.

        A monthly payment is only valid on a debt account, an income
        schedule only on a savings account, and never both at once.

        Raises:
            ValueError: On the first invalid field.
        """
        if not self.name or not self.name.strip():
            raise ValueError("Account name is required")
        if len(self.name) > NAME_MAX_LENGTH:
            raise ValueError(f"Name cannot exceed {NAME_MAX_LENGTH} characters")
        if self.type not in ACCOUNT_TYPES:
            raise ValueError(f"Account type must be one of {', '.join(ACCOUNT_TYPES)}")
        if not self.user_id:
            raise ValueError("User ID is required")
        if self.due_date:
            parse_iso_date(self.due_date)
        if self.monthly_payment and self.income_schedule:
            raise ValueError("An account cannot have both a monthly payment and an income schedule")
        if self.monthly_payment:
            if not self.is_debt():
                raise ValueError("Monthly payments can only be set on debt accounts")
            self.monthly_payment.validate()
        if self.income_schedule:
            if not self.is_savings():
                raise ValueError("Income schedules can only be set on savings accounts")
            self.income_schedule.validate()

    def __str__(self) -> str:
        icon = "💳" if self.is_debt() else "🏦"
        return f"{icon} #{self.id} {self.name}: {self.balance:.2f} ({self.type})"
