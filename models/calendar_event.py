"""
models/calendar_event.py
------------------------
Calendar events derived from accounts. Events are never stored; they are
rebuilt from the current accounts every time a calendar is shown.

The payload is a tagged union keyed by the event category:

    due-date  -> DueDatePayload
    pay-date  -> PaymentPayload  (one-off debt payment, no frequency)
              -> IncomePayload   (recurring payday, carries a frequency)
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from models.account import Account

DUE_DATE = "due-date"
PAY_DATE = "pay-date"


@dataclass(frozen=True)
class DueDatePayload:
    account: Account
    amount: float  # amount due, always positive


@dataclass(frozen=True)
class PaymentPayload:
    account: Account
    amount: float
    linked_account_id: str


@dataclass(frozen=True)
class IncomePayload:
    account: Account
    amount: float
    frequency: str
    estimated_earnings: float


EventPayload = Union[DueDatePayload, PaymentPayload, IncomePayload]


@dataclass(frozen=True)
class CalendarEvent:
    """
    One marker on the calendar.

    Attributes:
        id: Deterministic key built from account id, kind and date.
        title: Label such as "Card Due", "Pay Card" or "Salary Payday".
        date: The calendar day of the event.
        category: 'due-date' | 'pay-date'.
        payload: Category-specific data, see module docstring.
    """
    id: str
    title: str
    date: date
    category: str
    payload: EventPayload

    @property
    def amount(self) -> float:
        return self.payload.amount

    @property
    def account(self) -> Account:
        return self.payload.account

    @property
    def frequency(self) -> Optional[str]:
        """Income frequency, or None for due dates and one-off payments."""
        if isinstance(self.payload, IncomePayload):
            return self.payload.frequency
        return None

    def is_income(self) -> bool:
        return isinstance(self.payload, IncomePayload)

    def __str__(self) -> str:
        return f"{self.date.isoformat()} | {self.title} | {self.amount:.2f}"


@dataclass
class CalendarDay:
    """A single cell of a month grid."""
    date: date
    in_month: bool
    is_today: bool
    events: list[CalendarEvent]
    hidden_count: int = 0
