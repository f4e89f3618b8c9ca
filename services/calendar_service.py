"""
services/calendar_service.py
----------------------------
Builds the payment calendar from a user's accounts.

The module-level functions are pure: they take a snapshot of accounts and a
reference day and return fresh CalendarEvent lists, so they can be called on
every request without any cached state.

    accounts ──► due-date / pay-date / income rules ──► combine_all_events
             ──► filter_events_for_month ──► build_month_grid / rendering

CalendarService wraps them with account loading and text rendering for the
bot handlers and the reminder job.
"""

import calendar
from datetime import date, timedelta
from typing import Callable, Iterable, Optional

from config import CALENDAR_HORIZON_MONTHS, CALENDAR_MAX_EVENTS_PER_DAY
from models.account import FREQUENCIES, Account
from models.calendar_event import (
    DUE_DATE,
    PAY_DATE,
    CalendarDay,
    CalendarEvent,
    DueDatePayload,
    IncomePayload,
    PaymentPayload,
)
from repositories.account_repo import AccountRepository
from utils.dates import (
    add_months,
    first_of_month,
    last_of_month,
    month_bounds,
    parse_iso_date,
    week_end,
    week_start,
)
from utils.formatters import format_currency
from utils.logger import get_logger

logger = get_logger(__name__)

_WEEKDAYS = ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa")


# ── Recurrence ────────────────────────────────────────────

def recurrence_horizon(today: date, months: int = CALENDAR_HORIZON_MONTHS) -> date:
    """
    Last day income schedules are expanded to: the end of the calendar month
    `months - 1` months after `today`'s month (end of March for any day in
    January with the default of 3).
    """
    return last_of_month(add_months(first_of_month(today), months - 1))


def _nth_occurrence(start: date, frequency: str, n: int) -> date:
    if frequency == "weekly":
        return start + timedelta(weeks=n)
    if frequency == "bi-weekly":
        return start + timedelta(weeks=2 * n)
    # monthly, anchored on the start so Jan 31 -> Feb 29 -> Mar 31 without drift
    return add_months(start, n)


def expand_income_schedule(
    start: date,
    frequency: str,
    today: Optional[date] = None,
    horizon: Optional[date] = None,
) -> list[date]:
    """
    List every payday from `start` up to and including the horizon.

    Args:
        start: First payday; may lie in the past.
        frequency: 'weekly' | 'bi-weekly' | 'monthly'.
        today: Reference day for the default horizon (defaults to today).
        horizon: Explicit last day, overrides `today`.

    Returns:
        Ascending dates; empty when `start` is already past the horizon.

    Raises:
        ValueError: For an unknown frequency.
    """
    if frequency not in FREQUENCIES:
        raise ValueError(f"Unknown income frequency '{frequency}'")
    if horizon is None:
        horizon = recurrence_horizon(today or date.today())

    occurrences = []
    n = 0
    current = start
    while current <= horizon:
        occurrences.append(current)
        n += 1
        current = _nth_occurrence(start, frequency, n)
    return occurrences


# ── Event rules ───────────────────────────────────────────

def _collect(
    accounts: Iterable[Account], rule: Callable[[Account], list[CalendarEvent]], kind: str
) -> list[CalendarEvent]:
    """
    Apply `rule` to each account. A bad record only loses its own events:
    malformed dates are skipped with a warning, anything else is logged.
    """
    events: list[CalendarEvent] = []
    for account in accounts:
        try:
            events.extend(rule(account))
        except ValueError as e:
            logger.warning(f"Skipping {kind} events for account #{account.id} ({account.name}): {e}")
        except Exception:
            logger.exception(f"Failed to build {kind} events for account #{account.id}")
    return events


def _due_date_rule(account: Account) -> list[CalendarEvent]:
    if not account.is_debt() or not account.due_date:
        return []
    day = parse_iso_date(account.due_date)
    return [CalendarEvent(
        id=f"due-{account.id}-{day.isoformat()}",
        title=f"{account.name} Due",
        date=day,
        category=DUE_DATE,
        payload=DueDatePayload(account=account, amount=abs(account.balance)),
    )]


def _payment_rule(account: Account) -> list[CalendarEvent]:
    payment = account.monthly_payment
    if not account.is_debt() or not payment or not payment.next_payment_date:
        return []
    day = parse_iso_date(payment.next_payment_date)
    return [CalendarEvent(
        id=f"pay-{account.id}-{day.isoformat()}",
        title=f"Pay {account.name}",
        date=day,
        category=PAY_DATE,
        payload=PaymentPayload(
            account=account,
            amount=payment.amount,
            linked_account_id=payment.linked_account_id,
        ),
    )]


def _income_rule(account: Account, today: date) -> list[CalendarEvent]:
    schedule = account.income_schedule
    if not account.is_savings() or not schedule or not schedule.pay_day_date:
        return []
    start = parse_iso_date(schedule.pay_day_date)
    return [
        CalendarEvent(
            id=f"income-{account.id}-{day.isoformat()}",
            title=f"{account.name} Payday",
            date=day,
            category=PAY_DATE,
            payload=IncomePayload(
                account=account,
                amount=account.balance,
                frequency=schedule.frequency,
                estimated_earnings=schedule.estimated_earnings,
            ),
        )
        for day in expand_income_schedule(start, schedule.frequency, today=today)
    ]


def get_due_date_events(accounts: Iterable[Account]) -> list[CalendarEvent]:
    """One 'due-date' event per debt account with a due date; amount is |balance|."""
    return _collect(accounts, _due_date_rule, "due-date")


def get_pay_date_events(accounts: Iterable[Account]) -> list[CalendarEvent]:
    """One 'pay-date' event per debt account with a scheduled monthly payment."""
    return _collect(accounts, _payment_rule, "payment")


def get_income_schedule_events(
    accounts: Iterable[Account], today: Optional[date] = None
) -> list[CalendarEvent]:
    """Recurring 'pay-date' events for savings accounts with an income schedule."""
    today = today or date.today()
    return _collect(accounts, lambda a: _income_rule(a, today), "income")


def combine_all_events(
    accounts: Iterable[Account], today: Optional[date] = None
) -> list[CalendarEvent]:
    """
    All events for the accounts, sorted ascending by date.
    Events on the same day keep rule order (due dates, payments, income).
    """
    accounts = list(accounts)
    events = (
        get_due_date_events(accounts)
        + get_pay_date_events(accounts)
        + get_income_schedule_events(accounts, today)
    )
    return sorted(events, key=lambda e: e.date)


# ── Month filtering & grid ────────────────────────────────

def filter_events_for_month(events: Iterable[CalendarEvent], month: date) -> list[CalendarEvent]:
    """Events whose date falls inside the month containing `month`; order is kept."""
    start, end = month_bounds(month)
    return [e for e in events if start <= e.date <= end]


def event_dates(events: Iterable[CalendarEvent]) -> set[date]:
    """The set of days carrying at least one event."""
    return {e.date for e in events}


def group_events_by_date(events: Iterable[CalendarEvent]) -> dict[date, list[CalendarEvent]]:
    grouped: dict[date, list[CalendarEvent]] = {}
    for event in events:
        grouped.setdefault(event.date, []).append(event)
    return grouped


def build_month_grid(
    month: date,
    events: Iterable[CalendarEvent],
    max_events_per_day: int = CALENDAR_MAX_EVENTS_PER_DAY,
    today: Optional[date] = None,
) -> list[list[CalendarDay]]:
    """
    Lay out the month as Sunday-first weeks, padded with the neighbouring
    months' days so every week is complete.

    Each day shows at most `max_events_per_day` events; the rest are counted
    in `hidden_count`.
    """
    today = today or date.today()
    start, end = month_bounds(month)
    by_date = group_events_by_date(events)

    weeks: list[list[CalendarDay]] = []
    day = week_start(start)
    last = week_end(end)
    while day <= last:
        if day.weekday() == 6 or not weeks:
            weeks.append([])
        day_events = by_date.get(day, [])
        weeks[-1].append(CalendarDay(
            date=day,
            in_month=start <= day <= end,
            is_today=day == today,
            events=day_events[:max_events_per_day],
            hidden_count=max(0, len(day_events) - max_events_per_day),
        ))
        day += timedelta(days=1)
    return weeks


class CalendarService:
    """
    Loads a user's accounts and turns them into calendar views.

    Responsibilities:
        - Month / upcoming / single-day event queries.
        - Text rendering of the month grid for the bot.
        - Reminder selection for the scheduler.
    """

    def __init__(self):
        self.account_repo = AccountRepository()

    def get_all_events(self, user_id: str, today: Optional[date] = None) -> list[CalendarEvent]:
        """The full, un-windowed event list for a user."""
        return combine_all_events(self.account_repo.get_all(user_id), today)

    def get_month_events(
        self, user_id: str, year: int, month: int, today: Optional[date] = None
    ) -> list[CalendarEvent]:
        return filter_events_for_month(self.get_all_events(user_id, today), date(year, month, 1))

    def get_upcoming(
        self, user_id: str, days: int = 30, today: Optional[date] = None
    ) -> list[CalendarEvent]:
        """Events from today through `days` days ahead."""
        today = today or date.today()
        until = today + timedelta(days=days)
        return [e for e in self.get_all_events(user_id, today) if today <= e.date <= until]

    def get_due_reminders(
        self, user_id: str, days_ahead: int, today: Optional[date] = None
    ) -> list[CalendarEvent]:
        """Due dates and debt payments within `days_ahead` days; paydays are not reminded."""
        return [e for e in self.get_upcoming(user_id, days_ahead, today) if not e.is_income()]

    # ── Rendering ─────────────────────────────────────────

    def render_month(
        self,
        user_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        today: Optional[date] = None,
    ) -> str:
        """Monospace month grid followed by the month's events, grouped by day."""
        today = today or date.today()
        first = date(year or today.year, month or today.month, 1)

        accounts = self.account_repo.get_all(user_id)
        events = filter_events_for_month(combine_all_events(accounts, today), first)
        grid = build_month_grid(first, events, today=today)
        names = {str(a.id): a.name for a in accounts}

        lines = [f"{calendar.month_name[first.month]} {first.year}".center(27), " ".join(f"{d:>3}" for d in _WEEKDAYS)]
        for week in grid:
            cells = []
            for cell in week:
                if not cell.in_month:
                    cells.append("   ")
                    continue
                mark = "*" if cell.events else ("<" if cell.is_today else " ")
                cells.append(f"{cell.date.day:>2}{mark}")
            lines.append(" ".join(cells))

        if not events:
            lines.append("\nNo due dates or paydays this month.")
        else:
            lines.append("")
            for week in grid:
                for cell in week:
                    if not cell.in_month or not cell.events:
                        continue
                    lines.append(cell.date.strftime("%a %d"))
                    lines.extend(f"  {self.format_event(e, names)}" for e in cell.events)
                    if cell.hidden_count:
                        lines.append(f"  + {cell.hidden_count} more")
        return "\n".join(lines)

    def describe_day(self, user_id: str, day: date, today: Optional[date] = None) -> str:
        """Everything scheduled on one day, with payment sources resolved by name."""
        accounts = self.account_repo.get_all(user_id)
        names = {str(a.id): a.name for a in accounts}
        events = group_events_by_date(combine_all_events(accounts, today)).get(day, [])
        if not events:
            return f"📭 Nothing scheduled on {day.isoformat()}."

        lines = [f"📅 {day.strftime('%A, %B %d %Y')}:\n"]
        lines.extend(f"  {self.format_event(e, names)}" for e in events)
        return "\n".join(lines)

    def render_upcoming(self, user_id: str, days: int = 30, today: Optional[date] = None) -> str:
        accounts = self.account_repo.get_all(user_id)
        names = {str(a.id): a.name for a in accounts}
        today = today or date.today()
        until = today + timedelta(days=days)
        events = [e for e in combine_all_events(accounts, today) if today <= e.date <= until]
        if not events:
            return f"📭 Nothing scheduled in the next {days} days."

        lines = [f"🗓️ Next {days} days:\n"]
        lines.extend(f"  {e.date.isoformat()} {self.format_event(e, names)}" for e in events)
        return "\n".join(lines)

    @staticmethod
    def format_event(event: CalendarEvent, account_names: Optional[dict] = None) -> str:
        """One-line description: icon, title, amount and payment source or frequency."""
        account_names = account_names or {}
        if event.category == DUE_DATE:
            return f"🔴 {event.title}: {format_currency(event.amount)}"
        if isinstance(event.payload, PaymentPayload):
            source = account_names.get(str(event.payload.linked_account_id))
            suffix = f" from {source}" if source else ""
            return f"🔵 {event.title}: {format_currency(event.amount)}{suffix}"
        return f"🟣 {event.title}: {format_currency(event.amount)} ({event.frequency})"
