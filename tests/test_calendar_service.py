from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from models.account import IncomeSchedule, MonthlyPayment
from models.calendar_event import DUE_DATE, PAY_DATE
from services.calendar_service import (
    CalendarService,
    build_month_grid,
    combine_all_events,
    event_dates,
    expand_income_schedule,
    filter_events_for_month,
    get_due_date_events,
    get_income_schedule_events,
    get_pay_date_events,
    group_events_by_date,
    recurrence_horizon,
)

TODAY = date(2024, 1, 10)


class TestRecurrence:
    def test_horizon_is_end_of_third_month(self):
        assert recurrence_horizon(date(2024, 1, 10)) == date(2024, 3, 31)
        assert recurrence_horizon(date(2024, 1, 31)) == date(2024, 3, 31)

    def test_horizon_crosses_year_end(self):
        assert recurrence_horizon(date(2024, 12, 5)) == date(2025, 2, 28)

    def test_monthly_example(self):
        dates = expand_income_schedule(date(2024, 1, 1), "monthly", today=TODAY)
        assert dates == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]

    def test_weekly_steps_seven_days(self):
        dates = expand_income_schedule(date(2024, 1, 5), "weekly", today=TODAY)
        assert len(dates) == 13
        assert dates[-1] == date(2024, 3, 29)
        assert all(b - a == timedelta(days=7) for a, b in zip(dates, dates[1:]))

    def test_bi_weekly_steps_fourteen_days(self):
        dates = expand_income_schedule(date(2024, 1, 5), "bi-weekly", today=TODAY)
        assert len(dates) == 7
        assert all(b - a == timedelta(days=14) for a, b in zip(dates, dates[1:]))

    def test_monthly_clamps_to_month_end_without_drift(self):
        dates = expand_income_schedule(date(2024, 1, 31), "monthly", today=TODAY)
        assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]

    def test_horizon_day_itself_is_included(self):
        dates = expand_income_schedule(date(2024, 3, 31), "monthly", today=TODAY)
        assert dates == [date(2024, 3, 31)]

    def test_start_beyond_horizon_is_empty(self):
        assert expand_income_schedule(date(2024, 6, 1), "weekly", today=TODAY) == []

    def test_explicit_horizon(self):
        dates = expand_income_schedule(date(2024, 1, 1), "weekly", horizon=date(2024, 1, 15))
        assert dates == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15)]

    def test_unknown_frequency_raises(self):
        with pytest.raises(ValueError):
            expand_income_schedule(date(2024, 1, 1), "yearly", today=TODAY)


class TestEventRules:
    def test_due_date_example(self, debt_account_maker):
        events = get_due_date_events([debt_account_maker(name="Card", balance=-500.0, due_date="2024-03-15")])

        assert len(events) == 1
        event = events[0]
        assert event.title == "Card Due"
        assert event.date == date(2024, 3, 15)
        assert event.amount == 500.0
        assert event.category == DUE_DATE
        assert event.id == "due-1-2024-03-15"

    def test_due_date_ignores_savings_and_missing_dates(self, debt_account_maker, savings_account_maker):
        savings = savings_account_maker()
        savings.due_date = "2024-03-15"
        assert get_due_date_events([savings, debt_account_maker(due_date=None)]) == []

    def test_payment_event(self, debt_account_maker):
        payment = MonthlyPayment(amount=250.0, linked_account_id="10", next_payment_date="2024-02-20")
        events = get_pay_date_events([debt_account_maker(id=2, name="Car Loan", payment=payment)])

        assert len(events) == 1
        event = events[0]
        assert event.category == PAY_DATE
        assert event.date == date(2024, 2, 20)
        assert event.amount == 250.0
        assert event.frequency is None
        assert event.payload.linked_account_id == "10"
        assert event.title == "Pay Car Loan"

    def test_income_example(self, savings_account_maker):
        schedule = IncomeSchedule(pay_day_date="2024-01-01", estimated_earnings=1800.0, frequency="monthly")
        events = get_income_schedule_events([savings_account_maker(balance=2000.0, schedule=schedule)], TODAY)

        assert [e.date for e in events] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
        assert all(e.frequency == "monthly" for e in events)
        assert all(e.amount == 2000.0 for e in events)
        assert all(e.payload.estimated_earnings == 1800.0 for e in events)
        assert all(e.category == PAY_DATE and e.is_income() for e in events)

    def test_income_only_on_savings(self, debt_account_maker):
        debt = debt_account_maker()
        debt.income_schedule = IncomeSchedule(pay_day_date="2024-01-01", estimated_earnings=1.0, frequency="weekly")
        assert get_income_schedule_events([debt], TODAY) == []

    def test_malformed_dates_skip_only_that_account(self, debt_account_maker):
        broken = debt_account_maker(id=1, due_date="15/03/2024")
        good = debt_account_maker(id=2, name="Store Card", due_date="2024-03-20")
        bad_payment = debt_account_maker(
            id=3, payment=MonthlyPayment(amount=10.0, linked_account_id="10", next_payment_date="soon"),
        )

        assert [e.id for e in get_due_date_events([broken, good])] == ["due-2-2024-03-20"]
        assert get_pay_date_events([bad_payment]) == []

    def test_trailing_junk_on_stored_date_is_malformed(self, debt_account_maker):
        assert get_due_date_events([debt_account_maker(due_date="2024-03-15garbage")]) == []

    def test_unknown_frequency_yields_no_events(self, savings_account_maker):
        schedule = IncomeSchedule(pay_day_date="2024-01-01", estimated_earnings=1.0, frequency="yearly")
        assert get_income_schedule_events([savings_account_maker(schedule=schedule)], TODAY) == []


class TestCombineAndFilter:
    def test_combined_events_are_sorted(self, mixed_accounts):
        events = combine_all_events(mixed_accounts, TODAY)
        dates = [e.date for e in events]
        assert dates == sorted(dates)
        assert len(events) == 1 + 1 + 7

    def test_derivation_is_idempotent(self, mixed_accounts):
        first = combine_all_events(mixed_accounts, TODAY)
        second = combine_all_events(mixed_accounts, TODAY)
        assert first == second
        assert [e.id for e in first] == [e.id for e in second]

    def test_same_day_keeps_rule_order(self, debt_account_maker):
        card = debt_account_maker(
            id=1, due_date="2024-02-20",
            payment=MonthlyPayment(amount=50.0, linked_account_id="10", next_payment_date="2024-02-20"),
        )
        events = combine_all_events([card], TODAY)
        assert [e.category for e in events] == [DUE_DATE, PAY_DATE]

    def test_filter_for_month(self, mixed_accounts):
        events = combine_all_events(mixed_accounts, TODAY)
        march = filter_events_for_month(events, date(2024, 3, 1))

        assert march == [e for e in events if (e.date.year, e.date.month) == (2024, 3)]
        assert any(e.title == "Card Due" for e in march)

    def test_filter_includes_last_day_of_month(self, debt_account_maker):
        events = combine_all_events([debt_account_maker(due_date="2024-02-29")], TODAY)
        assert len(filter_events_for_month(events, date(2024, 2, 10))) == 1

    def test_filter_empty_month(self, mixed_accounts):
        events = combine_all_events(mixed_accounts, TODAY)
        assert filter_events_for_month(events, date(2024, 8, 1)) == []

    def test_event_dates_spans_months(self, mixed_accounts):
        dates = event_dates(combine_all_events(mixed_accounts, TODAY))
        assert date(2024, 3, 15) in dates
        assert date(2024, 2, 20) in dates
        assert date(2024, 1, 5) in dates


class TestMonthGrid:
    def test_grid_shape(self):
        weeks = build_month_grid(date(2024, 3, 1), [], today=date(2024, 3, 15))

        assert len(weeks) == 6
        assert all(len(week) == 7 for week in weeks)
        assert weeks[0][0].date == date(2024, 2, 25)
        assert not weeks[0][0].in_month
        assert weeks[-1][-1].date == date(2024, 4, 6)
        assert [d.date for w in weeks for d in w if d.is_today] == [date(2024, 3, 15)]

    def test_overflow_is_counted(self, debt_account_maker):
        card = debt_account_maker(
            id=1, due_date="2024-03-15",
            payment=MonthlyPayment(amount=50.0, linked_account_id="10", next_payment_date="2024-03-15"),
        )
        events = combine_all_events([card], TODAY)
        weeks = build_month_grid(date(2024, 3, 1), events, max_events_per_day=1, today=TODAY)

        cell = next(d for w in weeks for d in w if d.date == date(2024, 3, 15))
        assert len(cell.events) == 1
        assert cell.hidden_count == 1

    def test_group_by_date(self, mixed_accounts):
        grouped = group_events_by_date(combine_all_events(mixed_accounts, TODAY))
        assert [e.title for e in grouped[date(2024, 3, 15)]] == ["Card Due", "Salary Payday"]


class TestCalendarService:
    @pytest.fixture
    def service(self, mixed_accounts):
        service = CalendarService()
        service.account_repo = MagicMock()
        service.account_repo.get_all.return_value = mixed_accounts
        return service

    def test_month_events(self, service):
        events = service.get_month_events("42", 2024, 3, today=TODAY)
        assert all(e.date.month == 3 for e in events)
        service.account_repo.get_all.assert_called_with("42")

    def test_render_month(self, service):
        text = service.render_month("42", 2024, 3, today=TODAY)
        assert "March 2024" in text
        assert "Card Due" in text
        assert "$500.00" in text

    def test_render_empty_month(self, service):
        text = service.render_month("42", 2024, 9, today=TODAY)
        assert "No due dates or paydays this month." in text

    def test_describe_day_resolves_payment_source(self, service):
        text = service.describe_day("42", date(2024, 2, 20), today=TODAY)
        assert "Pay Car Loan" in text
        assert "from Salary" in text

    def test_describe_empty_day(self, service):
        assert "Nothing scheduled" in service.describe_day("42", date(2024, 2, 21), today=TODAY)

    def test_reminders_skip_paydays(self, service):
        events = service.get_due_reminders("42", 6, today=date(2024, 2, 14))
        assert [e.title for e in events] == ["Pay Car Loan"]

    def test_upcoming_window(self, service):
        assert service.get_upcoming("42", days=7, today=date(2024, 1, 10)) == []
        events = service.get_upcoming("42", days=10, today=date(2024, 1, 10))
        assert [e.date for e in events] == [date(2024, 1, 19)]
        assert events[0].is_income()
