import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from handlers.account_handler import (
    _parse_list_args,
    accounts_command,
    add_account_command,
    edit_account_command,
    deposit_command,
    payoff_command,
    withdraw_command,
)
from handlers.calendar_handler import MAX_UPCOMING_DAYS, calendar_command, day_command, upcoming_command
from handlers.start_handler import myid_command
from handlers.schedule_handler import set_due_command, set_income_command, set_payment_command
from security.rate_limiter import limiter


@pytest.fixture(autouse=True)
def open_whitelist(monkeypatch):
    monkeypatch.setattr("security.auth.ALLOWED_USER_IDS", [])


def make_update(user_id=42):
    update = MagicMock()
    update.effective_user.id = user_id
    update.effective_user.first_name = "Sam"
    update.message.reply_text = AsyncMock()
    return update


def make_context(*args):
    context = MagicMock()
    context.args = list(args)
    return context


def run(handler, update, context):
    asyncio.run(handler(update, context))
    return update.message.reply_text.call_args.args[0]


def test_parse_list_args():
    assert _parse_list_args([]) == (None, None, "name")
    assert _parse_list_args(["debt", "visa", "sort:balance"]) == ("debt", "visa", "balance")
    assert _parse_list_args(["my", "debt"]) == (None, "my debt", "name")


def test_accounts_command_passes_filters():
    update = make_update()
    with patch("handlers.account_handler.account_service") as service:
        service.format_accounts.return_value = "list"
        assert run(accounts_command, update, make_context("savings", "sort:balance")) == "list"
        service.format_accounts.assert_called_once_with("42", "savings", None, "balance")


def test_add_account_registers_user_first():
    update = make_update()
    with patch("handlers.account_handler.account_service") as service, \
            patch("handlers.account_handler.user_service") as users:
        service.create_account.return_value = {"success": True, "message": "created"}

        reply = run(add_account_command, update, make_context("Visa", "Card", "|", "debt", "|", "$500"))

    assert reply == "created"
    users.register.assert_called_once_with("42", "Sam")
    service.create_account.assert_called_once_with(
        user_id="42", name="Visa Card", account_type="debt", balance=500.0, description="",
    )


def test_add_account_without_args_shows_format():
    update = make_update()
    with patch("handlers.account_handler.account_service") as service:
        reply = run(add_account_command, update, make_context())
    assert "Format" in reply
    service.create_account.assert_not_called()


def test_movement_parses_note():
    update = make_update()
    with patch("handlers.account_handler.account_service") as service:
        service.record_transaction.return_value = {"success": False, "error": "Insufficient funds"}
        reply = run(withdraw_command, update, make_context("#3", "150", "rent", "share"))

    service.record_transaction.assert_called_once_with("42", 3, "withdraw", 150.0, "rent share")
    assert reply == "⚠️ Insufficient funds"


def test_movement_needs_numbers():
    update = make_update()
    with patch("handlers.account_handler.account_service") as service:
        reply = run(payoff_command, update, make_context("three", "10"))
    assert "must be numbers" in reply
    service.record_transaction.assert_not_called()


def test_set_due_none_clears():
    update = make_update()
    with patch("handlers.schedule_handler.account_service") as service:
        service.set_due_date.return_value = {"success": True, "message": "ok"}
        run(set_due_command, update, make_context("4", "none"))
    service.set_due_date.assert_called_once_with("42", 4, None)


def test_set_payment():
    update = make_update()
    with patch("handlers.schedule_handler.account_service") as service:
        service.set_monthly_payment.return_value = {"success": True, "message": "ok"}
        run(set_payment_command, update, make_context("4", "|", "150", "|", "1", "|", "2024-03-01"))
    service.set_monthly_payment.assert_called_once_with("42", 4, 150.0, 1, "2024-03-01")


def test_set_income_maps_frequency_spelling():
    update = make_update()
    with patch("handlers.schedule_handler.account_service") as service:
        service.set_income_schedule.return_value = {"success": True, "message": "ok"}
        run(set_income_command, update, make_context("1", "|", "2100", "|", "Fortnightly", "|", "2024-01-05"))
    service.set_income_schedule.assert_called_once_with("42", 1, "2024-01-05", 2100.0, "bi-weekly")


def test_set_income_rejects_unknown_frequency():
    update = make_update()
    with patch("handlers.schedule_handler.account_service") as service:
        reply = run(set_income_command, update, make_context("1", "|", "2100", "|", "daily", "|", "2024-01-05"))
    assert "Frequency must be" in reply
    service.set_income_schedule.assert_not_called()


def test_calendar_command_wraps_grid_in_code_block():
    update = make_update()
    with patch("handlers.calendar_handler.calendar_service") as service:
        service.render_month.return_value = "grid"
        reply = run(calendar_command, update, make_context("2024", "3"))
    service.render_month.assert_called_once_with("42", 2024, 3)
    assert reply == "```\ngrid\n```"


def test_calendar_command_rejects_bad_month():
    update = make_update()
    with patch("handlers.calendar_handler.calendar_service") as service:
        reply = run(calendar_command, update, make_context("2024", "13"))
    assert reply.startswith("⚠️ Usage: /calendar")
    service.render_month.assert_not_called()


def test_day_command():
    update = make_update()
    with patch("handlers.calendar_handler.calendar_service") as service:
        service.describe_day.return_value = "day"
        run(day_command, update, make_context("2024-03-15"))
    service.describe_day.assert_called_once_with("42", date(2024, 3, 15))


def test_unlisted_user_is_turned_away(monkeypatch):
    monkeypatch.setattr("security.auth.ALLOWED_USER_IDS", [1])
    update = make_update(user_id=42)
    with patch("handlers.calendar_handler.calendar_service") as service:
        reply = run(day_command, update, make_context("2024-03-15"))
    assert reply == "⛔ Sorry, this bot is private."
    service.describe_day.assert_not_called()


def test_rate_limit_blocks_handler(monkeypatch):
    monkeypatch.setattr(limiter, "max_calls", 1)
    update = make_update()
    with patch("handlers.calendar_handler.calendar_service") as service:
        service.describe_day.return_value = "day"
        run(day_command, update, make_context("2024-03-15"))
        reply = run(day_command, update, make_context("2024-03-15"))
    assert reply.startswith("⚠️ Too many messages")
    assert service.describe_day.call_count == 1


def test_edit_account_keeps_blank_fields():
    update = make_update()
    with patch("handlers.account_handler.account_service") as service:
        service.update_account.return_value = {"success": True, "message": "ok"}
        run(edit_account_command, update, make_context("3", "|", "|", "420"))
    service.update_account.assert_called_once_with("42", 3, name=None, balance=420.0, description=None)


def test_myid_shows_custom_id():
    update = make_update()
    with patch("handlers.start_handler.user_service") as users:
        users.get_profile.return_value.custom_user_id = "sam-k"
        reply = run(myid_command, update, make_context())
    assert "`42`" in reply
    assert "`sam-k`" in reply


def test_negative_deposit_keeps_its_sign():
    update = make_update()
    with patch("handlers.account_handler.account_service") as service:
        service.record_transaction.return_value = {"success": False, "error": "Amount must be greater than zero"}
        reply = run(deposit_command, update, make_context("3", "-50"))
    service.record_transaction.assert_called_once_with("42", 3, "deposit", -50.0, "")
    assert reply == "⚠️ Amount must be greater than zero"


@pytest.mark.parametrize("year, month", [("9999", "12"), ("1", "1")])
def test_calendar_command_rejects_edge_years(year, month):
    update = make_update()
    with patch("handlers.calendar_handler.calendar_service") as service:
        reply = run(calendar_command, update, make_context(year, month))
    assert reply.startswith("⚠️ Usage: /calendar")
    service.render_month.assert_not_called()


def test_upcoming_days_are_capped():
    update = make_update()
    with patch("handlers.calendar_handler.calendar_service") as service:
        service.render_upcoming.return_value = "soon"
        run(upcoming_command, update, make_context("99999999"))
    service.render_upcoming.assert_called_once_with("42", MAX_UPCOMING_DAYS)
