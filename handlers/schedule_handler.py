"""
handlers/schedule_handler.py
----------------------------
Handles due dates, monthly debt payments and income schedules.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.account_service import AccountService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.parsing import parse_amount, parse_id, reply_text, split_pipe_args
from utils.logger import get_logger

logger = get_logger(__name__)
account_service = AccountService()

# Accepted spellings for income frequencies
_FREQ_MAP = {
    "weekly": "weekly", "week": "weekly",
    "bi-weekly": "bi-weekly", "biweekly": "bi-weekly", "fortnightly": "bi-weekly",
    "monthly": "monthly", "month": "monthly",
}


@authorized_only
@rate_limited
async def set_due_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /set_due <id> <YYYY-MM-DD|none>.

    Examples:
        /set_due 4 2026-03-15
        /set_due 4 none
    """
    user = update.effective_user
    args = context.args or []

    if len(args) < 2:
        await update.message.reply_text(
            "⚠️ Usage: /set_due <debt account id> <YYYY-MM-DD|none>\nExample: /set_due 4 2026-03-15"
        )
        return

    try:
        account_id = parse_id(args[0])
    except ValueError:
        await update.message.reply_text("⚠️ The account id must be a whole number.")
        return

    due = None if args[1].lower() in ("none", "clear", "-") else args[1]
    result = account_service.set_due_date(str(user.id), account_id, due)
    await update.message.reply_text(reply_text(result))


@authorized_only
@rate_limited
async def set_payment_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /set_payment - schedule a monthly payment into a debt account.

    Format:
        /set_payment <debt id> | <amount> | <from account id> | <YYYY-MM-DD>

    Example:
        /set_payment 4 | 150 | 1 | 2026-03-01
    """
    user = update.effective_user
    parts = split_pipe_args(context.args)

    if len(parts) < 4:
        await update.message.reply_text(
            "🔵 *Monthly payment*\n\n"
            "*Format:*\n"
            "`/set_payment debt id | amount | from account id | YYYY-MM-DD`\n\n"
            "*Example:*\n"
            "`/set_payment 4 | 150 | 1 | 2026-03-01`",
            parse_mode="Markdown",
        )
        return

    try:
        account_id = parse_id(parts[0])
        amount = parse_amount(parts[1])
        linked_id = parse_id(parts[2])
    except ValueError:
        await update.message.reply_text("⚠️ Account ids and amount must be numbers.")
        return

    result = account_service.set_monthly_payment(str(user.id), account_id, amount, linked_id, parts[3])
    await update.message.reply_text(reply_text(result))


@authorized_only
@rate_limited
async def set_income_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /set_income - mark a savings account as an income source.

    Format:
        /set_income <savings id> | <earnings> | <weekly|bi-weekly|monthly> | <first payday>

    Example:
        /set_income 1 | 2100 | bi-weekly | 2026-01-09
    """
    user = update.effective_user
    parts = split_pipe_args(context.args)

    if len(parts) < 4:
        await update.message.reply_text(
            "🟣 *Income schedule*\n\n"
            "*Format:*\n"
            "`/set_income savings id | earnings | frequency | first payday`\n\n"
            "*Example:*\n"
            "`/set_income 1 | 2100 | bi-weekly | 2026-01-09`\n\n"
            "*Frequency:* weekly, bi-weekly, monthly",
            parse_mode="Markdown",
        )
        return

    frequency = _FREQ_MAP.get(parts[2].lower())
    if not frequency:
        await update.message.reply_text("⚠️ Frequency must be weekly, bi-weekly or monthly.")
        return

    try:
        account_id = parse_id(parts[0])
        earnings = parse_amount(parts[1])
    except ValueError:
        await update.message.reply_text("⚠️ Account id and earnings must be numbers.")
        return

    result = account_service.set_income_schedule(str(user.id), account_id, parts[3], earnings, frequency)
    await update.message.reply_text(reply_text(result))


@authorized_only
@rate_limited
async def clear_schedule_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /clear_schedule <id> - drop a monthly payment or income schedule."""
    user = update.effective_user

    if not context.args:
        await update.message.reply_text("⚠️ Usage: /clear_schedule <account id>")
        return

    try:
        account_id = parse_id(context.args[0])
    except ValueError:
        await update.message.reply_text("⚠️ The account id must be a whole number.")
        return

    result = account_service.clear_schedule(str(user.id), account_id)
    await update.message.reply_text(reply_text(result))
