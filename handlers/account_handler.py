"""
handlers/account_handler.py
---------------------------
Handles account listing, creation, deletion and money movements.
Delegates all logic to AccountService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from models.account import ACCOUNT_TYPES
from services.account_service import SORT_KEYS, AccountService
from services.user_service import UserService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.parsing import parse_amount, parse_id, reply_text, split_pipe_args
from utils.logger import get_logger

logger = get_logger(__name__)
account_service = AccountService()
user_service = UserService()


def _parse_list_args(args: list[str]) -> tuple:
    """
    Split /accounts arguments into (type, search, sort_by).
    Example: ["debt", "visa", "sort:balance"] -> ("debt", "visa", "balance")
    """
    account_type, sort_by, words = None, "name", []
    for arg in args or []:
        lowered = arg.lower()
        if lowered in ACCOUNT_TYPES and account_type is None and not words:
            account_type = lowered
        elif lowered.startswith("sort:") and lowered[5:] in SORT_KEYS:
            sort_by = lowered[5:]
        else:
            words.append(arg)
    return account_type, " ".join(words) or None, sort_by


@authorized_only
@rate_limited
async def accounts_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /accounts - list accounts.

    Usage:
        /accounts
        /accounts savings
        /accounts debt visa sort:balance
    """
    user = update.effective_user
    account_type, search, sort_by = _parse_list_args(context.args)
    msg = account_service.format_accounts(str(user.id), account_type, search, sort_by)
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def add_account_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add_account - create a savings or debt account.

    Format:
        /add_account <name> | <savings|debt> | <balance> [| description]

    Examples:
        /add_account Emergency Fund | savings | 2500
        /add_account Visa Card | debt | 500 | 19.9% APR
    """
    user = update.effective_user
    parts = split_pipe_args(context.args)

    if len(parts) < 2:
        await update.message.reply_text(
            "🏦 *Add an account*\n\n"
            "*Format:*\n"
            "`/add_account name | savings or debt | balance | description`\n\n"
            "*Examples:*\n"
            "• `/add_account Emergency Fund | savings | 2500`\n"
            "• `/add_account Visa Card | debt | 500 | 19.9% APR`\n\n"
            "Debt balances are entered as the amount owed.",
            parse_mode="Markdown",
        )
        return

    try:
        balance = parse_amount(parts[2]) if len(parts) >= 3 and parts[2] else 0.0
    except ValueError:
        await update.message.reply_text("⚠️ The balance must be a number.")
        return

    user_service.register(str(user.id), user.first_name)
    result = account_service.create_account(
        user_id=str(user.id),
        name=parts[0],
        account_type=parts[1],
        balance=balance,
        description=parts[3] if len(parts) >= 4 else "",
    )
    await update.message.reply_text(reply_text(result))


@authorized_only
@rate_limited
async def delete_account_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /delete_account <id>.
    Usage: /delete_account 3
    """
    user = update.effective_user

    if not context.args:
        await update.message.reply_text("⚠️ Usage: /delete_account <account id>\nExample: /delete_account 3")
        return

    try:
        account_id = parse_id(context.args[0])
    except ValueError:
        await update.message.reply_text("⚠️ The account id must be a whole number.")
        return

    result = account_service.delete_account(str(user.id), account_id)
    await update.message.reply_text(reply_text(result))


async def _movement(update: Update, context: ContextTypes.DEFAULT_TYPE, action: str) -> None:
    """Shared body of /deposit, /withdraw and /payoff: <id> <amount> [note]."""
    user = update.effective_user
    args = context.args or []

    if len(args) < 2:
        await update.message.reply_text(
            f"⚠️ Usage: /{action} <account id> <amount> [note]\nExample: /{action} 3 150 groceries"
        )
        return

    try:
        account_id = parse_id(args[0])
        amount = parse_amount(args[1])
    except ValueError:
        await update.message.reply_text("⚠️ Account id and amount must be numbers.")
        return

    result = account_service.record_transaction(
        str(user.id), account_id, action, amount, " ".join(args[2:])
    )
    await update.message.reply_text(reply_text(result))


@authorized_only
@rate_limited
async def deposit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /deposit <id> <amount> [note] on a savings account."""
    await _movement(update, context, "deposit")


@authorized_only
@rate_limited
async def withdraw_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /withdraw <id> <amount> [note] on a savings account."""
    await _movement(update, context, "withdraw")


@authorized_only
@rate_limited
async def payoff_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /payoff <id> <amount> [note] on a debt account."""
    await _movement(update, context, "payoff")


@authorized_only
@rate_limited
async def edit_account_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /edit_account - rename an account or correct its balance.

    Format:
        /edit_account <id> | <name> [| balance] [| description]

    Leave a field empty to keep it:
        /edit_account 3 | | 420
    """
    user = update.effective_user
    parts = split_pipe_args(context.args)

    if len(parts) < 2:
        await update.message.reply_text(
            "⚠️ Usage: /edit_account <id> | <name> [| balance] [| description]\n"
            "Example: /edit_account 3 | Visa Gold | 420"
        )
        return

    try:
        account_id = parse_id(parts[0])
        balance = parse_amount(parts[2]) if len(parts) >= 3 and parts[2] else None
    except ValueError:
        await update.message.reply_text("⚠️ Account id and balance must be numbers.")
        return

    result = account_service.update_account(
        str(user.id),
        account_id,
        name=parts[1] or None,
        balance=balance,
        description=parts[3] if len(parts) >= 4 else None,
    )
    await update.message.reply_text(reply_text(result))
