"""
handlers/start_handler.py
--------------------------
Handles /start, /help, /myid and /setid.
Registers the user and shows available commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.user_service import UserService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.parsing import reply_text
from utils.logger import get_logger

logger = get_logger(__name__)
user_service = UserService()

HELP_TEXT = """
🤖 *Harmony Hub* - your personal finance tracker

*🏦 Accounts:*
/accounts - list accounts (`/accounts debt`, `/accounts savings car sort:balance`)
/add\\_account - add an account
/edit\\_account - rename or correct an account
/delete\\_account - delete an account
/deposit, /withdraw - move money on a savings account
/payoff - record a debt payment

*📅 Schedules:*
/set\\_due - set a debt due date
/set\\_payment - schedule a monthly debt payment
/set\\_income - set a recurring payday
/clear\\_schedule - remove a payment or payday

*📊 Overview:*
/summary - assets, liabilities, net worth
/calendar - this month's due dates and paydays
/upcoming - what's coming up
/day - everything on one day
/history - recent transactions
/export\\_csv, /export\\_excel - download your history

/myid - your Telegram ID
/setid - choose a custom ID
"""


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - register user and show welcome message."""
    user = update.effective_user
    user_service.register(str(user.id), user.first_name)

    await update.message.reply_text(
        f"Hi {user.first_name}! 👋\n"
        f"I keep track of your savings, debts, due dates and paydays.\n\n"
        f"Start with /add\\_account, or type /help to see every command.",
        parse_mode="Markdown",
    )


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


@authorized_only
async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show the Telegram ID for whitelisting."""
    user = update.effective_user
    profile = user_service.get_profile(str(user.id))
    custom = f"🏷️ Custom ID: `{profile.custom_user_id}`\n" if profile and profile.custom_user_id else ""
    await update.message.reply_text(
        f"🆔 Your Telegram ID: `{user.id}`\n"
        f"{custom}"
        f"Add it to `ALLOWED_USER_IDS` in `.env` to lock the bot down.",
        parse_mode="Markdown",
    )


@authorized_only
@rate_limited
async def setid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /setid <custom id> - claim a public handle.
    Usage: /setid jane-doe
    """
    user = update.effective_user
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /setid <custom id>\nExample: /setid jane-doe")
        return

    user_service.register(str(user.id), user.first_name)
    result = user_service.set_custom_id(str(user.id), context.args[0])
    await update.message.reply_text(reply_text(result))
