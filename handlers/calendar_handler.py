"""
handlers/calendar_handler.py
----------------------------
Handles the payment calendar views.
Delegates to CalendarService.
"""

from datetime import MAXYEAR, MINYEAR, date

from telegram import Update
from telegram.ext import ContextTypes

from services.calendar_service import CalendarService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.dates import parse_iso_date
from utils.logger import get_logger

logger = get_logger(__name__)
calendar_service = CalendarService()

# Month grids pad to whole weeks, which must stay inside date.min..date.max
_YEARS = range(MINYEAR + 1, MAXYEAR)
MAX_UPCOMING_DAYS = 366


@authorized_only
@rate_limited
async def calendar_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /calendar - month grid with due dates and paydays.

    Usage:
        /calendar            → current month
        /calendar 2026 3     → March 2026
    """
    user = update.effective_user
    year, month = None, None

    if context.args:
        try:
            year = int(context.args[0])
            month = int(context.args[1]) if len(context.args) >= 2 else date.today().month
            date(year, month, 1)
            if year not in _YEARS:
                raise ValueError(f"Year out of range: {year}")
        except ValueError:
            await update.message.reply_text("⚠️ Usage: /calendar [year month]\nExample: /calendar 2026 3")
            return

    text = calendar_service.render_month(str(user.id), year, month)
    await update.message.reply_text(f"```\n{text}\n```", parse_mode="Markdown")


@authorized_only
@rate_limited
async def upcoming_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /upcoming [days] - everything scheduled from today on (default 30, at most a year)."""
    user = update.effective_user
    days = 30

    if context.args:
        try:
            days = min(max(1, int(context.args[0])), MAX_UPCOMING_DAYS)
        except ValueError:
            await update.message.reply_text("⚠️ Usage: /upcoming [days]\nExample: /upcoming 14")
            return

    await update.message.reply_text(calendar_service.render_upcoming(str(user.id), days))


@authorized_only
@rate_limited
async def day_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /day <YYYY-MM-DD> - the payments and paydays on one day."""
    user = update.effective_user

    try:
        day = parse_iso_date(context.args[0]) if context.args else date.today()
    except ValueError:
        await update.message.reply_text("⚠️ Dates must look like YYYY-MM-DD.")
        return

    await update.message.reply_text(calendar_service.describe_day(str(user.id), day))
