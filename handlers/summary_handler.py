"""
handlers/summary_handler.py
---------------------------
Handles /summary.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.summary_service import SummaryService
from security.auth import authorized_only
from security.rate_limiter import rate_limited

summary_service = SummaryService()


@authorized_only
@rate_limited
async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /summary - assets, liabilities and net worth."""
    user = update.effective_user
    msg = summary_service.format_summary(str(user.id))
    await update.message.reply_text(msg, parse_mode="Markdown")
