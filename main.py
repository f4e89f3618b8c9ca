"""
main.py
-------
Entry point for the Harmony Hub Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
    - Schedule the due-date reminders and the weekly summary.
"""

from datetime import time as dt_time

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import REMINDER_DAYS_AHEAD, TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.start_handler import start_command, help_command, myid_command, setid_command
from handlers.account_handler import (
    accounts_command,
    add_account_command,
    delete_account_command,
    deposit_command,
    edit_account_command,
    withdraw_command,
    payoff_command,
)
from handlers.schedule_handler import (
    set_due_command,
    set_payment_command,
    set_income_command,
    clear_schedule_command,
)
from handlers.calendar_handler import calendar_command, upcoming_command, day_command
from handlers.summary_handler import summary_command
from handlers.export_handler import history_command, export_csv_command, export_excel_command
from repositories.account_repo import AccountRepository
from security.auth import is_allowed
from services.calendar_service import CalendarService
from services.summary_service import SummaryService
from utils.formatters import format_currency
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = [
    ("start", "🚀 Start the bot", start_command),
    ("help", "📖 Show help", help_command),
    ("accounts", "🏦 List accounts", accounts_command),
    ("add_account", "➕ Add an account", add_account_command),
    ("edit_account", "✏️ Rename or correct an account", edit_account_command),
    ("delete_account", "🗑️ Delete an account", delete_account_command),
    ("deposit", "💰 Deposit into savings", deposit_command),
    ("withdraw", "💸 Withdraw from savings", withdraw_command),
    ("payoff", "💳 Pay down a debt", payoff_command),
    ("set_due", "📅 Set a due date", set_due_command),
    ("set_payment", "🔵 Schedule a monthly payment", set_payment_command),
    ("set_income", "🟣 Set a recurring payday", set_income_command),
    ("clear_schedule", "🧹 Clear a schedule", clear_schedule_command),
    ("summary", "💼 Financial summary", summary_command),
    ("calendar", "🗓️ Month calendar", calendar_command),
    ("upcoming", "⏰ Upcoming dates", upcoming_command),
    ("day", "📆 One day's schedule", day_command),
    ("history", "🧾 Transaction history", history_command),
    ("export_csv", "📄 Export CSV", export_csv_command),
    ("export_excel", "📊 Export Excel", export_excel_command),
    ("myid", "🆔 Your Telegram ID", myid_command),
    ("setid", "🏷️ Choose a custom ID", setid_command),
]


def _recipients() -> list[str]:
    """Owners of accounts that are still allowed to use the bot."""
    return [uid for uid in AccountRepository().get_user_ids_with_accounts() if is_allowed(int(uid))]


async def send_reminders(context) -> None:
    """
    Scheduled job: remind users of due dates and debt payments coming up
    within REMINDER_DAYS_AHEAD days. Runs daily at 09:00.
    """
    calendar_service = CalendarService()

    for user_id in _recipients():
        try:
            events = calendar_service.get_due_reminders(user_id, REMINDER_DAYS_AHEAD)
            if not events:
                continue
            lines = ["⏰ *Coming up:*\n"]
            for e in events:
                lines.append(f"📌 {e.title}: {format_currency(e.amount)} on {e.date:%a %b %d}")
            await context.bot.send_message(chat_id=int(user_id), text="\n".join(lines), parse_mode="Markdown")
            logger.info(f"Sent {len(events)} reminders to user {user_id}")
        except Exception as e:
            logger.error(f"Failed to send reminders to {user_id}: {e}")


async def send_weekly_summary(context) -> None:
    """
    Scheduled job: send the financial summary to every user.
    Runs every Sunday at 20:00.
    """
    summary_service = SummaryService()

    for user_id in _recipients():
        try:
            summary = summary_service.format_summary(user_id)
            await context.bot.send_message(
                chat_id=int(user_id),
                text=f"📬 *Weekly report*\n\n{summary}",
                parse_mode="Markdown",
            )
            logger.info(f"Sent weekly summary to user {user_id}")
        except Exception as e:
            logger.error(f"Failed to send weekly summary to {user_id}: {e}")


async def set_bot_commands(application: Application) -> None:
    """Register the bot command menu in Telegram on startup."""
    await application.bot.set_my_commands([BotCommand(name, desc) for name, desc, _ in COMMANDS])
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Register command handlers ──────────────────────
    for name, _, handler in COMMANDS:
        app.add_handler(CommandHandler(name, handler))

    # ── 4. Schedule jobs ──────────────────────────────────
    job_queue = app.job_queue
    if job_queue:
        job_queue.run_daily(
            send_reminders,
            time=dt_time(hour=9, minute=0),
            name="daily_reminders",
        )
        job_queue.run_daily(
            send_weekly_summary,
            time=dt_time(hour=20, minute=0),
            days=(0,),  # Sunday
            name="weekly_summary",
        )
        logger.info("Scheduled daily reminders (09:00) + weekly summary (Sunday 20:00)")

    # ── 5. Start polling ──────────────────────────────────
    logger.info("Harmony Hub is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 6. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("Harmony Hub stopped.")


if __name__ == "__main__":
    main()
