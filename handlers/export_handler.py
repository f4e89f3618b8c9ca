"""
handlers/export_handler.py
---------------------------
Handles the transaction history and its exports (CSV, Excel).
Delegates to TransactionService and ExportService.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from services.export_service import ExportService
from services.transaction_service import TransactionService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.parsing import parse_id
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()
transaction_service = TransactionService()


def _account_filter(args) -> str | None:
    """Optional account id argument, as stored in the transactions table."""
    if not args:
        return None
    return str(parse_id(args[0]))


@authorized_only
@rate_limited
async def history_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /history [account id] - latest transactions, newest first.
    """
    user = update.effective_user
    try:
        account_id = _account_filter(context.args)
    except ValueError:
        await update.message.reply_text("⚠️ Usage: /history [account id]")
        return

    await update.message.reply_text(transaction_service.format_history(str(user.id), account_id))


@authorized_only
@rate_limited
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_csv [account id] - send the history as CSV.
    """
    user = update.effective_user
    try:
        account_id = _account_filter(context.args)
    except ValueError:
        await update.message.reply_text("⚠️ Usage: /export_csv [account id]")
        return

    await update.message.reply_text("📄 Preparing your CSV...")

    try:
        buffer = export_service.export_csv(str(user.id), account_id)
        await update.message.reply_document(
            document=buffer,
            filename=f"transactions_{date.today():%Y_%m_%d}.csv",
            caption="🧾 Transaction history - CSV",
        )
    except Exception as e:
        logger.error(f"CSV export failed: {e}")
        await update.message.reply_text("❌ The export failed. Please try again.")


@authorized_only
@rate_limited
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_excel [account id] - send the history as Excel.
    """
    user = update.effective_user
    try:
        account_id = _account_filter(context.args)
    except ValueError:
        await update.message.reply_text("⚠️ Usage: /export_excel [account id]")
        return

    await update.message.reply_text("📊 Preparing your Excel file...")

    try:
        buffer = export_service.export_excel(str(user.id), account_id)
        await update.message.reply_document(
            document=buffer,
            filename=f"transactions_{date.today():%Y_%m_%d}.xlsx",
            caption="🧾 Transaction history - Excel",
        )
    except Exception as e:
        logger.error(f"Excel export failed: {e}")
        await update.message.reply_text("❌ The export failed. Please try again.")
