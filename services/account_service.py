"""
services/account_service.py
---------------------------
Business logic for savings and debt accounts.
Every balance change is written to the transaction log.
"""

from typing import Optional

from models.account import ACCOUNT_TYPES, Account, IncomeSchedule, MonthlyPayment
from models.transaction import Transaction
from repositories.account_repo import AccountRepository
from repositories.transaction_repo import TransactionRepository
from utils.dates import parse_iso_date
from utils.formatters import format_currency
from utils.logger import get_logger

logger = get_logger(__name__)

SORT_KEYS = ("name", "balance")
ACTIONS = {
    "savings": ("deposit", "withdraw"),
    "debt": ("payoff",),
}


def _fail(error: str) -> dict:
    return {"success": False, "error": error}


def _not_found(account_id) -> dict:
    return _fail(f"Account #{account_id} not found")


class AccountService:
    """
    Handles all business logic for accounts.

    Responsibilities:
        - Create, edit and delete accounts with the balance sign convention.
        - Record deposits, withdrawals and debt payments.
        - Manage due dates, monthly payments and income schedules.
        - Log every change as a Transaction.
    """

    def __init__(self):
        self.repo = AccountRepository()
        self.transaction_repo = TransactionRepository()

    # ── Queries ───────────────────────────────────────────

    def list_accounts(
        self,
        user_id: str,
        account_type: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "name",
    ) -> list[Account]:
        """
        Accounts for a user, optionally filtered and sorted.

        Args:
            account_type: 'savings' | 'debt' | None for all.
            search: Case-insensitive match on name or description.
            sort_by: 'name' (A-Z) or 'balance' (largest |balance| first).
        """
        accounts = self.repo.get_all(user_id, account_type)
        if search and search.strip():
            needle = search.strip().lower()
            accounts = [
                a for a in accounts
                if needle in a.name.lower() or needle in (a.description or "").lower()
            ]
        if sort_by == "balance":
            return sorted(accounts, key=lambda a: abs(a.balance), reverse=True)
        return sorted(accounts, key=lambda a: a.name.lower())

    def format_accounts(self, user_id: str, account_type: Optional[str] = None,
                        search: Optional[str] = None, sort_by: str = "name") -> str:
        accounts = self.list_accounts(user_id, account_type, search, sort_by)
        if not accounts:
            if search:
                return f"📭 No accounts found matching \"{search}\"."
            return f"📭 No {account_type + ' ' if account_type else ''}accounts yet."

        lines = [f"🏦 Accounts ({len(accounts)}):\n"]
        for a in accounts:
            icon = "💳" if a.is_debt() else "🏦"
            lines.append(f"  {icon} #{a.id} {a.name}: {format_currency(a.balance)}")
            if a.due_date:
                lines.append(f"      📅 due {a.due_date}")
            if a.monthly_payment:
                mp = a.monthly_payment
                lines.append(
                    f"      🔵 pays {format_currency(mp.amount)} on {mp.next_payment_date} "
                    f"from #{mp.linked_account_id}"
                )
            if a.income_schedule:
                sched = a.income_schedule
                lines.append(
                    f"      🟣 {sched.frequency} payday from {sched.pay_day_date} "
                    f"(~{format_currency(sched.estimated_earnings)})"
                )
        return "\n".join(lines)

    # ── Create / update / delete ──────────────────────────

    def create_account(
        self,
        user_id: str,
        name: str,
        account_type: str,
        balance: float = 0.0,
        description: str = "",
        due_date: Optional[str] = None,
    ) -> dict:
        """
        Create an account and log a 'create' transaction.

        Returns:
            {'success': True, 'message', 'account'} or {'success': False, 'error'}.
        """
        account_type = (account_type or "").strip().lower()
        try:
            account = Account(
                user_id=user_id,
                name=(name or "").strip(),
                type=account_type,
                balance=Account.normalize_balance(account_type, balance),
                description=(description or "").strip(),
                due_date=due_date or None,
            )
            account.validate()
        except ValueError as e:
            return _fail(str(e))

        saved = self.repo.add(account)
        self._log(saved, "create", None, saved.balance, f"Created {saved.type} account")
        return {
            "success": True,
            "account": saved,
            "message": f"✅ Created {saved.type} account #{saved.id} \"{saved.name}\" "
                       f"with balance {format_currency(saved.balance)}.",
        }

    def update_account(
        self,
        user_id: str,
        account_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        balance: Optional[float] = None,
    ) -> dict:
        """Edit name, description or balance; balance changes are logged."""
        account = self.repo.get_by_id(account_id, user_id)
        if not account:
            return _not_found(account_id)

        previous = account.balance
        if name is not None:
            account.name = name.strip()
        if description is not None:
            account.description = description.strip()
        if balance is not None:
            account.balance = Account.normalize_balance(account.type, balance)

        try:
            account.validate()
        except ValueError as e:
            return _fail(str(e))

        self.repo.update(account)
        if account.balance != previous:
            self._log(account, "update", previous, account.balance, "Balance edited")
        return {"success": True, "account": account, "message": f"✏️ Updated account #{account.id}."}

    def delete_account(self, user_id: str, account_id: int) -> dict:
        account = self.repo.get_by_id(account_id, user_id)
        if not account:
            return _not_found(account_id)

        self.repo.delete(account_id, user_id)
        self._log(account, "delete", account.balance, None, f"Deleted {account.type} account")
        return {"success": True, "message": f"🗑️ Deleted account #{account_id} \"{account.name}\"."}

    # ── Money movements ───────────────────────────────────

    def record_transaction(
        self, user_id: str, account_id: int, action: str, amount: float, description: str = ""
    ) -> dict:
        """
        Apply a deposit / withdrawal (savings) or a payment (debt).

        Debt payments reduce what is owed and stop at zero; withdrawals cannot
        exceed the savings balance.
        """
        account = self.repo.get_by_id(account_id, user_id)
        if not account:
            return _not_found(account_id)

        action = (action or "").lower()
        if action not in ACTIONS[account.type]:
            allowed = ", ".join(ACTIONS[account.type])
            return _fail(f"A {account.type} account only supports: {allowed}")
        if amount is None or amount <= 0:
            return _fail("Amount must be greater than zero")

        previous = account.balance
        if action == "deposit":
            new_balance = previous + amount
        elif action == "withdraw":
            if amount > previous:
                return _fail(f"Insufficient funds: balance is {format_currency(previous)}")
            new_balance = previous - amount
        else:
            new_balance = min(previous + amount, 0.0)

        account.balance = round(new_balance, 2)
        self.repo.update(account)

        note = description.strip() or action.capitalize()
        self._log(account, "update", previous, account.balance, note)
        return {
            "success": True,
            "account": account,
            "message": f"✅ {action.capitalize()} of {format_currency(amount)} on \"{account.name}\".\n"
                       f"  {format_currency(previous)} → {format_currency(account.balance)}",
        }

    # ── Schedules ─────────────────────────────────────────

    def set_due_date(self, user_id: str, account_id: int, due_date: Optional[str]) -> dict:
        """Set (or clear with None) the due date of a debt account."""
        account = self.repo.get_by_id(account_id, user_id)
        if not account:
            return _not_found(account_id)
        if not account.is_debt():
            return _fail("Due dates can only be set on debt accounts")

        try:
            account.due_date = parse_iso_date(due_date).isoformat() if due_date else None
        except ValueError:
            return _fail("Dates must look like YYYY-MM-DD")

        self.repo.update(account)
        if account.due_date:
            return {"success": True, "message": f"📅 \"{account.name}\" is due on {account.due_date}."}
        return {"success": True, "message": f"📅 Cleared the due date of \"{account.name}\"."}

    def set_monthly_payment(
        self, user_id: str, account_id: int, amount: float,
        linked_account_id: int, next_payment_date: str,
    ) -> dict:
        """Schedule a recurring payment into a debt account from another account."""
        account = self.repo.get_by_id(account_id, user_id)
        if not account:
            return _not_found(account_id)
        if str(linked_account_id) == str(account_id):
            return _fail("A debt cannot be paid from itself")
        source = self.repo.get_by_id(linked_account_id, user_id)
        if not source:
            return _not_found(linked_account_id)

        try:
            account.monthly_payment = MonthlyPayment(
                amount=float(amount),
                linked_account_id=str(source.id),
                next_payment_date=parse_iso_date(next_payment_date).isoformat(),
            )
            account.validate()
        except (TypeError, ValueError) as e:
            return _fail(str(e))

        self.repo.update(account)
        return {
            "success": True,
            "message": f"🔵 \"{account.name}\" will be paid {format_currency(account.monthly_payment.amount)} "
                       f"from \"{source.name}\" starting {account.monthly_payment.next_payment_date}.",
        }

    def set_income_schedule(
        self, user_id: str, account_id: int, pay_day_date: str,
        estimated_earnings: float, frequency: str,
    ) -> dict:
        """Mark a savings account as an income source with a recurring payday."""
        account = self.repo.get_by_id(account_id, user_id)
        if not account:
            return _not_found(account_id)

        try:
            account.income_schedule = IncomeSchedule(
                pay_day_date=parse_iso_date(pay_day_date).isoformat(),
                estimated_earnings=float(estimated_earnings),
                frequency=(frequency or "").strip().lower(),
            )
            account.validate()
        except (TypeError, ValueError) as e:
            return _fail(str(e))

        self.repo.update(account)
        sched = account.income_schedule
        return {
            "success": True,
            "message": f"🟣 \"{account.name}\" gets paid {sched.frequency} starting {sched.pay_day_date} "
                       f"(~{format_currency(sched.estimated_earnings)}).",
        }

    def clear_schedule(self, user_id: str, account_id: int) -> dict:
        """Remove the monthly payment and income schedule of an account."""
        account = self.repo.get_by_id(account_id, user_id)
        if not account:
            return _not_found(account_id)
        if not account.monthly_payment and not account.income_schedule:
            return _fail(f"Account #{account_id} has no schedule")

        account.monthly_payment = None
        account.income_schedule = None
        self.repo.update(account)
        return {"success": True, "message": f"🧹 Cleared the schedule of \"{account.name}\"."}

    # ── Helpers ───────────────────────────────────────────

    def _log(self, account: Account, tx_type: str, previous: Optional[float],
             new: Optional[float], description: str) -> None:
        self.transaction_repo.add(Transaction(
            account_id=str(account.id),
            account_name=account.name,
            user_id=account.user_id,
            type=tx_type,
            previous_balance=previous,
            new_balance=new,
            description=description,
        ))
