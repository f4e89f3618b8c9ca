import pytest
from typing import Callable

from models.account import Account, IncomeSchedule, MonthlyPayment
from security.rate_limiter import limiter


@pytest.fixture
def debt_account_maker() -> Callable:
    """return a function that builds debt accounts"""
    def make(id=1, name="Card", balance=-500.0, due_date=None, payment=None) -> Account:
        return Account(
            id=id,
            user_id="42",
            name=name,
            type="debt",
            balance=balance,
            due_date=due_date,
            monthly_payment=payment,
        )
    return make


@pytest.fixture
def savings_account_maker() -> Callable:
    """return a function that builds savings accounts"""
    def make(id=10, name="Checking", balance=1200.0, schedule=None) -> Account:
        return Account(
            id=id,
            user_id="42",
            name=name,
            type="savings",
            balance=balance,
            income_schedule=schedule,
        )
    return make


@pytest.fixture
def mixed_accounts(debt_account_maker, savings_account_maker) -> list[Account]:
    """a card with a due date, a loan with a monthly payment and a salary account"""
    return [
        debt_account_maker(id=1, name="Card", balance=-500.0, due_date="2024-03-15"),
        debt_account_maker(
            id=2, name="Car Loan", balance=-8000.0,
            payment=MonthlyPayment(amount=250.0, linked_account_id="10", next_payment_date="2024-02-20"),
        ),
        savings_account_maker(
            id=10, name="Salary", balance=2000.0,
            schedule=IncomeSchedule(pay_day_date="2024-01-05", estimated_earnings=2000.0, frequency="bi-weekly"),
        ),
    ]


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """every test starts with an empty rate limiter"""
    limiter.reset()
    yield
    limiter.reset()
