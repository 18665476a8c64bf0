"""Balance series: backward reconstruction of past balances and linear cash-flow forecast"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Sequence

from welth_engine.domain.models import Account, BalancePoint, ForecastPoint, Transaction, TransactionType
from welth_engine.utils.date_utils import as_utc, days_ago, utc_now

FORECAST_WINDOW_DAYS = 30


def total_balance(accounts: Sequence[Account]) -> Decimal:
    """Sum of all account balances (zero when there are no accounts)"""
    return sum((Decimal(a.balance) for a in accounts), Decimal(0))


def signed_amount(txn: Transaction) -> Decimal:
    """Effect of a transaction on the balance: income adds, expense subtracts"""
    if txn.type == TransactionType.INCOME:
        return Decimal(txn.amount)
    return -Decimal(txn.amount)


def balance_at(current_balance: Decimal, transactions: Sequence[Transaction], moment: datetime) -> Decimal:
    """
    Balance the account must have had at `moment`, given the current balance.

    Every transaction dated strictly after `moment` is undone. No state is
    carried between calls, so any set of moments can be evaluated in any order.
    """
    moment = as_utc(moment)
    balance = Decimal(current_balance)
    for txn in transactions:
        if as_utc(txn.date) > moment:
            balance -= signed_amount(txn)
    return balance


def calculate_historical_balance(
    transactions: Sequence[Transaction],
    current_balance: Decimal,
    days: int = 30,
    now: datetime | None = None,
) -> List[BalancePoint]:
    """
    Reconstruct the daily balance for the last `days` days.

    Returns days+1 points ordered chronologically, from day_offset=-days up to
    day_offset=0 (today). Offset 0 is always exactly current_balance, even when
    future-dated transactions exist. Negative balances are reported as-is.
    """
    now = as_utc(now or utc_now())

    history = []
    for offset in range(-days, 1):
        moment = now + timedelta(days=offset)
        history.append(
            BalancePoint(
                date=moment.date(),
                balance=balance_at(current_balance, transactions, moment) if offset else Decimal(current_balance),
                day_offset=offset,
            )
        )

    return history


def predict_cash_flow(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    days: int = 30,
    now: datetime | None = None,
) -> List[ForecastPoint]:
    """
    Project the total balance `days` days ahead from trailing 30-day averages.

    Daily income and expense are averaged over the fixed 30-day window, not over
    active days, so sparse recent activity damps the slope. Offset 0 is always
    exactly the current total balance.
    """
    now = as_utc(now or utc_now())
    balance = total_balance(accounts)

    recent = [t for t in transactions if days_ago(t.date, now) <= FORECAST_WINDOW_DAYS]
    income = sum((Decimal(t.amount) for t in recent if t.type == TransactionType.INCOME), Decimal(0))
    expense = sum((Decimal(t.amount) for t in recent if t.type == TransactionType.EXPENSE), Decimal(0))
    daily_net = (income - expense) / FORECAST_WINDOW_DAYS

    return [
        ForecastPoint(
            date=(now + timedelta(days=offset)).date(),
            predicted=balance + daily_net * offset if offset else balance,
            day_offset=offset,
        )
        for offset in range(days + 1)
    ]
