"""Auto-savings sizing and the budget guardian decision"""

import math
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from welth_engine.domain.balances import total_balance
from welth_engine.domain.models import (
    Account,
    AccountType,
    Budget,
    GuardianAction,
    GuardianActionType,
    GuardianDecision,
    GuardianStats,
    Transaction,
    TransactionType,
)
from welth_engine.utils.date_utils import as_utc, is_same_month, utc_now

MIN_BALANCE_TO_SAVE = Decimal("1000")
MIN_BUFFER = Decimal("2000")
SAVE_RATE = Decimal("0.05")
MAX_AUTO_SAVE = Decimal("500")
SAVE_BUDGET_USAGE_LIMIT = Decimal("70")
DEFAULT_LOCK_THRESHOLD = Decimal("80")


def current_month_expenses(transactions: Sequence[Transaction], now: datetime) -> Decimal:
    """Total expenses in the calendar month containing now"""
    return sum(
        (
            Decimal(t.amount)
            for t in transactions
            if t.type == TransactionType.EXPENSE and is_same_month(t.date, now)
        ),
        Decimal(0),
    )


def budget_usage_percent(spent: Decimal, budget: Optional[Budget]) -> Decimal:
    """Spent as a percentage of the budget (zero without a usable budget)"""
    if budget is None or Decimal(budget.amount) <= 0:
        return Decimal(0)
    return spent / Decimal(budget.amount) * 100


def calculate_safe_to_save(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    budget: Optional[Budget] = None,
    now: datetime | None = None,
) -> int:
    """
    Amount that can be swept into savings right now, 0 when it is not safe.

    Guards, in order:
    - total balance under 1000: nothing
    - more than 70% of the monthly budget already spent: nothing
    - balance above the 2000 buffer: 5% of the excess, capped at 500, floored
    """
    now = as_utc(now or utc_now())
    balance = total_balance(accounts)

    if balance < MIN_BALANCE_TO_SAVE:
        return 0

    spent = current_month_expenses(transactions, now)
    if budget is not None and budget_usage_percent(spent, budget) > SAVE_BUDGET_USAGE_LIMIT:
        return 0

    excess = balance - MIN_BUFFER
    if excess <= 0:
        return 0

    return math.floor(min(excess * SAVE_RATE, MAX_AUTO_SAVE))


def select_source_account(accounts: Sequence[Account]) -> Optional[Account]:
    """Default current account, falling back to the first non-savings account"""
    candidates = [a for a in accounts if a.type != AccountType.SAVINGS]
    for account in candidates:
        if account.type == AccountType.CURRENT and account.is_default:
            return account
    return candidates[0] if candidates else None


def evaluate_guardian(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    budget: Optional[Budget],
    now: datetime | None = None,
    lock_threshold: Decimal = DEFAULT_LOCK_THRESHOLD,
) -> GuardianDecision:
    """
    Decide whether to lock the budget or sweep a safe amount into savings.

    Nothing happens without an unlocked budget. Locking wins over saving when
    usage exceeds lock_threshold percent.
    """
    now = as_utc(now or utc_now())
    spent = current_month_expenses(transactions, now)
    stats = GuardianStats(
        total_balance=total_balance(accounts),
        current_month_expenses=spent,
        budget_usage=budget_usage_percent(spent, budget),
        is_locked=bool(budget and budget.is_locked),
    )

    if budget is None or budget.is_locked:
        return GuardianDecision(action=GuardianAction(type=GuardianActionType.NONE), stats=stats)

    if stats.budget_usage > Decimal(lock_threshold):
        return GuardianDecision(
            action=GuardianAction(
                type=GuardianActionType.LOCKED_BUDGET,
                reason=f"Budget usage at {stats.budget_usage:.1f}%",
            ),
            stats=stats,
        )

    amount = calculate_safe_to_save(transactions, accounts, budget, now)
    source = select_source_account(accounts)
    if amount > 0 and source is not None and Decimal(source.balance) >= amount:
        return GuardianDecision(
            action=GuardianAction(
                type=GuardianActionType.AUTO_SAVED,
                reason=f"Saved ₹{amount} to savings",
                amount=amount,
                source_account_id=source.account_id,
            ),
            stats=stats,
        )

    return GuardianDecision(action=GuardianAction(type=GuardianActionType.NONE), stats=stats)
