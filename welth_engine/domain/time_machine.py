"""Financial time machine - counterfactual balances under 'what if' scenarios"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Sequence

from welth_engine.domain.balances import total_balance
from welth_engine.domain.models import (
    Account,
    AccountType,
    Scenario,
    ScenarioKind,
    TimelineImpact,
    TimelineResult,
    TimelineSnapshot,
    Transaction,
    TransactionType,
)
from welth_engine.utils.date_utils import as_utc, months_passed, subtract_calendar_months, utc_now

DEFAULT_LOOKBACK_MONTHS = 3
FALLBACK_MESSAGE = "See how different choices create different futures!"
WHOLE = Decimal("1")
ONE_PLACE = Decimal("0.1")

QUICK_SCENARIOS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "Save ₹1,000/month",
        "description": "What if you saved ₹1,000 every month?",
        "kind": ScenarioKind.SAVE_MONTHLY.value,
        "amount": 1000,
    },
    {
        "id": 2,
        "title": "Save ₹2,000/month",
        "description": "What if you saved ₹2,000 every month?",
        "kind": ScenarioKind.SAVE_MONTHLY.value,
        "amount": 2000,
    },
    {
        "id": 3,
        "title": "Reduce spending 20%",
        "description": "What if you spent 20% less overall?",
        "kind": ScenarioKind.REDUCE_SPENDING.value,
        "amount": 20,
    },
    {
        "id": 4,
        "title": "Reduce spending 30%",
        "description": "What if you spent 30% less overall?",
        "kind": ScenarioKind.REDUCE_SPENDING.value,
        "amount": 30,
    },
]


def get_quick_scenarios() -> List[Dict[str, Any]]:
    """Preset scenarios offered as one-click options"""
    return [dict(s) for s in QUICK_SCENARIOS]


def default_start_date(now: datetime | None = None) -> datetime:
    """Scenario start used when the caller gives none: three calendar months ago"""
    return subtract_calendar_months(as_utc(now or utc_now()), DEFAULT_LOOKBACK_MONTHS)


def current_savings(accounts: Sequence[Account]) -> Decimal:
    """Balance of the first savings account, or zero"""
    for account in accounts:
        if account.type == AccountType.SAVINGS:
            return Decimal(account.balance)
    return Decimal(0)


def expenses_since(
    transactions: Sequence[Transaction],
    start: datetime,
    category: str | None = None,
    any_category: bool = True,
) -> Decimal:
    """Sum of expenses dated on/after start, optionally restricted to one category"""
    start = as_utc(start)
    return sum(
        (
            Decimal(t.amount)
            for t in transactions
            if t.type == TransactionType.EXPENSE
            and as_utc(t.date) >= start
            and (any_category or t.category == category)
        ),
        Decimal(0),
    )


def percentage_gain(difference: Decimal, current: Decimal) -> str:
    """Gain relative to the current balance, one decimal place; "0.0" when current is zero"""
    if current == 0:
        return "0.0"
    return str((difference / current * 100).quantize(ONE_PLACE, rounding=ROUND_HALF_UP))


def _format_amount(amount: Decimal) -> str:
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return str(int(amount))
    return str(amount.normalize())


def _whole(amount: Decimal) -> str:
    """Rupee amount rounded half up to a whole number"""
    return str(Decimal(amount).quantize(WHOLE, rounding=ROUND_HALF_UP))


def generate_message(kind: str, difference: Decimal, months: int, amount: Decimal) -> str:
    """Kind-specific summary sentence; unknown kinds get a generic line"""
    if kind == ScenarioKind.SAVE_MONTHLY:
        return (
            f"If you had saved ₹{_format_amount(amount)}/month for the past {months} months, "
            f"you'd have ₹{_whole(difference)} MORE today! 🎯"
        )
    if kind == ScenarioKind.AVOID_CATEGORY:
        return f"By avoiding this spending, you'd have ₹{_whole(difference)} extra in your account! 💰"
    if kind == ScenarioKind.REDUCE_SPENDING:
        return f"Reducing spending by {_format_amount(amount)}% would have given you ₹{_whole(difference)} more! 📈"
    return FALLBACK_MESSAGE


def calculate_alternate_timeline(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    scenario: Scenario,
    now: datetime | None = None,
) -> TimelineResult:
    """
    Compare the actual balance with the balance under an alternate choice.

    Scenario kinds:
    - SAVE_MONTHLY: amount put aside every 30 days since start_date
    - AVOID_CATEGORY: every expense in the category since start_date never happened
    - REDUCE_SPENDING: all expenses since start_date were `amount` percent lower

    Months are fixed 30-day periods. An unrecognised kind leaves both timelines
    equal and returns the generic message.
    """
    now = as_utc(now or utc_now())
    amount = Decimal(scenario.amount)

    balance = total_balance(accounts)
    savings = current_savings(accounts)
    months = months_passed(scenario.start_date, now)

    saved_amount = Decimal(0)
    avoided_expenses = Decimal(0)

    if scenario.kind == ScenarioKind.SAVE_MONTHLY:
        saved_amount = amount * months
    elif scenario.kind == ScenarioKind.AVOID_CATEGORY:
        avoided_expenses = expenses_since(
            transactions, scenario.start_date, category=scenario.category, any_category=False
        )
    elif scenario.kind == ScenarioKind.REDUCE_SPENDING:
        saved_amount = expenses_since(transactions, scenario.start_date) * amount / 100

    alternate_balance = balance + saved_amount + avoided_expenses
    difference = alternate_balance - balance

    return TimelineResult(
        current=TimelineSnapshot(balance=balance, savings=savings),
        alternate=TimelineSnapshot(balance=alternate_balance, savings=savings + saved_amount),
        impact=TimelineImpact(
            difference=difference,
            percentage_gain=percentage_gain(difference, balance),
            saved_amount=saved_amount,
            avoided_expenses=avoided_expenses,
            months_passed=months,
        ),
        message=generate_message(scenario.kind, difference, months, amount),
    )
