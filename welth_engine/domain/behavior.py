"""Spending behavior profiling from transaction history"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from welth_engine.domain.models import (
    BehaviorProfile,
    RiskTolerance,
    SpendingProfile,
    SpendingStyle,
    Transaction,
    TransactionType,
)
from welth_engine.utils.date_utils import as_utc, days_ago, utc_now

DEFAULT_REGRET_THRESHOLD = Decimal("5000")
RECENT_WINDOW_DAYS = 7
MAX_TRIGGERS = 3

PERSONALITY_QUESTIONS = [
    {
        "id": "happy_purchase",
        "question": "What recent purchase made you happiest?",
        "placeholder": "e.g., New headphones, Weekend trip, Gym membership",
    },
    {
        "id": "regret_purchase",
        "question": "What purchase do you regret?",
        "placeholder": "e.g., Expensive shoes I never wear, Unused subscription",
    },
    {
        "id": "financial_fear",
        "question": "What's your biggest financial fear?",
        "placeholder": "e.g., Running out of money, Not saving enough, Debt",
    },
    {
        "id": "saving_goal",
        "question": "What are you saving for?",
        "placeholder": "e.g., Laptop, Emergency fund, Vacation, House",
    },
    {
        "id": "money_feeling",
        "question": "How do you feel about money?",
        "placeholder": "e.g., Stressed, Confident, Anxious, In control",
    },
]


def default_behavior() -> BehaviorProfile:
    return BehaviorProfile(
        risk_tolerance=RiskTolerance.MODERATE,
        spending_style=SpendingStyle.BALANCED,
        regret_threshold=DEFAULT_REGRET_THRESHOLD,
        emotional_triggers=[],
    )


def classify_risk_tolerance(expenses: Sequence[Transaction], avg_expense: Decimal) -> RiskTolerance:
    """
    Share of "large" purchases (more than twice the mean expense):
    - > 30%: HIGH
    - > 10%: MODERATE
    - otherwise LOW
    """
    large = sum(1 for t in expenses if Decimal(t.amount) > avg_expense * 2)
    if large > len(expenses) * Decimal("0.3"):
        return RiskTolerance.HIGH
    if large > len(expenses) * Decimal("0.1"):
        return RiskTolerance.MODERATE
    return RiskTolerance.LOW


def classify_spending_style(expenses: Sequence[Transaction], now: datetime) -> SpendingStyle:
    """Expense count in the trailing week: > 10 IMPULSIVE, > 5 BALANCED, else CAUTIOUS"""
    recent = sum(1 for t in expenses if days_ago(t.date, now) <= RECENT_WINDOW_DAYS)
    if recent > 10:
        return SpendingStyle.IMPULSIVE
    if recent > 5:
        return SpendingStyle.BALANCED
    return SpendingStyle.CAUTIOUS


def top_spending_categories(expenses: Sequence[Transaction], limit: int = MAX_TRIGGERS) -> List[str]:
    """Categories ranked by total spend, descending; ties keep first-seen order"""
    totals: Dict[str, Decimal] = {}
    for txn in expenses:
        if txn.category:
            totals[txn.category] = totals.get(txn.category, Decimal(0)) + Decimal(txn.amount)

    # sorted() is stable and dicts keep insertion order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [category for category, _ in ranked[:limit]]


def analyze_spending_behavior(
    transactions: Sequence[Transaction],
    profile: Optional[SpendingProfile] = None,
    now: datetime | None = None,
) -> BehaviorProfile:
    """
    Derive risk tolerance, spending style, regret threshold and emotional triggers.

    With no transactions at all the fixed defaults are returned. An existing
    profile's regret threshold takes precedence over the estimate of 1.5x the
    mean expense.
    """
    if not transactions:
        return default_behavior()

    now = as_utc(now or utc_now())
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]

    if expenses:
        avg_expense = sum((Decimal(t.amount) for t in expenses), Decimal(0)) / len(expenses)
        estimated_threshold = avg_expense * Decimal("1.5")
    else:
        avg_expense = Decimal(0)
        estimated_threshold = DEFAULT_REGRET_THRESHOLD

    if profile is not None and profile.regret_threshold:
        regret_threshold = Decimal(profile.regret_threshold)
    else:
        regret_threshold = estimated_threshold

    return BehaviorProfile(
        risk_tolerance=classify_risk_tolerance(expenses, avg_expense),
        spending_style=classify_spending_style(expenses, now),
        regret_threshold=regret_threshold,
        emotional_triggers=top_spending_categories(expenses),
    )
