"""
Financial twin - personality-driven purchase advice.

Advice is produced by an ordered cascade of rules. Each rule inspects an
AdviceContext and, when it matches, rewrites the running AdviceResult. Later
rules may override an earlier verdict; reasoning accumulates unless a rule
explicitly replaces it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from welth_engine.domain.behavior import analyze_spending_behavior
from welth_engine.domain.models import (
    BehaviorProfile,
    Decision,
    SpendingProfile,
    SpendingStyle,
    Transaction,
    TransactionType,
    Verdict,
)

SIMILARITY_BAND = Decimal("0.3")
BELOW_USUAL_RATIO = Decimal("0.8")
IMPULSIVE_LIMIT = Decimal("1000")
SAVING_GOAL_LIMIT = Decimal("5000")

BASE_CONFIDENCE = 50


@dataclass
class AdviceContext:
    """Everything a rule may look at; built once per request"""

    question: str
    amount: Decimal
    profile: Optional[SpendingProfile]
    behavior: BehaviorProfile
    similar_purchases: List[Transaction]
    avg_similar_amount: Decimal


@dataclass
class AdviceResult:
    """Running verdict, mutated by matching rules in order"""

    verdict: Verdict = Verdict.CONSIDER
    confidence: int = BASE_CONFIDENCE
    fragments: List[str] = field(default_factory=list)

    @property
    def reasoning(self) -> str:
        return "".join(self.fragments).strip()

    def append(self, text: str) -> None:
        self.fragments.append(text)

    def replace(self, text: str) -> None:
        self.fragments = [text]

    def raise_confidence(self, floor: int) -> None:
        self.confidence = max(self.confidence, floor)


def first_word_matches(question: str, text: Optional[str]) -> bool:
    """
    Crude topic match: the question's first word appears inside `text`.

    Kept exactly as users have come to rely on it: split on single spaces,
    case-insensitive substring test. An empty first word matches any text.
    """
    if not text:
        return False
    return question.lower().split(" ")[0] in text.lower()


class AdviceRule:
    """A single step of the advice cascade"""

    name = "rule"

    def matches(self, context: AdviceContext) -> bool:
        raise NotImplementedError

    def apply(self, result: AdviceResult, context: AdviceContext) -> None:
        raise NotImplementedError


class RegretThresholdRule(AdviceRule):
    name = "regret_threshold"

    def matches(self, context: AdviceContext) -> bool:
        return context.amount > context.behavior.regret_threshold

    def apply(self, result: AdviceResult, context: AdviceContext) -> None:
        result.verdict = Verdict.WAIT
        result.append(
            f"Based on your history, you tend to regret purchases over ₹{context.behavior.regret_threshold:.0f}. "
        )
        result.raise_confidence(75)

        regret_purchase = context.profile.regret_purchase if context.profile else None
        if first_word_matches(context.question, regret_purchase):
            result.append("You mentioned regretting similar purchases before. ")
            result.raise_confidence(90)


class ImpulsiveSpenderRule(AdviceRule):
    name = "impulsive_spender"

    def matches(self, context: AdviceContext) -> bool:
        return context.behavior.spending_style == SpendingStyle.IMPULSIVE and context.amount > IMPULSIVE_LIMIT

    def apply(self, result: AdviceResult, context: AdviceContext) -> None:
        result.verdict = Verdict.WAIT
        result.append("You have an impulsive spending pattern. Wait 24 hours before deciding. ")
        result.raise_confidence(70)


class SavingGoalRule(AdviceRule):
    name = "saving_goal"

    def matches(self, context: AdviceContext) -> bool:
        return bool(context.profile and context.profile.saving_goal) and context.amount > SAVING_GOAL_LIMIT

    def apply(self, result: AdviceResult, context: AdviceContext) -> None:
        result.verdict = Verdict.WAIT
        result.append(f"Remember, you're saving for {context.profile.saving_goal}. This could delay your goal. ")
        result.raise_confidence(85)


class HappyPurchaseRule(AdviceRule):
    """Positive signal: replaces whatever reasoning came before"""

    name = "happy_purchase"

    def matches(self, context: AdviceContext) -> bool:
        happy_purchase = context.profile.happy_purchase if context.profile else None
        return first_word_matches(context.question, happy_purchase)

    def apply(self, result: AdviceResult, context: AdviceContext) -> None:
        result.verdict = Verdict.APPROVE
        result.replace("This aligns with what makes you happy! Similar purchases brought you joy before. ")
        result.confidence = 80


class BelowUsualSpendRule(AdviceRule):
    name = "below_usual_spend"

    def matches(self, context: AdviceContext) -> bool:
        return context.amount < context.avg_similar_amount * BELOW_USUAL_RATIO

    def apply(self, result: AdviceResult, context: AdviceContext) -> None:
        if result.verdict != Verdict.CONSIDER:
            return
        result.verdict = Verdict.APPROVE
        result.replace("This is below your usual spending for similar items. Seems reasonable! ")
        result.confidence = 70


class TypicalDecisionRule(AdviceRule):
    """Fallback when no other rule had anything to say"""

    name = "typical_decision"

    def matches(self, context: AdviceContext) -> bool:
        return True

    def apply(self, result: AdviceResult, context: AdviceContext) -> None:
        if result.reasoning:
            return
        result.replace(
            f"Based on {len(context.similar_purchases)} similar past purchases, "
            "this seems like a typical decision for you. "
        )
        result.confidence = 60


DEFAULT_RULES: Tuple[AdviceRule, ...] = (
    RegretThresholdRule(),
    ImpulsiveSpenderRule(),
    SavingGoalRule(),
    HappyPurchaseRule(),
    BelowUsualSpendRule(),
    TypicalDecisionRule(),
)


def find_similar_purchases(transactions: Sequence[Transaction], amount: Decimal) -> List[Transaction]:
    """Expenses within 30% of the proposed amount"""
    band = amount * SIMILARITY_BAND
    return [
        t
        for t in transactions
        if t.type == TransactionType.EXPENSE and abs(Decimal(t.amount) - amount) < band
    ]


def build_context(
    question: str,
    amount: Decimal,
    profile: Optional[SpendingProfile],
    transactions: Sequence[Transaction],
    now: datetime | None = None,
) -> AdviceContext:
    amount = Decimal(amount)
    similar = find_similar_purchases(transactions, amount)
    if similar:
        avg_similar = sum((Decimal(t.amount) for t in similar), Decimal(0)) / len(similar)
    else:
        avg_similar = amount

    return AdviceContext(
        question=question,
        amount=amount,
        profile=profile,
        behavior=analyze_spending_behavior(transactions, profile, now),
        similar_purchases=similar,
        avg_similar_amount=avg_similar,
    )


def clamp_confidence(confidence: int) -> int:
    return max(0, min(100, int(confidence)))


def generate_twin_advice(
    question: str,
    amount: Decimal,
    profile: Optional[SpendingProfile],
    transactions: Sequence[Transaction],
    now: datetime | None = None,
    rules: Sequence[AdviceRule] = DEFAULT_RULES,
) -> Decision:
    """
    Advise whether to go ahead with a purchase.

    Rules run strictly in order (regret threshold, impulsive pattern, saving
    goal, happy purchase, below usual spend, typical-decision fallback).
    Output is fully determined by the inputs.
    """
    context = build_context(question, amount, profile, transactions, now)
    result = AdviceResult()

    for rule in rules:
        if rule.matches(context):
            rule.apply(result, context)

    return Decision(
        verdict=result.verdict,
        reasoning=result.reasoning,
        confidence=clamp_confidence(result.confidence),
        similar_purchase_count=len(context.similar_purchases),
        behavior=context.behavior,
    )


def decision_counter_delta(verdict: Verdict) -> Tuple[int, int]:
    """(approved, rejected) increments the profile store applies after advice"""
    if verdict == Verdict.APPROVE:
        return 1, 0
    if verdict == Verdict.WAIT:
        return 0, 1
    return 0, 0
