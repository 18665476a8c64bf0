"""Domain models - pure Python dataclasses representing ledger snapshots and engine outputs"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class AccountType(str, Enum):
    CURRENT = "CURRENT"
    SAVINGS = "SAVINGS"
    CREDIT = "CREDIT"
    INVESTMENT = "INVESTMENT"


class RiskTolerance(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


class SpendingStyle(str, Enum):
    IMPULSIVE = "IMPULSIVE"
    BALANCED = "BALANCED"
    CAUTIOUS = "CAUTIOUS"


class Verdict(str, Enum):
    APPROVE = "APPROVE"
    WAIT = "WAIT"
    CONSIDER = "CONSIDER"


class ScenarioKind(str, Enum):
    SAVE_MONTHLY = "SAVE_MONTHLY"
    AVOID_CATEGORY = "AVOID_CATEGORY"
    REDUCE_SPENDING = "REDUCE_SPENDING"


class GuardianActionType(str, Enum):
    LOCKED_BUDGET = "LOCKED_BUDGET"
    AUTO_SAVED = "AUTO_SAVED"
    NONE = "NONE"


@dataclass(frozen=True)
class Transaction:
    """Ledger entry; amount is never negative, direction comes from type"""

    date: datetime
    amount: Decimal
    type: TransactionType
    category: Optional[str] = None
    description: str = ""


@dataclass(frozen=True)
class Account:
    """Account snapshot; credit-type balances may be negative"""

    balance: Decimal
    type: AccountType = AccountType.CURRENT
    is_default: bool = False
    account_id: Optional[str] = None
    name: str = ""


@dataclass(frozen=True)
class Budget:
    """Monthly spending budget"""

    amount: Decimal
    is_locked: bool = False


@dataclass
class SpendingProfile:
    """Personality quiz answers plus derived behavior fields, as held by the profile store"""

    risk_tolerance: RiskTolerance = RiskTolerance.MODERATE
    spending_style: SpendingStyle = SpendingStyle.BALANCED
    regret_threshold: Decimal = Decimal("5000")
    emotional_triggers: List[str] = field(default_factory=list)
    happy_purchase: Optional[str] = None
    regret_purchase: Optional[str] = None
    saving_goal: Optional[str] = None
    financial_fear: Optional[str] = None
    money_feeling: Optional[str] = None
    approved_decisions: int = 0
    rejected_decisions: int = 0


@dataclass
class BehaviorProfile:
    """Behavioral fields derived from transaction history"""

    risk_tolerance: RiskTolerance
    spending_style: SpendingStyle
    regret_threshold: Decimal
    emotional_triggers: List[str]


@dataclass(frozen=True)
class Scenario:
    """Counterfactual assumption; kind stays a plain string so unknown kinds are tolerated"""

    kind: str
    amount: Decimal
    start_date: datetime
    category: Optional[str] = None


@dataclass
class Decision:
    """Output of the purchase advisor"""

    verdict: Verdict
    reasoning: str
    confidence: int
    similar_purchase_count: int
    behavior: BehaviorProfile


@dataclass
class BalancePoint:
    """Reconstructed balance for one day in the past"""

    date: date
    balance: Decimal
    day_offset: int


@dataclass
class ForecastPoint:
    """Projected balance for one day ahead"""

    date: date
    predicted: Decimal
    day_offset: int


@dataclass
class TimelineSnapshot:
    balance: Decimal
    savings: Decimal


@dataclass
class TimelineImpact:
    difference: Decimal
    percentage_gain: str  # one decimal place, "0.0" when current balance is zero
    saved_amount: Decimal
    avoided_expenses: Decimal
    months_passed: int


@dataclass
class TimelineResult:
    """Actual vs. alternate reality for one scenario"""

    current: TimelineSnapshot
    alternate: TimelineSnapshot
    impact: TimelineImpact
    message: str


@dataclass
class GuardianStats:
    total_balance: Decimal
    current_month_expenses: Decimal
    budget_usage: Decimal
    is_locked: bool


@dataclass
class GuardianAction:
    """What the guardian decided; the caller performs the mutation"""

    type: GuardianActionType
    reason: str = ""
    amount: int = 0
    source_account_id: Optional[str] = None


@dataclass
class GuardianDecision:
    action: GuardianAction
    stats: GuardianStats
