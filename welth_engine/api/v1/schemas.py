"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from welth_engine.domain.models import GuardianActionType, RiskTolerance, SpendingStyle, Verdict


class OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Advisor


class BalancePointSchema(OrmModel):
    date: date
    balance: float
    day_offset: int


class ForecastPointSchema(OrmModel):
    date: date
    predicted: float
    day_offset: int


class CashFlowResponse(BaseModel):
    """Response for GET /v1/advisor/cash-flow"""

    total_balance: float
    historical: List[BalancePointSchema]
    predicted: List[ForecastPointSchema]
    safe_to_save: int


# Time machine


class ScenarioSchema(BaseModel):
    kind: str = Field(..., min_length=1, description="SAVE_MONTHLY, AVOID_CATEGORY or REDUCE_SPENDING")
    amount: Decimal = Field(Decimal(0), ge=0, description="Monthly amount, or percentage for REDUCE_SPENDING")
    category: Optional[str] = None
    start_date: Optional[datetime] = Field(None, description="Defaults to three months ago")


class TimelineRequest(BaseModel):
    """Request body for POST /v1/time-machine"""

    scenario: ScenarioSchema


class TimelineSnapshotSchema(OrmModel):
    balance: float
    savings: float


class TimelineImpactSchema(OrmModel):
    difference: float
    percentage_gain: str
    saved_amount: float
    avoided_expenses: float
    months_passed: int


class TimelineResultSchema(OrmModel):
    current: TimelineSnapshotSchema
    alternate: TimelineSnapshotSchema
    impact: TimelineImpactSchema
    message: str


class TimelineResponse(BaseModel):
    success: bool = True
    result: TimelineResultSchema


class QuickScenarioSchema(BaseModel):
    id: int
    title: str
    description: str
    kind: str
    amount: float


# Twin


class QuestionSchema(BaseModel):
    id: str
    question: str
    placeholder: str


class ProfileAnswers(BaseModel):
    """Personality quiz answers; omitted answers leave stored values untouched"""

    model_config = ConfigDict(extra="ignore")

    happy_purchase: Optional[str] = None
    regret_purchase: Optional[str] = None
    financial_fear: Optional[str] = None
    saving_goal: Optional[str] = None
    money_feeling: Optional[str] = None


class BehaviorSchema(OrmModel):
    risk_tolerance: RiskTolerance
    spending_style: SpendingStyle
    regret_threshold: float
    emotional_triggers: List[str]


class ProfileSchema(BehaviorSchema):
    happy_purchase: Optional[str] = None
    regret_purchase: Optional[str] = None
    financial_fear: Optional[str] = None
    saving_goal: Optional[str] = None
    money_feeling: Optional[str] = None
    approved_decisions: int = 0
    rejected_decisions: int = 0


class ProfileResponse(BaseModel):
    success: bool = True
    profile: Optional[ProfileSchema] = None
    has_profile: bool


class AskRequest(BaseModel):
    """Request body for POST /v1/twin/ask"""

    question: str = Field(..., min_length=1, description="What the user wants to buy")
    amount: Decimal = Field(..., gt=0, description="Proposed purchase amount")


class AdviceSchema(BaseModel):
    decision: Verdict
    reasoning: str
    confidence: int = Field(..., ge=0, le=100)
    similar_purchases: int
    behavior: BehaviorSchema


class AskResponse(BaseModel):
    success: bool = True
    advice: AdviceSchema


# Guardian


class GuardianStatsSchema(OrmModel):
    total_balance: float
    current_month_expenses: float
    budget_usage: float
    is_locked: bool


class GuardianActionSchema(BaseModel):
    type: GuardianActionType
    reason: str
    amount: int = 0
    insight_id: Optional[str] = None


class GuardianResponse(BaseModel):
    """Response for POST /v1/guardian/run"""

    status: str = "ok"
    action_taken: Optional[GuardianActionSchema] = None
    stats: GuardianStatsSchema
