"""Data access layer: ledger snapshots, budgets, twin profiles and insights"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Mapping, Optional
from sqlalchemy.orm import Query, Session
from welth_engine.infrastructure.database.models import (
    AccountRecord,
    BudgetRecord,
    FinancialProfileRecord,
    InsightRecord,
    TransactionRecord,
)
from welth_engine.domain.exceptions import InvalidTransactionDataError, InvalidTransferError
from welth_engine.domain.models import (
    Account,
    AccountType,
    BehaviorProfile,
    Budget,
    RiskTolerance,
    SpendingProfile,
    SpendingStyle,
    Transaction,
    TransactionType,
    Verdict,
)
from welth_engine.domain.twin import decision_counter_delta

QUIZ_FIELDS = ("happy_purchase", "regret_purchase", "financial_fear", "saving_goal", "money_feeling")


def to_transaction(record: TransactionRecord) -> Transaction:
    """
    Map a ledger row onto the domain model.

    Raises:
        InvalidTransactionDataError: missing date, unknown type or bad amount
    """
    if record.date is None:
        raise InvalidTransactionDataError(f"Transaction {record.id} has no date")
    try:
        txn_type = TransactionType(record.type)
    except ValueError as e:
        raise InvalidTransactionDataError(f"Transaction {record.id} has unknown type {record.type!r}") from e
    if record.amount is None or Decimal(record.amount) < 0:
        raise InvalidTransactionDataError(f"Transaction {record.id} has invalid amount {record.amount!r}")

    return Transaction(
        date=record.date,
        amount=Decimal(record.amount),
        type=txn_type,
        category=record.category,
        description=record.description or "",
    )


def to_account(record: AccountRecord) -> Account:
    try:
        account_type = AccountType(record.type)
    except ValueError as e:
        raise InvalidTransactionDataError(f"Account {record.id} has unknown type {record.type!r}") from e

    return Account(
        balance=Decimal(record.balance),
        type=account_type,
        is_default=bool(record.is_default),
        account_id=str(record.id),
        name=record.name or "",
    )


def to_profile(record: FinancialProfileRecord) -> SpendingProfile:
    return SpendingProfile(
        risk_tolerance=RiskTolerance(record.risk_tolerance),
        spending_style=SpendingStyle(record.spending_style),
        regret_threshold=Decimal(record.regret_threshold),
        emotional_triggers=list(record.emotional_triggers or []),
        happy_purchase=record.happy_purchase,
        regret_purchase=record.regret_purchase,
        saving_goal=record.saving_goal,
        financial_fear=record.financial_fear,
        money_feeling=record.money_feeling,
        approved_decisions=record.approved_decisions or 0,
        rejected_decisions=record.rejected_decisions or 0,
    )


class LedgerRepository:
    """Read-only ledger snapshots plus the guardian's mutations"""

    def __init__(self, db: Session):
        self.db = db

    def get_transactions(self, user_id: str, limit: Optional[int] = None) -> List[Transaction]:
        """Most recent transactions first"""
        query = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id)
            .order_by(TransactionRecord.date.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [to_transaction(r) for r in query.all()]

    def get_accounts(self, user_id: str) -> List[Account]:
        records = (
            self.db.query(AccountRecord)
            .filter(AccountRecord.user_id == user_id)
            .order_by(AccountRecord.created_at)
            .all()
        )
        return [to_account(r) for r in records]

    def budget_query(self, user_id: str, for_update: bool = False) -> Query:
        query = self.db.query(BudgetRecord).filter(BudgetRecord.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        return query

    def _budget_record(self, user_id: str, for_update: bool = False) -> Optional[BudgetRecord]:
        return self.budget_query(user_id, for_update).first()

    def get_budget(self, user_id: str, for_update: bool = False) -> Optional[Budget]:
        """Budget snapshot; for_update row-locks it until the session commits"""
        record = self._budget_record(user_id, for_update)
        if record is None:
            return None
        return Budget(amount=Decimal(record.amount), is_locked=bool(record.is_locked))

    def lock_budget(self, user_id: str) -> None:
        record = self._budget_record(user_id)
        if record is not None:
            record.is_locked = True
            self.db.flush()

    def transfer_to_savings(self, user_id: str, source_account_id: str, amount: int, when: datetime) -> AccountRecord:
        """
        Move `amount` from the source account into the user's savings account.

        The savings account is created on demand. The transfer is recorded as
        an INCOME transaction on the savings account.

        Raises:
            InvalidTransferError: source account is unknown or is a savings account
        """
        source = self.db.get(AccountRecord, uuid.UUID(source_account_id))
        if source is None or source.user_id != user_id:
            raise InvalidTransferError(f"Unknown source account {source_account_id}")
        if source.type == AccountType.SAVINGS.value:
            raise InvalidTransferError(f"Account {source_account_id} is a savings account")

        savings = (
            self.db.query(AccountRecord)
            .filter(AccountRecord.user_id == user_id, AccountRecord.type == AccountType.SAVINGS.value)
            .order_by(AccountRecord.created_at)
            .first()
        )
        if savings is None:
            savings = AccountRecord(
                user_id=user_id,
                name="Auto-Savings",
                type=AccountType.SAVINGS.value,
                balance=Decimal(0),
                is_default=False,
            )
            self.db.add(savings)
            self.db.flush()

        source.balance = Decimal(source.balance) - amount
        savings.balance = Decimal(savings.balance) + amount

        self.db.add(
            TransactionRecord(
                user_id=user_id,
                account_id=savings.id,
                type=TransactionType.INCOME.value,
                amount=Decimal(amount),
                category="Savings",
                description="Auto-Savings Transfer",
                date=when,
            )
        )
        self.db.flush()
        return savings


class ProfileRepository:
    """Profile store keyed by user"""

    def __init__(self, db: Session):
        self.db = db

    def _record(self, user_id: str) -> Optional[FinancialProfileRecord]:
        return (
            self.db.query(FinancialProfileRecord)
            .filter(FinancialProfileRecord.user_id == user_id)
            .first()
        )

    def get(self, user_id: str) -> Optional[SpendingProfile]:
        record = self._record(user_id)
        return to_profile(record) if record is not None else None

    def upsert(self, user_id: str, answers: Mapping[str, Any], behavior: BehaviorProfile) -> SpendingProfile:
        """Create or update the profile, merging quiz answers with computed behavior"""
        record = self._record(user_id)
        if record is None:
            record = FinancialProfileRecord(user_id=user_id, approved_decisions=0, rejected_decisions=0)
            self.db.add(record)

        for name in QUIZ_FIELDS:
            if name in answers:
                setattr(record, name, answers[name])

        record.risk_tolerance = RiskTolerance(behavior.risk_tolerance).value
        record.spending_style = SpendingStyle(behavior.spending_style).value
        record.regret_threshold = Decimal(behavior.regret_threshold)
        record.emotional_triggers = list(behavior.emotional_triggers)

        self.db.flush()
        return to_profile(record)

    def record_decision(self, user_id: str, verdict: Verdict) -> None:
        """Bump the approved/rejected counters for an advice verdict"""
        approved, rejected = decision_counter_delta(verdict)
        if not (approved or rejected):
            return
        record = self._record(user_id)
        if record is None:
            return
        record.approved_decisions = (record.approved_decisions or 0) + approved
        record.rejected_decisions = (record.rejected_decisions or 0) + rejected
        self.db.flush()


class InsightRepository:
    """Repository for guardian insights"""

    def __init__(self, db: Session):
        self.db = db

    def create_insight(self, user_id: str, insight_type: str, action: str, content: str) -> InsightRecord:
        insight = InsightRecord(user_id=user_id, type=insight_type, action=action, content=content)
        self.db.add(insight)
        self.db.flush()  # Get ID without committing
        return insight
