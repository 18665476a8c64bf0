"""SQLAlchemy ORM models for the ledger, budgets, twin profiles and insights"""

import uuid
from sqlalchemy import Column, Boolean, DateTime, Integer, ForeignKey, Numeric, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class AccountRecord(Base):
    """User account holding a balance"""

    __tablename__ = "account"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False, default="")
    type = Column(Text, nullable=False, default="CURRENT")
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    transactions = relationship("TransactionRecord", back_populates="account", cascade="all, delete-orphan")


class TransactionRecord(Base):
    """Ledger entry; amount is non-negative and direction lives in type"""

    __tablename__ = "ledger_transaction"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(UUID(as_uuid=True), ForeignKey("account.id", ondelete="CASCADE"), nullable=True)
    type = Column(Text, nullable=False)  # INCOME | EXPENSE
    amount = Column(Numeric(18, 2), nullable=False)
    category = Column(Text, nullable=True)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(Text, nullable=False, default="COMPLETED")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    account = relationship("AccountRecord", back_populates="transactions")


class BudgetRecord(Base):
    """Monthly budget, one per user"""

    __tablename__ = "budget"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, unique=True)
    amount = Column(Numeric(18, 2), nullable=False)
    is_locked = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class FinancialProfileRecord(Base):
    """Personality quiz answers merged with computed behavior"""

    __tablename__ = "financial_profile"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, unique=True)
    happy_purchase = Column(Text, nullable=True)
    regret_purchase = Column(Text, nullable=True)
    financial_fear = Column(Text, nullable=True)
    saving_goal = Column(Text, nullable=True)
    money_feeling = Column(Text, nullable=True)
    risk_tolerance = Column(Text, nullable=False, default="MODERATE")
    spending_style = Column(Text, nullable=False, default="BALANCED")
    regret_threshold = Column(Numeric(18, 2), nullable=False, default=5000)
    emotional_triggers = Column(JSON, nullable=False, default=list)
    approved_decisions = Column(Integer, nullable=False, default=0)
    rejected_decisions = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class InsightRecord(Base):
    """User-facing note about an action the guardian took"""

    __tablename__ = "insight"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)  # BUDGET | SAVINGS
    action = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
