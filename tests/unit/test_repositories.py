"""Unit tests for ledger and profile repositories"""

import pytest
from decimal import Decimal
from sqlalchemy.dialects import postgresql
from welth_engine.domain.exceptions import InvalidTransactionDataError, InvalidTransferError
from welth_engine.domain.models import BehaviorProfile, RiskTolerance, SpendingStyle, TransactionType, Verdict
from welth_engine.infrastructure.database.models import AccountRecord, TransactionRecord
from welth_engine.infrastructure.database.repositories import (
    LedgerRepository,
    ProfileRepository,
    to_transaction,
)


def test_get_transactions_newest_first_with_limit(db, seed_ledger):
    seed_ledger(
        "u1",
        transactions=[(10, 100, "EXPENSE", "Food"), (1, 200, "INCOME", None), (5, 300, "EXPENSE", "Rent")],
    )

    transactions = LedgerRepository(db).get_transactions("u1", limit=2)

    assert [t.amount for t in transactions] == [Decimal("200"), Decimal("300")]
    assert transactions[0].type == TransactionType.INCOME


def test_get_transactions_scoped_to_user(db, seed_ledger):
    seed_ledger("u1", transactions=[(1, 100, "EXPENSE", None)])
    seed_ledger("u2", transactions=[(1, 999, "EXPENSE", None)])

    assert [t.amount for t in LedgerRepository(db).get_transactions("u1")] == [Decimal("100")]


def test_to_transaction_rejects_malformed_rows(now):
    with pytest.raises(InvalidTransactionDataError):
        to_transaction(TransactionRecord(type="EXPENSE", amount=Decimal("1"), date=None))
    with pytest.raises(InvalidTransactionDataError):
        to_transaction(TransactionRecord(type="TRANSFER", amount=Decimal("1"), date=now))
    with pytest.raises(InvalidTransactionDataError):
        to_transaction(TransactionRecord(type="EXPENSE", amount=Decimal("-5"), date=now))


def test_budget_lock(db, seed_ledger):
    seed_ledger("u1", budget=(1000, False))
    ledger = LedgerRepository(db)

    assert ledger.get_budget("u1").is_locked is False
    ledger.lock_budget("u1")
    db.commit()

    assert ledger.get_budget("u1").is_locked is True
    assert ledger.get_budget("nobody") is None


def test_transfer_to_savings_creates_account(db, seed_ledger, now):
    seed_ledger("u1", accounts=[(4000, "CURRENT", True)])
    ledger = LedgerRepository(db)
    source = ledger.get_accounts("u1")[0]

    savings = ledger.transfer_to_savings("u1", source.account_id, 150, now)
    db.commit()

    balances = {a.type.value: a.balance for a in ledger.get_accounts("u1")}
    assert balances == {"CURRENT": Decimal("3850"), "SAVINGS": Decimal("150")}
    assert savings.name == "Auto-Savings"

    recorded = db.query(TransactionRecord).filter(TransactionRecord.account_id == savings.id).one()
    assert recorded.type == "INCOME"
    assert recorded.description == "Auto-Savings Transfer"


def test_transfer_to_savings_reuses_existing_account(db, seed_ledger, now):
    seed_ledger("u1", accounts=[(4000, "CURRENT", True), (500, "SAVINGS", False)])
    ledger = LedgerRepository(db)
    source = next(a for a in ledger.get_accounts("u1") if a.type.value == "CURRENT")

    ledger.transfer_to_savings("u1", source.account_id, 100, now)
    db.commit()

    assert db.query(AccountRecord).filter(AccountRecord.user_id == "u1").count() == 2
    savings = next(a for a in ledger.get_accounts("u1") if a.type.value == "SAVINGS")
    assert savings.balance == Decimal("600")


def test_transfer_to_savings_refuses_savings_source(db, seed_ledger, now):
    seed_ledger("u1", accounts=[(5000, "SAVINGS", False)])
    ledger = LedgerRepository(db)
    savings = ledger.get_accounts("u1")[0]

    with pytest.raises(InvalidTransferError):
        ledger.transfer_to_savings("u1", savings.account_id, 150, now)
    db.rollback()

    assert [a.balance for a in ledger.get_accounts("u1")] == [Decimal("5000")]
    assert db.query(TransactionRecord).filter(TransactionRecord.user_id == "u1").count() == 0


def test_transfer_to_savings_refuses_other_users_account(db, seed_ledger, now):
    seed_ledger("u2", accounts=[(5000, "CURRENT", True)])
    other = LedgerRepository(db).get_accounts("u2")[0]

    with pytest.raises(InvalidTransferError):
        LedgerRepository(db).transfer_to_savings("u1", other.account_id, 150, now)


def test_budget_query_row_locks_for_update(db):
    ledger = LedgerRepository(db)

    locked = ledger.budget_query("u1", for_update=True).statement.compile(dialect=postgresql.dialect())
    plain = ledger.budget_query("u1").statement.compile(dialect=postgresql.dialect())

    assert "FOR UPDATE" in str(locked)
    assert "FOR UPDATE" not in str(plain)


def test_profile_upsert_merges_answers_and_behavior(db):
    profiles = ProfileRepository(db)
    behavior = BehaviorProfile(
        risk_tolerance=RiskTolerance.HIGH,
        spending_style=SpendingStyle.IMPULSIVE,
        regret_threshold=Decimal("750"),
        emotional_triggers=["Food", "Travel"],
    )

    created = profiles.upsert("u1", {"happy_purchase": "Gym membership", "saving_goal": "House"}, behavior)
    db.commit()
    assert created.happy_purchase == "Gym membership"
    assert created.risk_tolerance == RiskTolerance.HIGH

    updated = profiles.upsert("u1", {"saving_goal": "Laptop"}, behavior)
    db.commit()
    assert updated.happy_purchase == "Gym membership"
    assert updated.saving_goal == "Laptop"
    assert updated.emotional_triggers == ["Food", "Travel"]
    assert updated.regret_threshold == Decimal("750")


def test_profile_record_decision_counters(db):
    profiles = ProfileRepository(db)
    behavior = BehaviorProfile(RiskTolerance.LOW, SpendingStyle.CAUTIOUS, Decimal("100"), [])
    profiles.upsert("u1", {}, behavior)

    profiles.record_decision("u1", Verdict.APPROVE)
    profiles.record_decision("u1", Verdict.WAIT)
    profiles.record_decision("u1", Verdict.WAIT)
    profiles.record_decision("u1", Verdict.CONSIDER)
    db.commit()

    profile = profiles.get("u1")
    assert profile.approved_decisions == 1
    assert profile.rejected_decisions == 2


def test_profile_get_missing(db):
    assert ProfileRepository(db).get("nobody") is None
