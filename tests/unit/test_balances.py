"""Unit tests for balance reconstruction and cash-flow forecasting"""

from datetime import timedelta
from decimal import Decimal
from welth_engine.domain.balances import (
    balance_at,
    calculate_historical_balance,
    predict_cash_flow,
    total_balance,
)


def test_total_balance_includes_negative_accounts(make_account):
    """Credit accounts with negative balances reduce the total"""
    accounts = [make_account(5000), make_account(-1200, "CREDIT"), make_account(300, "SAVINGS")]
    assert total_balance(accounts) == Decimal("4100")


def test_total_balance_no_accounts():
    assert total_balance([]) == 0


def test_historical_balance_shape_and_order(now, make_txn):
    """days+1 points from -days to 0, chronological"""
    history = calculate_historical_balance([make_txn(2, 100)], Decimal("1000"), days=7, now=now)

    assert len(history) == 8
    assert [p.day_offset for p in history] == list(range(-7, 1))
    assert history[0].date == (now - timedelta(days=7)).date()
    assert history[-1].date == now.date()


def test_historical_balance_today_equals_current_balance(now, make_txn):
    transactions = [make_txn(1, 250), make_txn(3, 4000, "INCOME"), make_txn(12, 75)]
    history = calculate_historical_balance(transactions, Decimal("2500"), days=30, now=now)

    assert history[-1].balance == Decimal("2500")


def test_historical_balance_today_ignores_future_dated_transactions(now, make_txn):
    """A scheduled expense later today does not move day 0 off the current balance"""
    history = calculate_historical_balance([make_txn(-0.5, 300)], Decimal("1000"), days=3, now=now)

    assert history[-1].balance == Decimal("1000")
    # Earlier days still undo it
    assert history[-2].balance == Decimal("1300")


def test_historical_balance_undoes_later_transactions(now, make_txn):
    """Income after a day is subtracted, expenses after it are added back"""
    transactions = [
        make_txn(5, 3000, "INCOME", "Salary"),
        make_txn(2, 500, "EXPENSE", "Food"),
    ]
    history = calculate_historical_balance(transactions, Decimal("1000"), days=10, now=now)
    by_offset = {p.day_offset: p.balance for p in history}

    assert by_offset[0] == Decimal("1000")
    assert by_offset[-1] == Decimal("1000")
    # Before the expense: add it back
    assert by_offset[-3] == Decimal("1500")
    # Before the salary: remove it too, going negative
    assert by_offset[-6] == Decimal("-1500")
    assert by_offset[-10] == Decimal("-1500")


def test_historical_balance_empty_ledger_is_flat(now):
    history = calculate_historical_balance([], Decimal("750.50"), days=5, now=now)
    assert all(p.balance == Decimal("750.50") for p in history)


def test_balance_at_is_order_independent(now, make_txn):
    """Each day is computed on its own; evaluation order does not matter"""
    transactions = [make_txn(i, 10 * i) for i in range(1, 6)]
    moments = [now - timedelta(days=d) for d in (4, 0, 2, 5, 1)]

    forward = [balance_at(Decimal("100"), transactions, m) for m in moments]
    backward = [balance_at(Decimal("100"), transactions, m) for m in reversed(moments)]

    assert forward == list(reversed(backward))


def test_forecast_day_zero_equals_total_balance(now, make_account, make_txn):
    accounts = [make_account("1234.56"), make_account("-34.56", "CREDIT")]
    transactions = [make_txn(3, 900, "INCOME"), make_txn(4, 120)]

    forecast = predict_cash_flow(transactions, accounts, days=30, now=now)

    assert forecast[0].day_offset == 0
    assert forecast[0].predicted == Decimal("1200.00")


def test_forecast_linear_from_trailing_window(now, make_account, make_txn):
    """Net of 3000 income - 1500 expense over 30 days = +50/day"""
    accounts = [make_account(10000)]
    transactions = [
        make_txn(10, 3000, "INCOME", "Salary"),
        make_txn(5, 1500, "EXPENSE", "Rent"),
        make_txn(45, 99999, "EXPENSE", "Old"),  # outside the 30-day window
    ]

    forecast = predict_cash_flow(transactions, accounts, days=10, now=now)

    assert len(forecast) == 11
    assert forecast[1].predicted == Decimal("10050")
    assert forecast[10].predicted == Decimal("10500")
    assert forecast[10].date == (now + timedelta(days=10)).date()


def test_forecast_no_recent_transactions_is_flat(now, make_account, make_txn):
    forecast = predict_cash_flow([make_txn(60, 500)], [make_account(2000)], days=5, now=now)
    assert [p.predicted for p in forecast] == [Decimal("2000")] * 6


def test_forecast_no_accounts_no_transactions(now):
    """Zero accounts give a flat zero series, never an error"""
    forecast = predict_cash_flow([], [], days=3, now=now)
    assert [p.predicted for p in forecast] == [0, 0, 0, 0]
