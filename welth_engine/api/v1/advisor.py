"""GET /v1/advisor/cash-flow - balance history, forecast and safe-to-save amount"""

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from welth_engine.api.v1.schemas import BalancePointSchema, CashFlowResponse, ForecastPointSchema
from welth_engine.api.dependencies import get_now, get_request_id, get_user_id
from welth_engine.config import settings
from welth_engine.domain.balances import calculate_historical_balance, predict_cash_flow, total_balance
from welth_engine.domain.exceptions import InvalidTransactionDataError
from welth_engine.domain.savings import calculate_safe_to_save
from welth_engine.infrastructure.database.repositories import LedgerRepository
from welth_engine.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/advisor/cash-flow", response_model=CashFlowResponse)
def get_cash_flow(
    request: Request,
    days: int = Query(settings.default_forecast_days, ge=1, le=365, description="Window length in days"),
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """
    Past and projected balance for the advisor chart.

    Returns:
        days+1 reconstructed points, days+1 forecast points and the amount
        that could safely be moved to savings today
    """
    request_id = get_request_id(request)

    try:
        ledger = LedgerRepository(db)
        transactions = ledger.get_transactions(user_id)
        accounts = ledger.get_accounts(user_id)
        budget = ledger.get_budget(user_id)

        balance = total_balance(accounts)
        historical = calculate_historical_balance(transactions, balance, days, now=now)
        predicted = predict_cash_flow(transactions, accounts, days, now=now)
        safe_amount = calculate_safe_to_save(transactions, accounts, budget, now=now)

    except InvalidTransactionDataError as e:
        logging.warning(f"Invalid ledger data: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=422, detail=str(e))

    return CashFlowResponse(
        total_balance=balance,
        historical=[BalancePointSchema.model_validate(p) for p in historical],
        predicted=[ForecastPointSchema.model_validate(p) for p in predicted],
        safe_to_save=safe_amount,
    )
