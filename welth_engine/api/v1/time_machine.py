"""POST /v1/time-machine - alternate timeline simulation"""

import time
import logging
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from welth_engine.api.v1.schemas import QuickScenarioSchema, TimelineRequest, TimelineResponse, TimelineResultSchema
from welth_engine.api.dependencies import get_now, get_request_id, get_user_id
from welth_engine.domain.exceptions import InvalidTransactionDataError
from welth_engine.domain.models import Scenario
from welth_engine.domain.time_machine import calculate_alternate_timeline, default_start_date, get_quick_scenarios
from welth_engine.infrastructure.database.repositories import LedgerRepository
from welth_engine.infrastructure.database.session import get_db
from welth_engine.infrastructure.observability.logging import log_timeline
from welth_engine.infrastructure.observability.metrics import record_scenario

router = APIRouter()


@router.get("/time-machine/scenarios", response_model=List[QuickScenarioSchema])
def list_quick_scenarios():
    """Preset 'what if' scenarios"""
    return get_quick_scenarios()


@router.post("/time-machine", response_model=TimelineResponse)
def simulate_timeline(
    request_body: TimelineRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """
    Compare the user's actual balance with a counterfactual one.

    Unknown scenario kinds are not rejected; they produce an unchanged
    timeline with a generic message.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    body = request_body.scenario

    scenario = Scenario(
        kind=body.kind,
        amount=body.amount,
        start_date=body.start_date or default_start_date(now),
        category=body.category,
    )

    try:
        ledger = LedgerRepository(db)
        transactions = ledger.get_transactions(user_id)
        accounts = ledger.get_accounts(user_id)

        result = calculate_alternate_timeline(transactions, accounts, scenario, now=now)

    except InvalidTransactionDataError as e:
        logging.warning(f"Invalid ledger data: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_scenario(scenario.kind)
    log_timeline(request_id, user_id, scenario.kind, result.impact.months_passed, (time.time() - start_time) * 1000)

    return TimelineResponse(result=TimelineResultSchema.model_validate(result))
