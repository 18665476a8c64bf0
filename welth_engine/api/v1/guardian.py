"""POST /v1/guardian/run - budget lock and auto-savings sweep"""

import time
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from welth_engine.api.v1.schemas import GuardianActionSchema, GuardianResponse, GuardianStatsSchema
from welth_engine.api.dependencies import get_alert_client, get_now, get_request_id, get_user_id
from welth_engine.config import settings
from welth_engine.domain.exceptions import AlertDeliveryError, InvalidTransactionDataError, InvalidTransferError
from welth_engine.domain.models import GuardianActionType
from welth_engine.domain.savings import evaluate_guardian
from welth_engine.infrastructure.clients.alerts import AlertClient, build_alert
from welth_engine.infrastructure.database.repositories import InsightRepository, LedgerRepository
from welth_engine.infrastructure.database.session import get_db
from welth_engine.infrastructure.observability.logging import log_guardian_action
from welth_engine.infrastructure.observability.metrics import record_guardian_action

router = APIRouter()


async def deliver_alert(alert_client: AlertClient, payload: Dict[str, Any]) -> None:
    """Background delivery; a failed alert never affects the guardian outcome"""
    try:
        await alert_client.send_alert(payload)
    except AlertDeliveryError as e:
        logging.warning(f"Guardian alert dropped: {e}", extra={"user_id": payload["user_id"]})


@router.post("/guardian/run", response_model=GuardianResponse)
async def run_guardian(
    request: Request,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
    alert_client: AlertClient = Depends(get_alert_client),
):
    """
    Protect the user's budget or grow their savings.

    Flow:
    1. Row-lock the budget and load recent transactions and accounts
    2. Evaluate the guardian decision (pure engine call)
    3. Lock the budget, or transfer the safe amount into savings
    4. Record an insight and schedule an alert
    Runs for the same user are serialized by the budget row lock.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        ledger = LedgerRepository(db)
        budget = ledger.get_budget(user_id, for_update=True)
        transactions = ledger.get_transactions(user_id, limit=settings.guardian_transaction_window)
        accounts = ledger.get_accounts(user_id)

        decision = evaluate_guardian(
            transactions,
            accounts,
            budget,
            now=now,
            lock_threshold=Decimal(str(settings.guardian_lock_threshold)),
        )
        action = decision.action
        stats = decision.stats
        action_taken = None
        alert = None

        if action.type == GuardianActionType.LOCKED_BUDGET:
            ledger.lock_budget(user_id)
            stats.is_locked = True
            insight = InsightRepository(db).create_insight(
                user_id,
                "BUDGET",
                action.type.value,
                "Safety Guardian locked your budget to protect you from overspending. "
                f"You've used {stats.budget_usage:.1f}% of your monthly budget.",
            )
            alert = build_alert(
                user_id,
                "🛡️ Safety Guardian Alert - Budget Locked",
                "Budget Locked",
                f"You've used {stats.budget_usage:.1f}% of your monthly budget",
                "To protect you from overspending, I've temporarily locked your budget. "
                "You can unlock it anytime from the dashboard.",
            )
            action_taken = GuardianActionSchema(type=action.type, reason=action.reason, insight_id=str(insight.id))

        elif action.type == GuardianActionType.AUTO_SAVED:
            ledger.transfer_to_savings(user_id, action.source_account_id, action.amount, now)
            insight = InsightRepository(db).create_insight(
                user_id,
                "SAVINGS",
                action.type.value,
                f"Smart move! I automatically saved ₹{action.amount} to your savings account. "
                "Your finances are healthy enough to grow your savings.",
            )
            alert = build_alert(
                user_id,
                "💰 Auto-Savings Success!",
                f"Saved ₹{action.amount}",
                "Your finances are healthy",
                f"I noticed you have some extra buffer, so I moved ₹{action.amount} to your savings account. "
                "Keep up the great work!",
            )
            action_taken = GuardianActionSchema(
                type=action.type, reason=action.reason, amount=action.amount, insight_id=str(insight.id)
            )

        db.commit()

    except InvalidTransactionDataError as e:
        db.rollback()
        logging.warning(f"Invalid ledger data: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=422, detail=str(e))

    except InvalidTransferError as e:
        db.rollback()
        logging.warning(f"Auto-savings transfer refused: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    if alert is not None:
        background_tasks.add_task(deliver_alert, alert_client, alert)

    duration_ms = (time.time() - start_time) * 1000
    record_guardian_action(action.type.value, action.amount)
    log_guardian_action(request_id, user_id, action.type.value, action.amount, float(stats.budget_usage), duration_ms)

    return GuardianResponse(action_taken=action_taken, stats=GuardianStatsSchema.model_validate(stats))
