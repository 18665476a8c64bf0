"""Financial twin endpoints - personality profile and purchase advice"""

import time
import logging
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from welth_engine.api.v1.schemas import (
    AdviceSchema,
    AskRequest,
    AskResponse,
    BehaviorSchema,
    ProfileAnswers,
    ProfileResponse,
    ProfileSchema,
    QuestionSchema,
)
from welth_engine.api.dependencies import get_now, get_request_id, get_user_id
from welth_engine.config import settings
from welth_engine.domain.behavior import PERSONALITY_QUESTIONS, analyze_spending_behavior
from welth_engine.domain.exceptions import InvalidTransactionDataError, ProfileNotFoundError
from welth_engine.domain.twin import generate_twin_advice
from welth_engine.infrastructure.database.repositories import LedgerRepository, ProfileRepository
from welth_engine.infrastructure.database.session import get_db
from welth_engine.infrastructure.observability.logging import log_advice
from welth_engine.infrastructure.observability.metrics import record_advice

router = APIRouter()


@router.get("/twin/questions", response_model=List[QuestionSchema])
def get_personality_questions():
    """Personality quiz shown before the twin can give advice"""
    return PERSONALITY_QUESTIONS


@router.get("/twin/profile", response_model=ProfileResponse)
def get_profile(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    profile = ProfileRepository(db).get(user_id)
    return ProfileResponse(
        profile=ProfileSchema.model_validate(profile) if profile else None,
        has_profile=profile is not None,
    )


@router.post("/twin/profile", response_model=ProfileResponse)
def save_profile(
    answers: ProfileAnswers,
    request: Request,
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """
    Store quiz answers together with behavior freshly derived from the ledger.

    Behavior is always recomputed from scratch; a previously stored regret
    threshold is not carried over.
    """
    request_id = get_request_id(request)

    try:
        transactions = LedgerRepository(db).get_transactions(user_id)
        behavior = analyze_spending_behavior(transactions, None, now=now)

        profile = ProfileRepository(db).upsert(user_id, answers.model_dump(exclude_unset=True), behavior)
        db.commit()

    except InvalidTransactionDataError as e:
        db.rollback()
        logging.warning(f"Invalid ledger data: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ProfileResponse(profile=ProfileSchema.model_validate(profile), has_profile=True)


@router.post("/twin/ask", response_model=AskResponse)
def ask_twin(
    request_body: AskRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db),
):
    """
    Ask the twin whether to make a purchase.

    Flow:
    1. Load the user's profile (quiz must be completed first)
    2. Load the most recent transactions
    3. Run the advice rule cascade
    4. Bump the profile's approved/rejected counters
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        profiles = ProfileRepository(db)
        profile = profiles.get(user_id)
        if profile is None:
            raise ProfileNotFoundError("Please complete your personality quiz first")

        transactions = LedgerRepository(db).get_transactions(user_id, limit=settings.twin_transaction_window)
        decision = generate_twin_advice(request_body.question, request_body.amount, profile, transactions, now=now)

        profiles.record_decision(user_id, decision.verdict)
        db.commit()

    except ProfileNotFoundError as e:
        raise HTTPException(status_code=400, detail={"error": str(e), "needs_profile": True})

    except InvalidTransactionDataError as e:
        db.rollback()
        logging.warning(f"Invalid ledger data: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_advice(decision.verdict.value)
    log_advice(
        request_id, user_id, decision.verdict.value, decision.confidence, decision.similar_purchase_count, duration_ms
    )

    return AskResponse(
        advice=AdviceSchema(
            decision=decision.verdict,
            reasoning=decision.reasoning,
            confidence=decision.confidence,
            similar_purchases=decision.similar_purchase_count,
            behavior=BehaviorSchema.model_validate(decision.behavior),
        )
    )
