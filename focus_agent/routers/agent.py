from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional
from focus_agent.database import get_db
from focus_agent.models.user import User
from focus_agent.auth.token import get_current_user
from focus_agent.schemas.focus import SessionSuggestionsResponse
from focus_agent.ml.recommendation import get_session_suggestions
from focus_agent.monitoring import SUGGESTION_COUNT, SUGGESTION_OUTCOME, SUGGESTION_LATENCY, TimerContextManager
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agent", tags=["agent"])

@router.get("/session-suggestions", response_model=SessionSuggestionsResponse)
async def get_session_suggestions_endpoint(
    segment: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Suggest the next focus duration from the user's last 7 finished sessions.

    `segment` (e.g. deep_work, light_admin, late_night) is accepted but does
    not filter anything yet.
    """
    SUGGESTION_COUNT.inc()

    try:
        with TimerContextManager(SUGGESTION_LATENCY, ["suggestion"]):
            result = get_session_suggestions(current_user.user_id, db, segment=segment)
    except Exception:
        logger.exception(f"Failed to get session suggestions for user {current_user.user_id}")
        raise HTTPException(status_code=500, detail="Failed to get suggestions")

    SUGGESTION_OUTCOME.labels(result.rule).inc()
    return result.to_response()
