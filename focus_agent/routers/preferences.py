from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from focus_agent.database import get_db
from focus_agent.models.user import User
from focus_agent.models.focus import UserPreferences
from focus_agent.auth.token import get_current_user
from focus_agent.schemas.preferences import (
    PreferencesPayload, validate_partial_preferences, first_error_message
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user/preferences", tags=["preferences"])

@router.get("")
async def get_preferences(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get the user's preferences, or null before onboarding
    """
    prefs = db.query(UserPreferences).filter(UserPreferences.user_id == current_user.user_id).first()
    if prefs is None:
        return None
    return prefs.to_dict()

@router.post("")
async def save_preferences(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Save the full onboarding payload, or merge a partial update into
    existing preferences
    """
    try:
        body = await request.json()
    except ValueError:
        body = None

    existing = db.query(UserPreferences).filter(UserPreferences.user_id == current_user.user_id).first()

    try:
        payload = PreferencesPayload.model_validate(body)
    except ValidationError as e:
        full_error = first_error_message(e)
    else:
        # Upsert the full onboarding answers
        values = payload.model_dump()
        if existing is None:
            existing = UserPreferences(user_id=current_user.user_id)
            db.add(existing)
        for field, value in values.items():
            setattr(existing, field, value)
        existing.completed_at = datetime.now(timezone.utc).replace(tzinfo=None)

        db.commit()
        logger.info(f"Saved onboarding preferences for user {current_user.user_id}")
        return {"ok": True}

    partial = validate_partial_preferences(body)
    if not partial:
        raise HTTPException(status_code=400, detail=full_error or "Invalid payload")

    if existing is None:
        raise HTTPException(
            status_code=400,
            detail="No existing preferences; send full onboarding payload first."
        )

    for field, value in partial.items():
        setattr(existing, field, value)

    db.commit()
    logger.info(f"Updated preferences {sorted(partial)} for user {current_user.user_id}")
    return {"ok": True}
