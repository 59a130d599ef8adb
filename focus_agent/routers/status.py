from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from typing import Optional
from focus_agent.database import get_db
from focus_agent.models.user import User
from focus_agent.models.focus import FocusSession
from focus_agent.auth.token import get_current_user
from focus_agent.schemas.focus import UserStatusResponse
import logging

logger = logging.getLogger(__name__)

NEW_USER_DAYS = 3

router = APIRouter(prefix="/user", tags=["users"])

def is_new_user(user_id: int, db: Session, now: Optional[datetime] = None) -> bool:
    """
    A user is new until their first session (of any status) is more than
    NEW_USER_DAYS old
    """
    if now is None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)

    earliest = db.query(func.min(FocusSession.started_at)).filter(
        FocusSession.user_id == user_id
    ).scalar()
    if earliest is None:
        return True
    return earliest > now - timedelta(days=NEW_USER_DAYS)

@router.get("/status", response_model=UserStatusResponse)
async def get_user_status(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Whether the user is still in their first days of usage
    """
    new_user = is_new_user(current_user.user_id, db)
    logger.debug(f"User {current_user.user_id} new user: {new_user}")
    return {"isNewUser": new_user}
