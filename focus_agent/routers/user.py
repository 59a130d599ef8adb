import logging
from fastapi import APIRouter, Depends
from focus_agent.models.user import User
from focus_agent.auth.token import get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
async def get_user_info(current_user: User = Depends(get_current_user)):
    """
    Get user information.
    """
    user_info = {
        "user_id": current_user.user_id,
        "name": current_user.name,
        "email": current_user.email,
    }

    logging.info(f"User info retrieved for: {current_user.email}")
    return user_info
