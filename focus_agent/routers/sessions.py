from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime, timezone
from focus_agent.database import get_db
from focus_agent.models.user import User
from focus_agent.models.focus import FocusSession, Distraction, FINISHED_STATUSES
from focus_agent.auth.token import get_current_user
from focus_agent.schemas.focus import (
    FocusSessionCreate, FocusSessionEnd, FocusSessionResponse, RecentSession,
    DistractionCreate, DistractionResponse
)
from focus_agent.ml.suggestion_engine import round_half_up
from focus_agent.monitoring import SESSION_COUNT, DISTRACTION_COUNT
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

def _to_naive_utc(value: datetime) -> datetime:
    # Timestamps are stored as naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

@router.post("", response_model=FocusSessionResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    session: FocusSessionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Start a focus session
    """
    started_at = _to_naive_utc(session.started_at) if session.started_at else _to_naive_utc(datetime.now(timezone.utc))

    new_session = FocusSession(
        user_id=current_user.user_id,
        started_at=started_at,
        planned_duration_seconds=session.planned_duration_seconds,
        status="active",
        total_distractions=0,
    )

    db.add(new_session)
    db.commit()
    db.refresh(new_session)

    SESSION_COUNT.labels("started").inc()
    return new_session

@router.put("/{session_id}", response_model=FocusSessionResponse)
async def end_session(
    session_id: int,
    update: FocusSessionEnd,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    End a focus session as completed or abandoned
    """
    session = db.query(FocusSession).filter(
        FocusSession.session_id == session_id,
        FocusSession.user_id == current_user.user_id
    ).first()
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    if session.status != "active":
        raise HTTPException(status_code=400, detail=f"Session already {session.status}")

    ended_at = _to_naive_utc(update.ended_at) if update.ended_at else _to_naive_utc(datetime.now(timezone.utc))

    session.status = update.status
    session.ended_at = ended_at
    if update.actual_duration_seconds is not None:
        session.actual_duration_seconds = update.actual_duration_seconds
    else:
        # Calculate actual duration from the session window
        elapsed = (ended_at - session.started_at).total_seconds()
        session.actual_duration_seconds = max(0, round_half_up(elapsed))
    if update.total_distractions is not None:
        session.total_distractions = update.total_distractions

    db.commit()
    db.refresh(session)

    SESSION_COUNT.labels(update.status).inc()
    logger.info(f"Session {session.session_id} {session.status} after {session.actual_duration_seconds}s")
    return session

@router.get("/recent", response_model=List[RecentSession])
async def get_recent_sessions(
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get the most recent finished sessions, newest first
    """
    sessions = db.query(FocusSession).filter(
        FocusSession.user_id == current_user.user_id,
        FocusSession.status.in_(FINISHED_STATUSES)
    ).order_by(FocusSession.started_at.desc(), FocusSession.session_id.desc()).limit(limit).all()

    return [
        RecentSession(
            id=s.session_id,
            startedAt=s.started_at,
            status=s.status,
            durationMinutes=round_half_up((s.actual_duration_seconds or 0) / 60),
            distractions=s.total_distractions or 0,
        )
        for s in sessions
    ]

@router.post("/{session_id}/distractions", response_model=DistractionResponse, status_code=status.HTTP_201_CREATED)
async def log_distraction(
    session_id: int,
    distraction: DistractionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Log a distraction against an active session and bump its running count
    """
    session = db.query(FocusSession).filter(
        FocusSession.session_id == session_id,
        FocusSession.user_id == current_user.user_id
    ).first()
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    if session.status != "active":
        raise HTTPException(status_code=400, detail=f"Session already {session.status}")

    entry = Distraction(
        session_id=session.session_id,
        user_id=current_user.user_id,
        distraction_type=distraction.distraction_type,
        time_into_session_seconds=distraction.time_into_session_seconds,
        time_remaining_seconds=distraction.time_remaining_seconds,
        logged_at=_to_naive_utc(datetime.now(timezone.utc)),
    )
    session.total_distractions = (session.total_distractions or 0) + 1

    db.add(entry)
    db.commit()
    db.refresh(entry)

    DISTRACTION_COUNT.inc()
    logger.info(f"Distraction '{entry.distraction_type}' logged on session {session.session_id}")
    return DistractionResponse(
        distraction_id=entry.distraction_id,
        session_id=entry.session_id,
        distraction_type=entry.distraction_type,
        time_into_session_seconds=entry.time_into_session_seconds,
        time_remaining_seconds=entry.time_remaining_seconds,
        logged_at=entry.logged_at,
        total_distractions=session.total_distractions,
    )
