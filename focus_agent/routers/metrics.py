from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime, timedelta, timezone
from focus_agent.database import get_db
from focus_agent.models.user import User
from focus_agent.auth.token import get_current_user
from focus_agent.schemas.focus import FocusMetricsResponse, DailyStats, HourlyPattern, DistractionBreakdown
from focus_agent.ml.focus_metrics import (
    get_finished_sessions_df, calculate_focus_metrics,
    calculate_daily_stats, calculate_hourly_patterns,
    get_distractions_df, calculate_distraction_breakdown
)

router = APIRouter(prefix="/metrics", tags=["metrics"])

@router.get("/summary", response_model=FocusMetricsResponse)
async def get_focus_metrics(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Totals, completion rate and streaks over all finished sessions"""
    df = get_finished_sessions_df(current_user.user_id, db)
    return calculate_focus_metrics(df)

@router.get("/daily", response_model=List[DailyStats])
async def get_daily_stats(
    days: int = Query(7, ge=1, le=90),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Per-day stats for the last `days` days"""
    now = datetime.now(timezone.utc)
    since = (now - timedelta(days=days)).replace(tzinfo=None)
    df = get_finished_sessions_df(current_user.user_id, db, since=since)
    return calculate_daily_stats(df, days=days, today=now.date())

@router.get("/hourly", response_model=List[HourlyPattern])
async def get_hourly_patterns(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Session count and completion rate by hour of day"""
    df = get_finished_sessions_df(current_user.user_id, db)
    return calculate_hourly_patterns(df)

@router.get("/distractions", response_model=List[DistractionBreakdown])
async def get_distraction_breakdown(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Logged distractions grouped by type, most frequent first"""
    df = get_distractions_df(current_user.user_id, db)
    return calculate_distraction_breakdown(df)
