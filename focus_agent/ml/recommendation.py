from sqlalchemy.orm import Session
from focus_agent.models.focus import FocusSession, UserPreferences, FINISHED_STATUSES
from focus_agent.ml.suggestion_engine import (
    SessionRecord, SuggestionResult, compute, RECENT_SESSIONS_LIMIT
)
from typing import List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

DEFAULT_FOCUS_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5

def get_recent_sessions(user_id: int, db: Session, limit: int = RECENT_SESSIONS_LIMIT):
    """
    Get the user's most recent finished sessions, newest first
    """
    return (
        db.query(FocusSession)
        .filter(FocusSession.user_id == user_id)
        .filter(FocusSession.status.in_(FINISHED_STATUSES))
        .order_by(FocusSession.started_at.desc(), FocusSession.session_id.desc())
        .limit(limit)
        .all()
    )

def get_focus_defaults(user_id: int, db: Session) -> Tuple[int, int]:
    """
    Get (default_focus_minutes, default_break_minutes) for the user
    """
    prefs = db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
    if prefs is None:
        return DEFAULT_FOCUS_MINUTES, DEFAULT_BREAK_MINUTES

    focus = prefs.default_focus_minutes if prefs.default_focus_minutes is not None else DEFAULT_FOCUS_MINUTES
    break_minutes = prefs.default_break_minutes if prefs.default_break_minutes is not None else DEFAULT_BREAK_MINUTES
    return focus, break_minutes

def session_records_from_rows(rows) -> List[SessionRecord]:
    """
    Convert stored sessions into engine records, preserving order.

    Missing durations count as zero. Rows with negative or non-finite
    durations, or a status other than completed/abandoned, are skipped.
    """
    records = []
    for row in rows:
        try:
            records.append(SessionRecord(
                planned_duration_seconds=row.planned_duration_seconds or 0,
                actual_duration_seconds=row.actual_duration_seconds or 0,
                status=row.status,
            ))
        except ValueError as e:
            logger.warning(f"Skipping session {row.session_id} for suggestions: {e}")
    return records

def get_session_suggestions(user_id: int, db: Session, segment: Optional[str] = None) -> SuggestionResult:
    """
    Load history and preferences for a user and run the suggestion engine
    """
    if segment:
        # Baselines (deep_work, light_admin, late_night) need task_type / energy_level /
        # time_of_day on sessions; until then every segment sees the same history
        logger.debug(f"Segment '{segment}' requested for user {user_id}; using all recent sessions")

    rows = get_recent_sessions(user_id, db)
    default_focus, default_break = get_focus_defaults(user_id, db)
    records = session_records_from_rows(rows)

    result = compute(records, default_focus, default_break)

    logger.info(
        f"Session suggestion for user {user_id}: {result.suggested_duration_minutes} min "
        f"(default {default_focus}, rule {result.rule}, {result.session_count_used} sessions)"
    )
    return result
