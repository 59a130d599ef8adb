from sqlalchemy.orm import Session
from focus_agent.models.focus import FocusSession, Distraction, FINISHED_STATUSES
from focus_agent.ml.suggestion_engine import round_half_up
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple
import pandas as pd

SESSION_COLUMNS = ["session_id", "started_at", "status", "actual_duration_seconds", "total_distractions"]

def get_finished_sessions_df(user_id: int, db: Session, since: Optional[datetime] = None) -> pd.DataFrame:
    """
    Load the user's completed/abandoned sessions into a DataFrame
    """
    query = db.query(FocusSession).filter(
        FocusSession.user_id == user_id,
        FocusSession.status.in_(FINISHED_STATUSES),
    )
    if since is not None:
        query = query.filter(FocusSession.started_at >= since)

    sessions = query.all()

    # Convert to DataFrame
    return sessions_to_frame([{
        'session_id': s.session_id,
        'started_at': s.started_at,
        'status': s.status,
        'actual_duration_seconds': s.actual_duration_seconds,
        'total_distractions': s.total_distractions,
    } for s in sessions])

def sessions_to_frame(rows: List[Dict]) -> pd.DataFrame:
    """
    Normalise raw session dicts: missing durations and distractions become 0
    """
    if not rows:
        return pd.DataFrame(columns=SESSION_COLUMNS)

    df = pd.DataFrame(rows)
    df['started_at'] = pd.to_datetime(df['started_at'])
    df['actual_duration_seconds'] = df['actual_duration_seconds'].fillna(0)
    df['total_distractions'] = df['total_distractions'].fillna(0).astype(int)
    df['completed'] = df['status'] == 'completed'
    df['date'] = df['started_at'].dt.date
    df['hour'] = df['started_at'].dt.hour
    return df

def calculate_streaks(dates: List[date], today: date) -> Tuple[int, int]:
    """
    Current and longest runs of consecutive days. The current streak only
    counts when the latest day is today or yesterday.
    """
    unique_dates = sorted(set(dates))
    if not unique_dates:
        return 0, 0

    longest = 0
    run = 1
    for prev, curr in zip(unique_dates, unique_dates[1:]):
        if (curr - prev).days == 1:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    longest = max(longest, run)

    is_active = unique_dates[-1] in (today, today - timedelta(days=1))
    current = run if is_active else 0
    return current, longest

def calculate_focus_metrics(df: pd.DataFrame, today: Optional[date] = None) -> Dict:
    """
    Overall totals, rates and streaks for a user's finished sessions
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    if df.empty:
        return {
            "totalSessions": 0,
            "completedSessions": 0,
            "abandonedSessions": 0,
            "completionRate": 0,
            "totalFocusMinutes": 0,
            "avgSessionMinutes": 0,
            "totalDistractions": 0,
            "avgDistractionsPerSession": 0,
            "currentStreak": 0,
            "longestStreak": 0,
        }

    total = len(df)
    completed = df[df['completed']]
    total_focus_seconds = float(df['actual_duration_seconds'].sum())
    total_distractions = int(df['total_distractions'].sum())

    current_streak, longest_streak = calculate_streaks(completed['date'].tolist(), today)

    return {
        "totalSessions": total,
        "completedSessions": len(completed),
        "abandonedSessions": int((df['status'] == 'abandoned').sum()),
        "completionRate": len(completed) / total * 100,
        "totalFocusMinutes": round_half_up(total_focus_seconds / 60),
        "avgSessionMinutes": round_half_up(total_focus_seconds / 60 / total),
        "totalDistractions": total_distractions,
        "avgDistractionsPerSession": round_half_up(total_distractions / total * 10) / 10,
        "currentStreak": current_streak,
        "longestStreak": longest_streak,
    }

def calculate_daily_stats(df: pd.DataFrame, days: int = 7, today: Optional[date] = None) -> List[Dict]:
    """
    Per-day counts for the last `days` days (today included), oldest first
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    by_date = {}
    for i in range(days):
        day = today - timedelta(days=i)
        by_date[day] = {
            "date": day.isoformat(),
            "sessions": 0,
            "completedSessions": 0,
            "focusMinutes": 0,
            "distractions": 0,
        }

    if not df.empty:
        for row in df.itertuples(index=False):
            stats = by_date.get(row.date)
            if stats is None:
                continue
            stats["sessions"] += 1
            if row.completed:
                stats["completedSessions"] += 1
            stats["focusMinutes"] += round_half_up(row.actual_duration_seconds / 60)
            stats["distractions"] += int(row.total_distractions)

    return [by_date[day] for day in sorted(by_date)]

def calculate_hourly_patterns(df: pd.DataFrame) -> List[Dict]:
    """
    Sessions and completion rate for each hour of the day (0-23)
    """
    if df.empty:
        grouped = pd.DataFrame(columns=['sessions', 'completed'])
    else:
        grouped = df.groupby('hour').agg(sessions=('status', 'size'), completed=('completed', 'sum'))

    patterns = []
    for hour in range(24):
        if hour in grouped.index:
            sessions = int(grouped.loc[hour, 'sessions'])
            completed = int(grouped.loc[hour, 'completed'])
        else:
            sessions, completed = 0, 0
        patterns.append({
            "hour": hour,
            "sessions": sessions,
            "completionRate": round_half_up(completed / sessions * 100) if sessions > 0 else 0,
        })
    return patterns

def get_distractions_df(user_id: int, db: Session) -> pd.DataFrame:
    """
    Load every distraction the user has logged, oldest first
    """
    distractions = db.query(Distraction).filter(
        Distraction.user_id == user_id
    ).order_by(Distraction.logged_at, Distraction.distraction_id).all()

    return pd.DataFrame(
        [{'distraction_type': d.distraction_type, 'logged_at': d.logged_at} for d in distractions],
        columns=['distraction_type', 'logged_at'],
    )

def calculate_distraction_breakdown(df: pd.DataFrame) -> List[Dict]:
    """
    Count and share of each distraction type, most frequent first.
    Ties keep the order in which the types first appeared.
    """
    if df.empty:
        return []

    counts = df.groupby('distraction_type', sort=False).size()
    counts = counts.sort_values(ascending=False, kind='stable')
    total = int(counts.sum())

    return [
        {
            "type": distraction_type,
            "count": int(count),
            "percentage": round_half_up(count / total * 100),
        }
        for distraction_type, count in counts.items()
    ]
