from sqlalchemy import Column, String, Integer, TIMESTAMP, ForeignKey, JSON, text
from focus_agent.database import Base
import datetime

FINISHED_STATUSES = ("completed", "abandoned")

def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)

class FocusSession(Base):
    """
    One timed focus interval. Durations are stored in seconds.
    """
    __tablename__ = "focus_sessions"

    session_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), index=True, nullable=False)

    # Session timing info
    started_at = Column(TIMESTAMP, nullable=False, default=_utcnow)
    ended_at = Column(TIMESTAMP, nullable=True) # Null while active
    planned_duration_seconds = Column(Integer, nullable=False)
    actual_duration_seconds = Column(Integer, nullable=True) # Null until ended

    status = Column(String(20), nullable=False, default="active") # active, completed, abandoned
    total_distractions = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

class UserPreferences(Base):
    """
    Onboarding answers and timer defaults, one row per user
    """
    __tablename__ = "user_preferences"

    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)

    coach_personality = Column(String(20), nullable=False)
    focus_domains = Column(JSON, nullable=False, default=list)
    distraction_triggers = Column(JSON, nullable=False, default=list)
    custom_focus_domain = Column(String, nullable=True)

    # Timer defaults
    default_focus_minutes = Column(Integer, nullable=False, default=25)
    default_break_minutes = Column(Integer, nullable=False, default=5)
    session_rules = Column(JSON, nullable=False, default=list)
    max_sessions_per_day = Column(Integer, nullable=True)

    preferred_focus_time = Column(String(20), nullable=False)
    success_goals = Column(JSON, nullable=False, default=list)

    completed_at = Column(TIMESTAMP, nullable=True)
    updated_at = Column(TIMESTAMP, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "coach_personality": self.coach_personality,
            "focus_domains": self.focus_domains,
            "distraction_triggers": self.distraction_triggers,
            "custom_focus_domain": self.custom_focus_domain,
            "default_focus_minutes": self.default_focus_minutes,
            "default_break_minutes": self.default_break_minutes,
            "session_rules": self.session_rules,
            "max_sessions_per_day": self.max_sessions_per_day,
            "preferred_focus_time": self.preferred_focus_time,
            "success_goals": self.success_goals,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

class Distraction(Base):
    """
    A distraction logged during a focus session
    """
    __tablename__ = "distractions"

    distraction_id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("focus_sessions.session_id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), index=True, nullable=False)

    distraction_type = Column(String(50), nullable=False) # e.g. "Social Media", "Coworker"
    time_into_session_seconds = Column(Integer, nullable=False, default=0)
    time_remaining_seconds = Column(Integer, nullable=True)

    logged_at = Column(TIMESTAMP, nullable=False, default=_utcnow)
