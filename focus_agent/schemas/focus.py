from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

class FocusSessionCreate(BaseModel):
    planned_duration_seconds: int = Field(..., ge=0, description="Planned duration in seconds")
    started_at: Optional[datetime] = None

class FocusSessionEnd(BaseModel):
    status: Literal["completed", "abandoned"]
    ended_at: Optional[datetime] = None
    actual_duration_seconds: Optional[int] = Field(None, ge=0, description="Derived from ended_at when omitted")
    total_distractions: Optional[int] = Field(None, ge=0)

class FocusSessionResponse(BaseModel):
    session_id: int
    user_id: int
    started_at: datetime
    ended_at: Optional[datetime] = None
    planned_duration_seconds: int
    actual_duration_seconds: Optional[int] = None
    status: str
    total_distractions: int

    model_config = ConfigDict(from_attributes=True)

class RecentSession(BaseModel):
    id: int
    startedAt: datetime
    status: str
    durationMinutes: int
    distractions: int

class SessionSuggestionsResponse(BaseModel):
    suggestedDurationMinutes: int
    suggestedBreakMinutes: int
    reason: Optional[str] = None
    # User's default focus, for "Stick to my default" and comparison
    defaultFocusMinutes: int
    # Number of sessions behind the suggestion, for "last N sessions" copy
    sessionCountUsed: int

class FocusMetricsResponse(BaseModel):
    totalSessions: int
    completedSessions: int
    abandonedSessions: int
    completionRate: float
    totalFocusMinutes: int
    avgSessionMinutes: int
    totalDistractions: int
    avgDistractionsPerSession: float
    currentStreak: int
    longestStreak: int

class DailyStats(BaseModel):
    date: str
    sessions: int
    completedSessions: int
    focusMinutes: int
    distractions: int

class HourlyPattern(BaseModel):
    hour: int
    sessions: int
    completionRate: int

class DistractionCreate(BaseModel):
    distraction_type: str = Field(..., min_length=1, max_length=50)
    time_into_session_seconds: int = Field(0, ge=0)
    time_remaining_seconds: Optional[int] = Field(None, ge=0)

    @field_validator("distraction_type")
    @classmethod
    def strip_type(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("distraction_type must not be blank")
        return value

class DistractionResponse(BaseModel):
    distraction_id: int
    session_id: int
    distraction_type: str
    time_into_session_seconds: int
    time_remaining_seconds: Optional[int] = None
    logged_at: datetime
    # Running count on the session after this one
    total_distractions: int

class DistractionBreakdown(BaseModel):
    type: str
    count: int
    percentage: int

class UserStatusResponse(BaseModel):
    isNewUser: bool
