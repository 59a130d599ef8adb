"""
Adaptive session-duration suggestions.

Looks at a user's most recent finished focus sessions and decides whether the
next session should be shorter, slightly longer, or stay at the user's default.
Everything here is a pure function of its inputs: callers load the history and
preferences, and persist or log the outcome themselves.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

RECENT_SESSIONS_LIMIT = 7
MIN_SESSIONS_FOR_SUGGESTION = 3
ABANDONMENT_RATE_THRESHOLD = 0.25 # "low" = at most 25% abandoned
DOWNWARD_RATIO = 0.95
UPWARD_RATIO_MAX = 1.05
UPWARD_CAP_PERCENT = 0.10 # +10% max at a time
UPWARD_STEP_MINUTES = 5
TRIM_RATIO = 0.1

MIN_DURATION_MINUTES = 5
MAX_DURATION_MINUTES = 120

SESSION_STATUSES = ("completed", "abandoned")

RULE_DOWNWARD = "downward"
RULE_UPWARD = "upward"
RULE_NONE = "none"


@dataclass(frozen=True)
class SessionRecord:
    """
    A finished session as seen by the engine. Durations are in seconds.
    """
    planned_duration_seconds: float
    actual_duration_seconds: float
    status: str

    def __post_init__(self):
        for name in ("planned_duration_seconds", "actual_duration_seconds"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite number >= 0, got {value!r}")
        if self.status not in SESSION_STATUSES:
            raise ValueError(f"status must be one of {SESSION_STATUSES}, got {self.status!r}")

    @property
    def planned_minutes(self) -> float:
        return self.planned_duration_seconds / 60

    @property
    def actual_minutes(self) -> float:
        return self.actual_duration_seconds / 60

    @property
    def abandoned(self) -> bool:
        return self.status == "abandoned"


@dataclass(frozen=True)
class SessionStats:
    median_actual: float
    median_planned: float
    weighted_actual: float
    trimmed_actual: float
    abandonment_rate: float

    @property
    def low_abandonment(self) -> bool:
        return self.abandonment_rate <= ABANDONMENT_RATE_THRESHOLD


@dataclass(frozen=True)
class SuggestionResult:
    suggested_duration_minutes: int
    suggested_break_minutes: int
    reason: Optional[str]
    default_focus_minutes: int
    session_count_used: int
    # Which rule produced the suggestion: downward, upward or none
    rule: str = RULE_NONE

    def to_response(self) -> dict:
        return {
            "suggestedDurationMinutes": self.suggested_duration_minutes,
            "suggestedBreakMinutes": self.suggested_break_minutes,
            "reason": self.reason,
            "defaultFocusMinutes": self.default_focus_minutes,
            "sessionCountUsed": self.session_count_used,
        }


# ---- Statistics helpers ----

def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up."""
    return int(math.floor(value + 0.5))

def round_to_nearest_5_clamped(minutes: float,
                               lower: int = MIN_DURATION_MINUTES,
                               upper: int = MAX_DURATION_MINUTES) -> int:
    return max(lower, min(upper, round_half_up(minutes / 5) * 5))

def median(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.median(np.asarray(values, dtype=float)))

def trimmed_mean(values: Sequence[float], trim_ratio: float = TRIM_RATIO) -> float:
    """
    Mean after dropping floor(n * trim_ratio) values from each end of the
    sorted list. Falls back to the median when trimming would leave nothing.
    """
    if len(values) == 0:
        return 0.0
    ordered = np.sort(np.asarray(values, dtype=float))
    drop = max(0, int(math.floor(len(ordered) * trim_ratio)))
    kept = ordered[drop:len(ordered) - drop]
    if kept.size == 0:
        return median(ordered)
    return float(kept.mean())

def recency_weights(count: int) -> List[int]:
    """Most recent = 3, next = 2, next = 1, then 1 for everything older."""
    return [3 - i if i < 3 else 1 for i in range(count)]

def weighted_average(values: Sequence[float]) -> float:
    """Recency-weighted mean; values must be ordered newest first."""
    if len(values) == 0:
        return 0.0
    return float(np.average(np.asarray(values, dtype=float), weights=recency_weights(len(values))))


# ---- Engine ----

def compute_session_stats(sessions: Sequence[SessionRecord]) -> SessionStats:
    actual_minutes = [s.actual_minutes for s in sessions]
    planned_minutes = [s.planned_minutes for s in sessions]

    abandoned_count = sum(1 for s in sessions if s.abandoned)
    abandonment_rate = abandoned_count / len(sessions) if sessions else 0.0

    return SessionStats(
        median_actual=median(actual_minutes),
        median_planned=median(planned_minutes),
        weighted_actual=weighted_average(actual_minutes),
        trimmed_actual=trimmed_mean(actual_minutes),
        abandonment_rate=abandonment_rate,
    )

def compute(sessions: Sequence[SessionRecord],
            default_focus_minutes: int,
            default_break_minutes: int) -> SuggestionResult:
    """
    Recommend the next focus duration from recent sessions (newest first).

    Sessions finishing well under plan pull the suggestion down to the
    recency-weighted actual duration. Sessions landing at or just over plan
    with few abandonments nudge it up by at most 5 minutes or 10%. Anything
    else, including fewer than three sessions, keeps the default.
    """
    count = len(sessions)
    suggested = default_focus_minutes
    reason = None
    rule = RULE_NONE

    if count >= MIN_SESSIONS_FOR_SUGGESTION:
        stats = compute_session_stats(sessions)

        if stats.median_planned > 0:
            if stats.weighted_actual < stats.median_planned * DOWNWARD_RATIO:
                suggested = round_to_nearest_5_clamped(stats.weighted_actual)
                rule = RULE_DOWNWARD
                if suggested < default_focus_minutes:
                    reason = (
                        f"Your last {count} sessions lost focus after "
                        f"~{round_half_up(stats.weighted_actual)} minutes on average."
                    )
            elif (stats.low_abandonment
                  and stats.median_planned <= stats.median_actual <= stats.median_planned * UPWARD_RATIO_MAX):
                capped = min(
                    default_focus_minutes + UPWARD_STEP_MINUTES,
                    round_half_up(default_focus_minutes * (1 + UPWARD_CAP_PERCENT)),
                )
                rounded = round_to_nearest_5_clamped(capped)
                if rounded > default_focus_minutes:
                    suggested = rounded
                    rule = RULE_UPWARD
                    reason = f"Your last {count} sessions completed strongly; try {suggested} minutes."

    return SuggestionResult(
        suggested_duration_minutes=suggested,
        suggested_break_minutes=default_break_minutes,
        reason=reason,
        default_focus_minutes=default_focus_minutes,
        session_count_used=count,
        rule=rule,
    )
