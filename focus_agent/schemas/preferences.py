from pydantic import BaseModel, Field, ValidationError, field_validator
from typing import Any, Dict, List, Literal, Optional, get_args

CoachPersonality = Literal["strict", "data_focused", "encouraging"]
FocusDomain = Literal["deep_work", "studying", "creative", "job_search", "admin", "habit", "other"]
DistractionTrigger = Literal[
    "phone_social", "notifications", "overthinking", "boredom",
    "fatigue", "stuck", "external", "tab_switching",
]
SessionRule = Literal["phone_out_of_reach", "single_task_only"]
PreferredFocusTime = Literal["early_morning", "late_morning", "afternoon", "night", "no_fixed"]
SuccessGoal = Literal[
    "procrastinate_less", "finish_what_start", "less_guilty",
    "more_consistent", "more_done", "feel_calmer",
]

SESSION_RULES = get_args(SessionRule)
MAX_DISTRACTION_TRIGGERS = 3
DEFAULT_BREAK_MINUTES = 5

def _clean_custom_domain(value):
    if isinstance(value, str):
        return value.strip() or None
    return None

class PreferencesPayload(BaseModel):
    """
    Full onboarding payload. max_sessions_per_day is only set through
    partial updates, so re-sending onboarding answers keeps it.
    """
    coach_personality: CoachPersonality
    focus_domains: List[FocusDomain]
    distraction_triggers: List[DistractionTrigger] = Field(..., max_length=MAX_DISTRACTION_TRIGGERS)
    default_focus_minutes: int = Field(..., ge=5, le=120)
    default_break_minutes: int = Field(DEFAULT_BREAK_MINUTES, ge=1, le=30)
    session_rules: List[SessionRule] = []
    preferred_focus_time: PreferredFocusTime
    success_goals: List[SuccessGoal]
    custom_focus_domain: Optional[str] = None

    @field_validator("default_break_minutes", mode="before")
    @classmethod
    def break_defaults_to_five(cls, value):
        return DEFAULT_BREAK_MINUTES if value is None else value

    @field_validator("session_rules", mode="before")
    @classmethod
    def unknown_rules_become_empty(cls, value):
        if isinstance(value, list) and all(isinstance(v, str) and v in SESSION_RULES for v in value):
            return value
        return []

    @field_validator("custom_focus_domain", mode="before")
    @classmethod
    def strip_custom_domain(cls, value):
        return _clean_custom_domain(value)

class PreferencesUpdate(BaseModel):
    """
    Partial update, e.g. only coach_personality from the settings panel
    """
    coach_personality: Optional[CoachPersonality] = None
    focus_domains: Optional[List[FocusDomain]] = None
    distraction_triggers: Optional[List[DistractionTrigger]] = Field(None, max_length=MAX_DISTRACTION_TRIGGERS)
    default_focus_minutes: Optional[int] = Field(None, ge=5, le=120)
    default_break_minutes: Optional[int] = Field(None, ge=1, le=30)
    session_rules: Optional[List[SessionRule]] = None
    max_sessions_per_day: Optional[int] = Field(None, ge=1, le=20)
    preferred_focus_time: Optional[PreferredFocusTime] = None
    success_goals: Optional[List[SuccessGoal]] = None
    custom_focus_domain: Optional[str] = None

    @field_validator("custom_focus_domain", mode="before")
    @classmethod
    def strip_custom_domain(cls, value):
        return _clean_custom_domain(value)

def validate_partial_preferences(body: Any) -> Dict[str, Any]:
    """
    Validate each field on its own and keep only the valid ones.
    custom_focus_domain may be cleared with null; other nulls are ignored.
    """
    if not isinstance(body, dict):
        return {}

    fields = {}
    for name, value in body.items():
        if name not in PreferencesUpdate.model_fields:
            continue
        if value is None and name != "custom_focus_domain":
            continue
        try:
            parsed = PreferencesUpdate.model_validate({name: value})
        except ValidationError:
            continue
        fields[name] = getattr(parsed, name)
    return fields

def first_error_message(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]
