from focus_agent.models.user import User
from focus_agent.models.focus import FocusSession, UserPreferences, Distraction

# This allows importing all models from focus_agent.models
