from prometheus_client import Counter, Histogram
import time

# Define Prometheus metrics
REQUEST_COUNT = Counter(
    "http_request_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status"]
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"]
)

# Label for requests that matched no route (404s, mounted apps)
UNMATCHED_ENDPOINT = "unmatched"

SESSION_COUNT = Counter(
    "focus_session_total",
    "Total number of focus sessions by lifecycle event",
    ["event"]
)

DISTRACTION_COUNT = Counter(
    "focus_distraction_total",
    "Total number of distractions logged during focus sessions"
)

SUGGESTION_COUNT = Counter(
    "session_suggestion_request_total",
    "Total number of session suggestion requests"
)

SUGGESTION_OUTCOME = Counter(
    "session_suggestion_outcome_total",
    "Session suggestions by the rule that produced them",
    ["rule"]
)

SUGGESTION_LATENCY = Histogram(
    "session_suggestion_duration_seconds",
    "Time to load history and compute a session suggestion",
    ["stage"]
)

class TimerContextManager:
    def __init__(self, histogram, labels=None):
        self.histogram = histogram
        self.labels = labels

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.perf_counter() - self.start_time

        if self.labels:
            self.histogram.labels(*self.labels).observe(duration)
        else:
            self.histogram.observe(duration)
