from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app
import focus_agent.models
from focus_agent.database import engine, Base
from focus_agent.routers import auth, user, status, sessions, preferences, metrics, agent
from focus_agent.monitoring import REQUEST_COUNT, REQUEST_LATENCY, UNMATCHED_ENDPOINT
import logging
import time

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create tables if they don't exist yet
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Focus Agent API")

# CORS middleware
origins = [
    "http://localhost:3000",  # Next.js development server default port
    "http://localhost:5173",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    duration = time.perf_counter() - start_time

    # Label by route template so path parameters do not create new series
    route = request.scope.get("route")
    endpoint = getattr(route, "path", None) or UNMATCHED_ENDPOINT

    REQUEST_LATENCY.labels(request.method, endpoint).observe(duration)
    REQUEST_COUNT.labels(request.method, endpoint, str(response.status_code)).inc()
    return response

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(user.router, prefix="/api")
app.include_router(status.router, prefix="/api")
app.include_router(sessions.router, prefix="/api")
app.include_router(preferences.router, prefix="/api")
app.include_router(metrics.router, prefix="/api")
app.include_router(agent.router, prefix="/api")

# Prometheus scrape endpoint
app.mount("/metrics", make_asgi_app())

@app.get("/")
async def root():
    return {"message": "Welcome to the Focus Agent API"}

# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "focus-agent"}
