import os
from contextlib import asynccontextmanager

from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging, get_logger
from app.core.middleware import RequestLoggingMiddleware
from app.core.rate_limit import limiter
from app.core.settings import settings
from app.db import Base, engine, get_db, get_db_path
from app.routers import api_router
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    import app.models  # noqa: F401 - ensure models are imported for metadata

    logger.info("application_starting", environment=settings.environment)
    db_path = get_db_path()
    if db_path:
        logger.info("using_sqlite_database", path=db_path)
    else:
        logger.info("using_database", url=engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)
    logger.info("database_tables_created")

    yield

    logger.info("application_shutdown")


app = FastAPI(title="Task Tracker Backend", version="0.1.0", lifespan=lifespan)

# ============================================================================
# CORS (the React client runs on the Vite dev server by default)
# ============================================================================
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(
    ","
)
ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization", "Accept", "Origin"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=ALLOWED_METHODS,
    allow_headers=ALLOWED_HEADERS,
)

# ============================================================================
# Rate limiting (SlowAPI)
# ============================================================================
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# ============================================================================
# Request logging (added last so it wraps everything else)
# ============================================================================
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request, exc):
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded. {exc.detail}", "error": "rate_limited"},
    )


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "task-tracker-backend"}


@app.get("/health/ready")
def readiness_check(db=Depends(get_db)):
    """Readiness probe: verifies database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready", "database": "connected"}
    except Exception as e:
        logger.warning("readiness_check_failed", error=str(e))
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "database": "disconnected", "error": str(e)},
        )


app.include_router(api_router)
