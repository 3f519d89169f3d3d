import logging
import json
import time
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.core.database import engine, Base, get_db, ping_database
from app.core.config import settings
from app.core.limiter import limiter
from app.core.redis_client import create_redis_client
from app.routes import auth, submission
from app.services.cooldown import AdmissionChain, CooldownGate

SERVICE_NAME = "judge-api"
SERVICE_VERSION = "1.0.0"

# Configure structured JSON logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(message)s",
)
logger = logging.getLogger(__name__)

_EXTRA_LOG_FIELDS = (
    "user_id",
    "method",
    "request_path",
    "status_code",
    "response_time",
    "cooldown_outcome",
)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }
        for field in _EXTRA_LOG_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


# Apply JSON formatter to root logger
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
logging.getLogger().handlers = [handler]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Judge API")
    if settings.is_dev_like:
        # NOTE: create_all is acceptable for local and test workflows.
        Base.metadata.create_all(bind=engine)
    else:
        logger.info(
            "Skipping schema auto-creation in non-dev environment; run migrations instead"
        )

    redis = create_redis_client()
    # Refuse to serve without the cooldown store
    await redis.ping()
    app.state.redis = redis
    app.state.submit_admission = AdmissionChain(
        [
            CooldownGate(
                redis,
                prefix="submit_cooldown",
                window_seconds=settings.SUBMIT_COOLDOWN_SECONDS,
                precheck=settings.SUBMIT_COOLDOWN_PRECHECK,
            )
        ]
    )
    logger.info("Redis connected")
    yield
    # Shutdown
    await redis.aclose()
    logger.info("Shutting down Judge API")


app = FastAPI(
    title="Judge API",
    description="Coding judge backend with per-user submission cooldown",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

# Rate limiting — per-IP throttle on auth endpoints
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware — credentials are required for the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Cookie"],
    expose_headers=["Set-Cookie"],
)

if settings.TRUST_PROXY:
    # Client address comes from X-Forwarded-For when behind a load balancer
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path}",
        extra={
            "method": request.method,
            "request_path": str(request.url.path),
            "status_code": response.status_code,
            "response_time": f"{process_time:.3f}s",
        },
    )

    return response


# Include routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(submission.router, prefix="/submission", tags=["Submissions"])


@app.get("/")
async def root():
    return {"activeStatus": True, "error": False}


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/ready")
async def readiness_check(request: Request, db: Session = Depends(get_db)):
    try:
        ping_database(db)
        await request.app.state.redis.ping()
    except (SQLAlchemyError, RedisError, OSError):
        logger.warning("Readiness check failed", exc_info=True)
        return JSONResponse(status_code=503, content={"status": "not_ready"})
    return {
        "status": "ready",
        "service": SERVICE_NAME,
        "environment": settings.ENVIRONMENT,
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
