"""
FastAPI application entry point.
Wires logging, middleware, routers and exception handlers together.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from app.config import settings
from app.database import test_database_connection, close_db_connection
from app.routers import session_router, users_router, spots_router, reviews_router
from app.services.error_handler import register_exception_handlers
from app.middleware.validation import ValidationMiddleware

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

API_DESCRIPTION = """
Backend for a spot booking and review platform.

* **Spots**: listings with price and coordinate filters, average ratings and preview images
* **Reviews**: one review per user and spot, each with up to 10 images
* **Session**: log in with a username or email; the session lives in an HTTP-only `token` cookie

Log in with `POST /api/session` or sign up with `POST /api/users`. API clients that cannot
keep cookies may send the same token as a `Bearer` header.
"""

OPENAPI_TAGS = [
    {"name": "Session", "description": "Log in, log out and restore the current session"},
    {"name": "Users", "description": "Account sign up"},
    {"name": "Spots", "description": "Spot listings, spot images and spot reviews"},
    {"name": "Reviews", "description": "The current user's reviews and review images"},
    {"name": "Health", "description": "Service health endpoints"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the database on startup and release the pool on shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")

    if not await test_database_connection():
        # Keep serving; /health reports the outage
        logger.error("Database unreachable on startup")

    yield

    await close_db_connection()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=API_DESCRIPTION,
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

# Credentials are allowed so browsers send the session cookie cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.add_middleware(
    ValidationMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=settings.enable_request_logging,
    api_prefix=settings.api_prefix
)

for router in (session_router, users_router, spots_router, reviews_router):
    app.include_router(router, prefix=settings.api_prefix)

register_exception_handlers(app)


@app.get("/", tags=["Health"])
async def root():
    """Service name, version and where the docs live."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "docs": "/docs",
        "api_prefix": settings.api_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint with database connectivity test.
    Used by container health checks and load balancers.
    """
    if not await test_database_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "version": settings.app_version,
        "database": "connected"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
