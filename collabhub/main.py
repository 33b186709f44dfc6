"""
CollabHub - Main Application

FastAPI backend with:
- Durable local records (SQLAlchemy, SQLite by default)
- Optional shared MongoDB store, with live change-stream feeds
- JWT sessions over a placeholder credential scheme

Run: uvicorn collabhub.main:app --reload
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from collabhub.api.routes import api_router
from collabhub.core.config import get_settings
from collabhub.core.errors import CollabError
from collabhub.core.logging import configure_logging
from collabhub.services.container import Services, get_services, reset_services

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("collabhub.main")

# Create FastAPI app
app = FastAPI(
    title="CollabHub",
    description="""
    Connects researchers, students, founders and mentors for collaborative projects.

    ## Features
    - **Authentication**: signup/login with per-session JWT tokens
    - **Directory**: discover profiles by interest, role and preference
    - **Projects**: post and search projects
    - **Applications**: apply, and let project authors move applications through
      pending / interview / accepted / rejected
    - **Messages**: one-to-one conversations

    ## Storage modes
    - `local`: durable local records, immediately consistent
    - `remote`: shared MongoDB, re-read after each write
    - `remote_live`: shared MongoDB, views fed by change streams (eventually consistent)
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(CollabError)
async def collab_error_handler(request: Request, exc: CollabError):
    """Map domain errors to HTTP responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Build services, prepare MongoDB and start live feeds."""
    services = get_services()
    if settings.uses_remote:
        from collabhub.db.mongodb import init_mongo_indexes
        try:
            init_mongo_indexes()
        except Exception as e:
            logger.warning("MongoDB index initialization failed: %s", e)
    services.start()
    logger.info("CollabHub started in %s mode", settings.storage_mode.value)


@app.on_event("shutdown")
async def shutdown_event():
    reset_services()
    if settings.uses_remote:
        from collabhub.db.mongodb import close_mongo_client
        close_mongo_client()


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "CollabHub", "storage_mode": settings.storage_mode.value}


@app.get("/health", tags=["Health"])
async def health_check(services: Services = Depends(get_services)):
    """Detailed health check."""
    result = {
        "status": "healthy",
        "local_store": "connected" if services.records.ping() else "disconnected",
    }
    if settings.uses_remote:
        from collabhub.db.mongodb import test_mongo_connection
        result["mongodb"] = "connected" if test_mongo_connection() else "disconnected"
    return result
