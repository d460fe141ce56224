"""
FitLedger Backend - FastAPI Application
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from fitledger.core.config import settings
from fitledger.core.database import init_db
from fitledger.core.errors import ConflictError, NotFoundError
from fitledger.core.logging import setup_logging, get_logger
from fitledger.api import dashboard, health_metrics, scheduled_workouts, users, workouts
from fitledger.services.ledger import UserLockRegistry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info("Starting FitLedger Backend", version="1.0.0")
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down FitLedger Backend")


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Store error",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"detail": "Internal error"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="FitLedger API",
        description="Personal fitness tracking: workouts, health metrics, streaks",
        version="1.0.0",
        lifespan=lifespan,
    )

    # One lock registry per process, shared by every request
    app.state.user_locks = UserLockRegistry()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    # Include routers
    app.include_router(users.router, prefix="/api", tags=["users"])
    app.include_router(workouts.router, prefix="/api/workouts", tags=["workouts"])
    app.include_router(health_metrics.router, prefix="/api/health-metrics", tags=["health-metrics"])
    app.include_router(
        scheduled_workouts.router,
        prefix="/api/scheduled-workouts",
        tags=["scheduled-workouts"],
    )
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "fitledger-backend"}

    return app


app = create_app()
