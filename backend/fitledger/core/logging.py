"""
Structured logging configuration.
Designed for easy debugging without exposing personal data.
"""
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import structlog
from structlog.types import Processor

from fitledger.core.config import settings


def setup_logging() -> None:
    """Configure structured logging for the application."""

    # Common processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        # JSON format for production
        renderer = structlog.processors.JSONRenderer()
    else:
        # Console format for development
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# ========================================
# Unit-of-work logging
# ========================================

@dataclass
class UnitOfWorkLog:
    """Log entry for one orchestrated operation."""
    work_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    operation: str = ""
    user_id: str = ""

    start_time: float = 0.0
    end_time: float = 0.0
    duration_ms: float = 0.0

    steps: list[str] = field(default_factory=list)

    success: bool = True
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class UnitOfWorkLogger:
    """
    Times and logs orchestrated operations.

    Usage:
        uow_logger = UnitOfWorkLogger(logger)
        with uow_logger.track("workout.create", user_id) as work:
            work.step("inserted", workout_id=workout.id)
            ...

    The completion summary is always logged. Individual steps are only
    logged when UNIT_OF_WORK_LOG is enabled.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger):
        self.logger = logger
        self.enabled = settings.UNIT_OF_WORK_LOG

    @contextmanager
    def track(
        self,
        operation: str,
        user_id: str,
    ) -> Generator["UnitOfWorkTracker", None, None]:
        """Context manager for tracking one unit of work."""
        tracker = UnitOfWorkTracker(
            logger=self.logger,
            enabled=self.enabled,
            operation=operation,
            user_id=user_id,
        )
        tracker.start()
        try:
            yield tracker
        except Exception as e:
            tracker.set_error(type(e).__name__, str(e))
            raise
        finally:
            tracker.finish()


class UnitOfWorkTracker:
    """Tracker for a single unit of work."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        enabled: bool,
        operation: str,
        user_id: str,
    ):
        self.logger = logger
        self.enabled = enabled
        self.log = UnitOfWorkLog(operation=operation, user_id=user_id)

    def start(self) -> None:
        """Mark the start of the unit of work."""
        self.log.start_time = time.time()

        if self.enabled:
            self.logger.debug(
                "Unit of work started",
                work_id=self.log.work_id,
                operation=self.log.operation,
                user_id=self.log.user_id,
            )

    def step(self, name: str, **extra: Any) -> None:
        """Record a completed step."""
        self.log.steps.append(name)

        if self.enabled:
            self.logger.debug(
                "Unit of work step",
                work_id=self.log.work_id,
                operation=self.log.operation,
                step=name,
                **extra,
            )

    def set_error(self, error_type: str, error_message: str) -> None:
        """Set error information."""
        self.log.success = False
        self.log.error_type = error_type
        self.log.error_message = error_message

    def finish(self) -> None:
        """Mark the end of the unit of work and log summary."""
        self.log.end_time = time.time()
        self.log.duration_ms = (self.log.end_time - self.log.start_time) * 1000

        if self.log.success:
            self.logger.info(
                "Unit of work completed",
                work_id=self.log.work_id,
                operation=self.log.operation,
                user_id=self.log.user_id,
                steps=self.log.steps,
                duration_ms=round(self.log.duration_ms, 2),
            )
        else:
            self.logger.error(
                "Unit of work failed",
                work_id=self.log.work_id,
                operation=self.log.operation,
                user_id=self.log.user_id,
                steps=self.log.steps,
                duration_ms=round(self.log.duration_ms, 2),
                error_type=self.log.error_type,
                error_message=self.log.error_message,
            )
