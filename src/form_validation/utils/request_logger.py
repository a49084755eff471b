"""
Validation Request Logger for the Form Validation service.

This module provides logging utilities for tracking a single form validation
request with timestamps, per-step timing and structured metadata for
performance monitoring and debugging.

Features:
- Automatic execution time tracking
- Structured logging with timestamps
- Per-step timing for the pipeline stages
- Error tracking with context
- Trace id and form id tracking
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional

logger = logging.getLogger(__name__)


class ValidationRequestMetrics:
    """Container for request metrics and timing information."""

    def __init__(self, form_id: str, trace_id: Optional[str]):
        self.form_id = form_id
        self.trace_id = trace_id
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.start_timestamp: Optional[float] = None
        self.execution_time_seconds: float = 0.0
        self.steps: List[Dict[str, Any]] = []
        self.success: bool = False
        self.valid: Optional[bool] = None
        self.error_count: int = 0
        self.error: Optional[str] = None
        self.error_type: Optional[str] = None

    def _extra(self, event_type: str) -> Dict[str, Any]:
        return {
            "form_id": self.form_id,
            "trace_id": self.trace_id,
            "event_type": event_type,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a dictionary."""
        return {
            "form_id": self.form_id,
            "trace_id": self.trace_id,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "execution_time_seconds": self.execution_time_seconds,
            "steps": list(self.steps),
            "success": self.success,
            "valid": self.valid,
            "error_count": self.error_count,
            "error": self.error,
            "error_type": self.error_type,
        }


class ValidationRequestLogger:
    """Tracks one validation request from start to verdict."""

    def __init__(self, form_id: str, trace_id: Optional[str]):
        self.metrics = ValidationRequestMetrics(form_id, trace_id)
        self._step_started: Optional[float] = None

    def start(self) -> None:
        """Mark the start of the request."""
        self.metrics.start_time = datetime.now(timezone.utc)
        self.metrics.start_timestamp = time.time()
        self._step_started = self.metrics.start_timestamp
        logger.info(
            f"VALIDATION_START: form={self.metrics.form_id} trace={self.metrics.trace_id}",
            extra=self.metrics._extra("validation_start")
        )

    def log_step(self, step_name: str, step_data: Optional[Dict[str, Any]] = None) -> None:
        """Record completion of a pipeline step with the time spent since the previous one."""
        now = time.time()
        elapsed = now - self._step_started if self._step_started is not None else 0.0
        self._step_started = now

        step = {"step_name": step_name, "elapsed_seconds": elapsed}
        if step_data:
            step.update(step_data)
        self.metrics.steps.append(step)

        logger.debug(
            f"VALIDATION_STEP: {step_name} | form={self.metrics.form_id} | {elapsed:.3f}s",
            extra={**self.metrics._extra("validation_step"), "step": step}
        )

    def end(
        self,
        success: bool = True,
        valid: Optional[bool] = None,
        error_count: int = 0,
        error: Optional[Exception] = None
    ) -> Dict[str, Any]:
        """Mark the end of the request and log the outcome."""
        self.metrics.end_time = datetime.now(timezone.utc)
        if self.metrics.start_timestamp is not None:
            self.metrics.execution_time_seconds = time.time() - self.metrics.start_timestamp
        self.metrics.success = success
        self.metrics.valid = valid
        self.metrics.error_count = error_count
        if error is not None:
            self.metrics.error = str(error)
            self.metrics.error_type = type(error).__name__

        if success:
            logger.info(
                f"VALIDATION_END: form={self.metrics.form_id} | valid={valid} | "
                f"errors={error_count} | {self.metrics.execution_time_seconds:.3f}s",
                extra={**self.metrics._extra("validation_end"), "metrics": self.metrics.to_dict()}
            )
        else:
            logger.error(
                f"VALIDATION_ABORTED: form={self.metrics.form_id} | "
                f"{self.metrics.error_type}: {self.metrics.error}",
                extra={**self.metrics._extra("validation_aborted"), "metrics": self.metrics.to_dict()}
            )
        return self.metrics.to_dict()


@asynccontextmanager
async def track_validation_request(form_id: str, trace_id: Optional[str]) -> AsyncIterator[ValidationRequestLogger]:
    """
    Async context manager tracking a validation request.

    A request that raises is logged as aborted and the exception propagates.
    The body is expected to call ``end()`` itself on success.

    Usage:
        async with track_validation_request(form_id, trace_id) as request_logger:
            request_logger.log_step("schema_fetched")
            ...
            request_logger.end(valid=verdict.valid)
    """
    request_logger = ValidationRequestLogger(form_id, trace_id)
    request_logger.start()
    try:
        yield request_logger
    except Exception as e:
        request_logger.end(success=False, error=e)
        raise
