"""Domain probe for query execution.

Captures execution events (start, field failures, resolver exceptions,
finish) without coupling the executor to a logging backend.
"""

from __future__ import annotations

from typing import Any, Protocol

import structlog

from resolvent._types import Path
from resolvent.query._errors import FieldError


class ExecutionProbe(Protocol):
    """Domain probe for query execution."""

    def execution_started(self, field_count: int) -> None:
        """Record that an execution began with `field_count` root fields."""
        ...

    def field_failed(self, error: FieldError) -> None:
        """Record a field-level error."""
        ...

    def resolver_raised(self, path: Path, exc: Exception) -> None:
        """Record an exception raised by a resolver."""
        ...

    def execution_finished(self, error_count: int) -> None:
        """Record that an execution completed."""
        ...

    def bind(self, **context: Any) -> ExecutionProbe:
        """Create a new probe with context bound to every event."""
        ...


class DefaultExecutionProbe:
    """Default implementation of ExecutionProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger("resolvent.query")

    def bind(self, **context: Any) -> DefaultExecutionProbe:
        return DefaultExecutionProbe(logger=self._logger.bind(**context))

    def execution_started(self, field_count: int) -> None:
        self._logger.debug("query_execution_started", field_count=field_count)

    def field_failed(self, error: FieldError) -> None:
        self._logger.warning(
            "query_field_failed",
            kind=error.kind.name,
            path=list(error.path),
            message=error.message,
        )

    def resolver_raised(self, path: Path, exc: Exception) -> None:
        self._logger.error(
            "query_resolver_raised",
            path=list(path),
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=exc,
        )

    def execution_finished(self, error_count: int) -> None:
        self._logger.debug("query_execution_finished", error_count=error_count)


__all__ = ("ExecutionProbe", "DefaultExecutionProbe")
