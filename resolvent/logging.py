"""
Logging setup for applications embedding resolvent.

resolvent emits structlog events and never configures structlog itself:

    schema_compiled            debug, once per SchemaBuilder.compile()
    query_execution_started    debug, one per Executor.run()
    query_field_failed         warning, one per FieldError
    query_resolver_raised      error, with the resolver's traceback
    query_execution_finished   debug, one per Executor.run()

Call configure_logging() once at startup to render them.
"""

import os
import sys

import structlog
from structlog.types import Processor

_TRUTHY = ("1", "true", "yes")

# ═══════════════════════════════════════════════════════════════════════════════
# Renderer Selection
# ═══════════════════════════════════════════════════════════════════════════════


def _wants_json() -> bool:
    """JSON unless FORCE_COLOR is set or stdout is a terminal."""
    if os.environ.get("FORCE_COLOR", "").lower() in _TRUTHY:
        return False
    return not sys.stdout.isatty()


def _renderers(json: bool) -> list[Processor]:
    if json:
        # Tracebacks from query_resolver_raised become a string field
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=True)]


# ═══════════════════════════════════════════════════════════════════════════════
# configure_logging
# ═══════════════════════════════════════════════════════════════════════════════


def configure_logging(json: bool | None = None, level: int = 0) -> None:
    """
    Configure structlog for resolvent's events.

    json:  True for JSON lines, False for the console renderer,
           None to decide from the environment.
    level: minimum stdlib level number (logging.WARNING keeps only
           failures); 0 emits everything.

    Example:
        configure_logging(level=logging.INFO)
    """
    if json is None:
        json = _wants_json()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            *_renderers(json),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = ("configure_logging",)
