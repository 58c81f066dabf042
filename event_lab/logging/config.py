"""
Centralized logging configuration for the event analysis system.

This module configures structlog for all components. Engines, filters and
the statistics layer obtain their loggers here so that every record carries
the same processor chain and structured key/value layout.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_engine_logger(name: str, engine_name: Optional[str] = None) -> FilteringBoundLogger:
    """
    Get a logger bound to the detection-engine subsystem.

    Args:
        name: Logger name (typically __name__)
        engine_name: Display name of the engine, bound on every record

    Returns:
        Configured structlog logger for engine execution
    """
    logger = get_logger(name).bind(subsystem="engine")
    if engine_name:
        logger = logger.bind(engine=engine_name)
    return logger


def get_filter_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the contextual-filter subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for filter decisions
    """
    return get_logger(name).bind(subsystem="context_filters")


def log_engine_outcome(
    logger: FilteringBoundLogger,
    engine_name: str,
    success: bool,
    match_count: int = 0,
    error: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of one engine call with a standardized format.

    Args:
        logger: Structlog logger instance
        engine_name: Display name of the engine
        success: Whether the algorithm completed
        match_count: Number of matches produced
        error: Error message for failed runs
        context: Additional context data
    """
    bound_logger = logger.bind(
        engine_name=engine_name,
        engine_result="OK" if success else "FAILED",
        match_count=match_count,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if success:
        bound_logger.info("Engine analysis completed")
    else:
        bound_logger.error("Engine analysis failed", error=error)
