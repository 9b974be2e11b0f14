import logging
import sys

import structlog
from structlog.stdlib import add_log_level, add_logger_name

LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant."""
    if not name:
        return default
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def setup_logging(level: int = logging.INFO, colors: bool | None = None) -> None:
    """Configure structlog and standard logging with the given level.

    Log lines go to stderr so the generator's progress report on stdout stays
    readable when piped.
    """
    if colors is None:
        colors = sys.stderr.isatty()
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
