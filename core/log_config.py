# WORKFLOW: Logging setup shared by the import script and tests.
# Used by: scripts/import_dump.py
# Two channels:
# 1. stdlib logging - per-module operational messages ("Reading Posts.xml...")
# 2. structlog - structured stage events (counts per stage, run summary)
#
# Both honour the same level; structlog renders console or JSON lines.

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Log level name (DEBUG, INFO, ...)
        fmt: "console" for human readable output, "json" for JSON lines
    """
    level_no = getattr(logging, level.upper(), None)
    if not isinstance(level_no, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(
        level=level_no,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    elif fmt == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        raise ValueError(f"Unknown log format: {fmt}")

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
