import logging

import structlog

from pratik_blog.config import settings

# Chatty third-party loggers that drown out feed/audio events at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore", "apscheduler.executors.default")


def _renderer(json_logs: bool):
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configure structlog on top of stdlib logging.

    JSON output in production, coloured console output otherwise. Both
    arguments fall back to settings when omitted.
    """
    if json_logs is None:
        json_logs = settings.is_production

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(json_logs),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    name = (level or settings.log_level).upper()
    logging.basicConfig(format="%(message)s", level=getattr(logging, name, logging.INFO))
    for noisy in _QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)
