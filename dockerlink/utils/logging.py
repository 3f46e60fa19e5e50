"""Logging configuration for dockerlink.

The library itself only calls ``structlog.get_logger``. Applications (and the
``dockerlink`` CLI) call ``setup_logging()`` once to route both structlog and
plain stdlib records, such as those of docker-py, through the same renderer.
"""

# Standard library imports
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional

# Third-party imports
import structlog

# Local application imports
from .._version import __version__
from ..config import LoggingConfig, settings
from ..core.session import SESSION_ID

THIRD_PARTY_LOGGERS = ("docker", "urllib3")


def add_session_context(logger, method_name, event_dict):
    """Add library and session information to log entries."""
    event_dict["service"] = "dockerlink"
    event_dict["version"] = __version__
    event_dict["session_id"] = SESSION_ID
    return event_dict


def _shared_processors() -> List:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_session_context,
    ]


def _formatter(config: LoggingConfig, colors: bool) -> structlog.stdlib.ProcessorFormatter:
    if config.json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_shared_processors(),
    )


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configure structured logging for the library."""
    config = config or settings.logging
    level = getattr(logging, config.level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(_formatter(config, colors=sys.stderr.isatty()))

    root_logger = logging.getLogger()
    root_logger.handlers = [stream_handler]
    root_logger.setLevel(level)

    if config.file:
        root_logger.addHandler(create_file_handler(config))

    configure_third_party_loggers(config)


def create_file_handler(config: LoggingConfig) -> logging.Handler:
    """Rotating file handler rendering the same way as the console."""
    log_file_path = Path(config.file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=config.max_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(_formatter(config, colors=False))
    return file_handler


def configure_third_party_loggers(config: Optional[LoggingConfig] = None) -> None:
    """Quiet the Docker SDK and its HTTP stack."""
    config = config or settings.logging
    level = getattr(logging, config.docker_sdk_level.upper(), logging.WARNING)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str = None) -> structlog.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)
