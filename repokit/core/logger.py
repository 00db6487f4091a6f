"""
Structured logging for repokit commands.

stdout belongs to the rich status output, so log records go to stderr
(human readable) and to a rotating JSON file under the log directory.
"""

import logging
import logging.handlers
import os
import sys

import structlog

from repokit.core.config import AppSettings

LOG_FILE_NAME = "repokit.log"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

# Substrings of event keys whose values never reach a log sink
SENSITIVE_KEY_PARTS = ("password", "secret", "token", "authorization", "key_content")
REDACTED = "***"

QUIET_LOGGERS = ("urllib3", "httpx", "httpcore")


def redact_sensitive(logger, method_name, event_dict):
    for key in event_dict:
        if any(part in key.lower() for part in SENSITIVE_KEY_PARTS):
            event_dict[key] = REDACTED
    return event_dict


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.dev.ConsoleRenderer(colors=True))
    )
    return handler


def _file_handler(log_dir: str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
    )
    return handler


def setup_logging(settings: AppSettings) -> None:
    """
    Route structlog through the stdlib root logger.

    Calling this again replaces the handlers installed by the previous call.
    """
    log_dir = settings.paths.log_dir
    os.makedirs(log_dir, exist_ok=True)
    console_level = getattr(logging, settings.console_log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            redact_sensitive,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_repokit", False):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(logging.DEBUG)
    for handler in (_console_handler(console_level), _file_handler(log_dir)):
        handler._repokit = True
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).debug(
        "Logging configured", log_dir=log_dir, console_level=logging.getLevelName(console_level)
    )
