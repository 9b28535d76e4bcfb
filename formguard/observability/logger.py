"""
Structured logging for formguard

Rule set construction, adapter binding and the CLI log through the
``formguard`` logger tree. Records are emitted as JSON lines (via
python-json-logger) or as plain text for local use, always on stderr so
that CLI result documents on stdout stay machine readable.

Core modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, on the ``formguard`` root logger.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "formguard"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for formguard records

    Every line carries: timestamp, level, logger, module, function, plus any
    ``extra`` fields the caller passed (rule_set, environment, field, ...).
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        """
        Fill in the standard formguard fields

        Args:
            log_record: Output dictionary being built for this line
            record: LogRecord being formatted
            message_dict: Fields parsed from a dict-style message
        """
        super().add_fields(log_record, record, message_dict)

        log_record.setdefault("timestamp", self.formatTime(record, self.datefmt))
        # An explicit "level" extra wins, normalised to upper case
        log_record["level"] = str(log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName


def _resolve_level(level: str | None) -> int:
    name = level or os.getenv("LOG_LEVEL", "INFO")
    return LOG_LEVELS.get(name.upper(), logging.INFO)


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return CustomJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str = "json",
) -> logging.Logger:
    """
    Attach a single stderr handler to a logger

    Calling it again replaces the previous handler, so the CLI can
    reconfigure the level and format after settings are loaded.

    Args:
        name: Logger name (normally ``formguard``)
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; falls back to the
            LOG_LEVEL environment variable, then INFO
        format_type: "json" or "text"

    Returns:
        The configured logger
    """
    log_level = _resolve_level(level)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(_build_formatter(format_type))
    logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger, configuring handlers on first use

    Names under the ``formguard`` namespace propagate to the shared
    ``formguard`` handler; any other name gets its own handler.
    """
    logger = logging.getLogger(name)

    if name == DEFAULT_LOGGER_NAME or name.startswith(DEFAULT_LOGGER_NAME + "."):
        if not logging.getLogger(DEFAULT_LOGGER_NAME).handlers:
            setup_logger(DEFAULT_LOGGER_NAME)
        return logger

    return logger if logger.handlers else setup_logger(name)


class log_operation:
    """
    Context manager logging the outcome and duration of one operation

    The start is logged at DEBUG, success at INFO and failure at ERROR with
    the exception type and message. Exceptions always propagate.

    Usage:
        with log_operation("Binding rule set", logger=logger, rule_set="user_credentials"):
            resolved = adapter.bind(rule_set)
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        """
        Args:
            operation_name: Human-readable operation name
            logger: Logger to use (the ``formguard`` logger if None)
            **extra_fields: Fields added to every record of this operation
        """
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time = None

    def _fields(self, status: str | None = None, **more) -> dict:
        fields = {"operation": self.operation_name, **self.extra_fields, **more}
        if status is not None:
            fields["status"] = status
            fields["duration_seconds"] = round(time.perf_counter() - self.start_time, 3)
        return fields

    def __enter__(self):
        """Start timing the operation"""
        self.start_time = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Log success or failure, never suppressing the exception"""
        if exc_type is None:
            self.logger.info(f"Completed: {self.operation_name}", extra=self._fields("success"))
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra=self._fields("error", error_type=exc_type.__name__, error_message=str(exc_val)),
            )
        return False
