"""Structured logging for pillarmap."""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pythonjsonlogger.json import JsonFormatter

ROOT_LOGGER_NAME = "pillarmap"

# LogRecord attributes that must not be overwritten through ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "taskName",
    }
)


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class StructuredLogger:
    """
    Logger wrapper that attaches context fields to every record.

    Context passed as keyword arguments ends up as extra attributes on the
    log record, so the JSON formatter emits them as top-level keys.
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        """
        Initialize structured logger.

        Args:
            name: Logger name (children of ``pillarmap`` share its handlers)
        """
        self.name = name
        self.logger = logging.getLogger(name)

    def _log_with_context(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if context:
            kwargs.update(context)
        extra = {
            (f"ctx_{key}" if key in _RESERVED_ATTRS else key): value
            for key, value in kwargs.items()
        }
        self.logger.log(level, message, extra=extra or None)

    def debug(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log debug message."""
        self._log_with_context(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log info message."""
        self._log_with_context(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log warning message."""
        self._log_with_context(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[dict[str, Any]] = None, **kwargs: Any) -> None:
        """Log error message."""
        self._log_with_context(logging.ERROR, message, context, **kwargs)

    def log_llm_call(
        self,
        provider: str,
        model: str,
        prompt: str,
        response: str,
        latency_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log a model call with structured metadata.

        Args:
            provider: Provider name (e.g., "gemini", "gateway")
            model: Model name
            prompt: Input text (only a preview is logged)
            response: Response text (only a preview is logged)
            latency_ms: Request latency in milliseconds
            **kwargs: Additional metadata
        """
        prompt_preview = prompt[:200] + "..." if len(prompt) > 200 else prompt
        response_preview = response[:200] + "..." if len(response) > 200 else response

        context = {
            "event_type": "llm_call",
            "provider": provider,
            "model": model,
            "prompt_length": len(prompt),
            "response_length": len(response),
            "prompt_preview": prompt_preview,
            "response_preview": response_preview,
        }
        if latency_ms is not None:
            context["latency_ms"] = round(latency_ms, 1)
        context.update(kwargs)

        self.info(f"LLM call: {provider}/{model}", context=context)

    def log_stage(
        self,
        stage: str,
        status: str,
        duration_ms: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        """
        Log a roadmap processing step.

        Args:
            stage: Step name (e.g., "parse", "edit")
            status: "started", "completed" or "failed"
            duration_ms: Step duration in milliseconds
            **kwargs: Additional metadata
        """
        context = {"event_type": "stage", "stage": stage, "status": status}
        if duration_ms is not None:
            context["duration_ms"] = round(duration_ms, 1)
        context.update(kwargs)

        if status == "failed":
            self.error(f"Stage {stage} failed", context=context)
        elif status == "completed":
            self.info(f"Stage {stage} completed", context=context)
        else:
            self.info(f"Stage {stage} started", context=context)


_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str = ROOT_LOGGER_NAME) -> StructuredLogger:
    """
    Get or create a structured logger.

    Args:
        name: Logger name, usually ``pillarmap.<module>``

    Returns:
        StructuredLogger instance
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> StructuredLogger:
    """
    Configure handlers on the ``pillarmap`` root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON-formatted logs
        log_file: Optional file path to write logs to

    Returns:
        The root StructuredLogger
    """
    log_level = getattr(logging, LogLevel[level.upper()].value)
    formatter = _build_formatter(json_output)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(log_level)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return get_logger(ROOT_LOGGER_NAME)
