import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Central sink for errors that are reported rather than raised."""

    def __init__(self, logger: logging.Logger, event_bus: Optional[EventBus] = None):
        self._logger = logger
        self._events = event_bus
        self._listener: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_listener(self, callback: Callable[[str, ErrorSeverity], None]):
        """Forward ERROR and CRITICAL messages to *callback* (e.g. a status bar)."""
        self._listener = callback

    def handle(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR, context: dict = None):
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method(f"{error.__class__.__name__}: {error}", extra={"context": context or {}})

        if self._events is not None:
            self._events.publish(ErrorOccurredEvent(
                error=error,
                severity=severity,
                context=context or {},
            ))

        if self._listener and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._listener(str(error), severity)
