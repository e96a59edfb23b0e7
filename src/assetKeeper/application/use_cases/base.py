import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Type, TypeVar

from assetKeeper.errors import AssetKeeperError
from assetKeeper.errors.handler import ErrorHandler, ErrorSeverity
from assetKeeper.events.bus import Event, EventBus


@dataclass(frozen=True)
class UseCaseRequest:
    """Use Case input DTO base."""
    pass


@dataclass(frozen=True)
class UseCaseResponse:
    """Use Case output DTO base."""
    success: bool = True
    error: Optional[str] = None


ResponseT = TypeVar("ResponseT", bound=UseCaseResponse)


class UseCase(ABC):
    """Use Case base class."""

    @abstractmethod
    def execute(self, request: UseCaseRequest) -> UseCaseResponse:
        ...


class LibraryUseCase(UseCase):
    """Shared plumbing for use cases that mutate the library.

    Domain and infrastructure errors raised while executing are reported to
    the error handler and turned into ``success=False`` responses.
    """

    def __init__(self, event_bus: Optional[EventBus] = None, error_handler: Optional[ErrorHandler] = None):
        self._event_bus = event_bus
        self._error_handler = error_handler
        self._logger = logging.getLogger(type(self).__module__)

    def _publish(self, event: Event) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)

    def _failure(self, response_cls: Type[ResponseT], exc: AssetKeeperError, **context) -> ResponseT:
        if self._error_handler is not None:
            self._error_handler.handle(exc, ErrorSeverity.WARNING, context)
        else:
            self._logger.warning(f"{type(exc).__name__}: {exc}")
        return response_cls(success=False, error=str(exc))
