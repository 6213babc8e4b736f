"""Publish/subscribe events for observing a migration run.

Steps, jobs and the pipeline publish frozen event dataclasses to an
``EventBus``; the CLI attaches a ``LoggingSubscriber`` and progress
handlers. Handler failures are logged and never interrupt a run.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .context import PipelineContext
from .result import Result

T = TypeVar("T")
EventHandler = Callable[[Any], None]


@dataclass(frozen=True)
class BaseEvent:
    """Fields common to all events."""

    timestamp: float
    run_id: str

    def __post_init__(self) -> None:
        if self.timestamp < 0:
            raise ValueError("Timestamp cannot be negative")


@dataclass(frozen=True)
class PipelineStartedEvent(BaseEvent):
    """Published when a pipeline begins processing one file."""

    context: PipelineContext


@dataclass(frozen=True)
class PipelineCompletedEvent(BaseEvent):
    """Published when a pipeline finishes, successfully or not."""

    context: PipelineContext
    final_result: Result[Any]
    duration_ms: float


@dataclass(frozen=True)
class StepStartedEvent(BaseEvent):
    context: PipelineContext
    step_name: str
    step_type: str


@dataclass(frozen=True)
class StepCompletedEvent(BaseEvent):
    context: PipelineContext
    step_name: str
    step_type: str
    result: Result[Any]
    duration_ms: float


@dataclass(frozen=True)
class JobStartedEvent(BaseEvent):
    context: PipelineContext
    job_name: str
    job_type: str
    task_count: int


@dataclass(frozen=True)
class JobCompletedEvent(BaseEvent):
    context: PipelineContext
    job_name: str
    job_type: str
    final_result: Result[Any]
    duration_ms: float


@dataclass(frozen=True)
class TransformationCompletedEvent(BaseEvent):
    """Published after a spec file has been rewritten in memory.

    ``statistics`` holds counts such as ``chains_rewritten``,
    ``test_blocks_rewritten`` and ``todo_markers``.
    """

    context: PipelineContext
    transformation_type: str
    statistics: dict[str, Any]


@dataclass(frozen=True)
class ErrorEvent(BaseEvent):
    """Published when a component reports an unexpected exception."""

    context: PipelineContext
    error: Exception
    error_type: str
    component: str


class EventBus:
    """Thread-safe event dispatcher keyed by concrete event type.

    Handlers run synchronously on the publishing thread, outside the
    internal lock.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Register ``handler`` for events of exactly ``event_type``."""
        with self._lock:
            self._subscribers[event_type].append(handler)
            self._logger.debug(f"Subscribed handler {handler} to {event_type.__name__}")

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Remove a handler; unknown handlers are ignored."""
        with self._lock:
            if handler in self._subscribers.get(event_type, []):
                self._subscribers[event_type].remove(handler)
                self._logger.debug(f"Unsubscribed handler {handler} from {event_type.__name__}")

    def clear_subscribers(self, event_type: type[T] | None = None) -> None:
        """Drop subscribers for one event type, or all of them."""
        with self._lock:
            if event_type:
                self._subscribers[event_type].clear()
            else:
                self._subscribers.clear()

    def get_subscriber_count(self, event_type: type[T]) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def publish(self, event: Any) -> None:
        """Deliver ``event`` to every handler registered for its type.

        An exception from one handler is logged and delivery continues.
        """
        event_type = type(event)
        with self._lock:
            handlers = list(self._subscribers.get(event_type, []))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(f"Event handler error for {event_type.__name__}: {e}", exc_info=True)


class EventSubscriber(ABC):
    """Base class for objects that subscribe a fixed set of handlers."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._setup_subscriptions()

    @abstractmethod
    def _setup_subscriptions(self) -> None:
        """Register handlers on ``self.event_bus``."""

    @abstractmethod
    def unsubscribe_all(self) -> None:
        """Remove every handler registered by ``_setup_subscriptions``."""


class LoggingSubscriber(EventSubscriber):
    """Writes pipeline, step, transformation and error events to the log.

    Step events are logged at DEBUG, or at INFO when ``verbose``.
    """

    def __init__(self, event_bus: EventBus, verbose: bool = False):
        self._logger = logging.getLogger(__name__)
        self._step_level = logging.INFO if verbose else logging.DEBUG
        super().__init__(event_bus)

    def _handlers(self) -> list[tuple[type, EventHandler]]:
        return [
            (PipelineStartedEvent, self._on_pipeline_started),
            (PipelineCompletedEvent, self._on_pipeline_completed),
            (StepStartedEvent, self._on_step_started),
            (StepCompletedEvent, self._on_step_completed),
            (TransformationCompletedEvent, self._on_transformation_completed),
            (ErrorEvent, self._on_error),
        ]

    def _setup_subscriptions(self) -> None:
        for event_type, handler in self._handlers():
            self.event_bus.subscribe(event_type, handler)

    def unsubscribe_all(self) -> None:
        for event_type, handler in self._handlers():
            self.event_bus.unsubscribe(event_type, handler)

    def _on_pipeline_started(self, event: PipelineStartedEvent) -> None:
        self._logger.info(
            f"Pipeline started: {event.context.source_file} -> {event.context.target_file} (run_id: {event.run_id})"
        )

    def _on_pipeline_completed(self, event: PipelineCompletedEvent) -> None:
        status = event.final_result.status.value.upper()
        self._logger.info(f"Pipeline completed in {event.duration_ms:.2f}ms: {status}")

    def _on_step_started(self, event: StepStartedEvent) -> None:
        self._logger.log(self._step_level, f"Step started: {event.step_name} ({event.step_type})")

    def _on_step_completed(self, event: StepCompletedEvent) -> None:
        status = event.result.status.value.upper()
        self._logger.log(self._step_level, f"Step completed in {event.duration_ms:.2f}ms: {event.step_name} ({status})")

    def _on_transformation_completed(self, event: TransformationCompletedEvent) -> None:
        stats = ", ".join(f"{key}={value}" for key, value in sorted(event.statistics.items()))
        self._logger.info(f"Transformed {event.context.source_file}: {stats}")

    def _on_error(self, event: ErrorEvent) -> None:
        self._logger.error(f"Error in {event.component}: {event.error}")
