"""Outcome values shared by steps, jobs and the public API.

``Result[T]`` is an immutable record of how an operation ended: with a
value, with a value plus warnings, with an exception, or not at all
(skipped). Migration code returns these instead of raising so that one
failing spec file never aborts a directory run.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ResultStatus(Enum):
    """Terminal states a ``Result`` can be in."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Immutable operation outcome.

    Use the ``success``/``failure``/``warning``/``skipped`` constructors
    rather than building instances directly; they keep ``data`` and
    ``error`` mutually exclusive.
    """

    status: ResultStatus
    data: T | None = None
    error: Exception | None = None
    warnings: list[str] | None = None
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.status == ResultStatus.SUCCESS and self.error is not None:
            raise ValueError("Success results cannot have errors")
        if self.status == ResultStatus.ERROR and self.data is not None:
            raise ValueError("Error results cannot have data")
        if self.warnings is None:
            object.__setattr__(self, "warnings", [])
        if self.metadata is None:
            object.__setattr__(self, "metadata", {})

    @classmethod
    def success(cls, data: T, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Wrap a value produced without complaint.

        Args:
            data: The produced value.
            metadata: Optional extra information for callers.

        Returns:
            A ``SUCCESS`` result.
        """
        return cls(status=ResultStatus.SUCCESS, data=data, metadata=metadata or {})

    @classmethod
    def failure(cls, error: Exception, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Wrap an exception that ended the operation.

        Args:
            error: The exception describing what went wrong.
            metadata: Optional extra information for callers.

        Returns:
            An ``ERROR`` result.
        """
        return cls(status=ResultStatus.ERROR, error=error, metadata=metadata or {})

    @classmethod
    def warning(cls, data: T, warnings: list[str], metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Wrap a value that was produced but deserves attention.

        Args:
            data: The produced value.
            warnings: Human readable warning messages.
            metadata: Optional extra information for callers.

        Returns:
            A ``WARNING`` result.
        """
        return cls(status=ResultStatus.WARNING, data=data, warnings=warnings, metadata=metadata or {})

    @classmethod
    def skipped(cls, reason: str, metadata: dict[str, Any] | None = None) -> "Result[T]":
        """Record that the operation deliberately did nothing.

        The reason is stored under ``metadata["reason"]``.

        Args:
            reason: Why nothing was done (for example, no Cypress usage).
            metadata: Optional extra information for callers.

        Returns:
            A ``SKIPPED`` result.
        """
        return cls(status=ResultStatus.SKIPPED, metadata={"reason": reason, **(metadata or {})})

    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    def is_error(self) -> bool:
        return self.status == ResultStatus.ERROR

    def is_warning(self) -> bool:
        return self.status == ResultStatus.WARNING

    def is_skipped(self) -> bool:
        return self.status == ResultStatus.SKIPPED

    @property
    def reason(self) -> str | None:
        """Reason given for a skipped result, if any."""
        return (self.metadata or {}).get("reason")

    def map(self, func: Callable[[T], R]) -> "Result[R]":
        """Transform the carried value, keeping status and warnings.

        Errors and skips pass through untouched. An exception raised by
        ``func`` becomes a failure.
        """
        if self.is_error():
            return Result[R](
                status=ResultStatus.ERROR, error=self.error, warnings=self.warnings, metadata=self.metadata
            )
        if self.is_skipped():
            return Result[R](status=ResultStatus.SKIPPED, metadata=self.metadata)
        if self.data is None:
            return Result.failure(ValueError("Cannot map over None data"), self.metadata)

        try:
            new_data = func(self.data)
        except Exception as e:
            return Result.failure(e, self.metadata)
        status = ResultStatus.WARNING if self.warnings else ResultStatus.SUCCESS
        return Result[R](status=status, data=new_data, warnings=self.warnings, metadata=self.metadata)

    def bind(self, func: Callable[[T], "Result[R]"]) -> "Result[R]":
        """Feed the carried value into another ``Result``-returning call."""
        if self.is_error():
            return Result[R](
                status=ResultStatus.ERROR, error=self.error, warnings=self.warnings, metadata=self.metadata
            )
        if self.is_skipped():
            return Result[R](status=ResultStatus.SKIPPED, metadata=self.metadata)
        if self.data is None:
            return Result.failure(ValueError("Cannot bind over None data"), self.metadata)

        try:
            return func(self.data)
        except Exception as e:
            return Result.failure(e, self.metadata)

    def unwrap(self) -> T:
        """Return the carried value.

        Raises:
            Exception: The stored error for failures, ``RuntimeError`` for
                skipped or empty results.
        """
        if self.is_error():
            raise self.error or RuntimeError("Result contains error")
        if self.is_skipped():
            raise RuntimeError(f"Result was skipped: {self.reason}")
        if self.data is None:
            raise RuntimeError("Result contains no data")
        return self.data

    def unwrap_or(self, default_value: T) -> T:
        """Return the carried value, or ``default_value`` when there is none."""
        if self.status in (ResultStatus.SUCCESS, ResultStatus.WARNING) and self.data is not None:
            return self.data
        return default_value

    def to_dict(self) -> dict[str, Any]:
        """Serializable view used by reports and dry-run output."""
        return {
            "status": self.status.value,
            "data": self.data,
            "error": str(self.error) if self.error else None,
            "warnings": self.warnings,
            "metadata": self.metadata,
        }

    def __str__(self) -> str:
        if self.is_success():
            return f"Result(success, data={self.data})"
        if self.is_error():
            return f"Result(error, error={self.error})"
        if self.is_warning():
            return f"Result(warning, data={self.data}, warnings={self.warnings})"
        return f"Result(skipped, reason={self.reason})"
