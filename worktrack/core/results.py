"""Typed outcomes of workflow operations."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class WorkflowErrorKind(str, Enum):
    """Failure categories surfaced by the workflow core."""

    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    UNAUTHORIZED = "unauthorized"


class WorkflowUnwrapError(RuntimeError):
    """Raised when unwrapping a failed result."""


@dataclass(frozen=True)
class WorkflowResult(Generic[T]):
    """Either the post-mutation record or a failure kind with a reason code.

    Reason codes are machine-readable (``task_already_completed``); turning
    them into messages is left to the caller.
    """

    value: Optional[T] = None
    error: Optional[WorkflowErrorKind] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "WorkflowResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: WorkflowErrorKind, reason: Optional[str] = None) -> "WorkflowResult[T]":
        return cls(error=error, reason=reason)

    @classmethod
    def not_found(cls, reason: str = "task_not_found") -> "WorkflowResult[T]":
        return cls.failure(WorkflowErrorKind.NOT_FOUND, reason)

    @classmethod
    def invalid_transition(cls, reason: str) -> "WorkflowResult[T]":
        return cls.failure(WorkflowErrorKind.INVALID_TRANSITION, reason)

    @classmethod
    def unauthorized(cls, reason: str = "missing_capability") -> "WorkflowResult[T]":
        return cls.failure(WorkflowErrorKind.UNAUTHORIZED, reason)

    def unwrap(self) -> T:
        if self.error is not None:
            raise WorkflowUnwrapError(f"{self.error.value}: {self.reason}")
        return self.value
