"""
Tagged command results and the cancellation token.

Every handler returns exactly one of:

- Success(value)            the command completed
- ValidationFailure(errors) field-level input errors, no storage touched
- NotFound(message)         a referenced entity does not exist
- Fault(message)            an internal error; the message never carries detail
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar

from contentcore.domain.errors import OperationCancelled

T = TypeVar("T")


@dataclass(frozen=True)
class FieldError:
    """Validation error for one input field."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    kind: Literal["success"] = "success"

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class ValidationFailure:
    errors: list[FieldError] = field(default_factory=list)
    kind: Literal["validation"] = "validation"

    @property
    def success(self) -> bool:
        return False

    def by_field(self) -> dict[str, list[str]]:
        """Group messages by field name."""
        grouped: dict[str, list[str]] = {}
        for err in self.errors:
            grouped.setdefault(err.field or "", []).append(err.message)
        return grouped


@dataclass(frozen=True)
class NotFound:
    message: str
    kind: Literal["not_found"] = "not_found"

    @property
    def success(self) -> bool:
        return False


@dataclass(frozen=True)
class Fault:
    message: str
    kind: Literal["fault"] = "fault"

    @property
    def success(self) -> bool:
        return False


CommandResult = Success[T] | ValidationFailure | NotFound | Fault

RESULT_VARIANTS = (Success, ValidationFailure, NotFound, Fault)


class CancelToken:
    """Cooperative cancellation signal passed through gateway and handlers."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Operation cancelled by caller")


def check_cancelled(cancel: CancelToken | None) -> None:
    """Raise OperationCancelled if a token is given and has fired."""
    if cancel is not None:
        cancel.raise_if_cancelled()
