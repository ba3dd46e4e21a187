"""
Exception taxonomy.

Expected outcomes (validation failures, missing entities) are returned as
result variants, never raised. The exceptions below are for conditions a
caller cannot express as a value:

- ConcurrencyConflict: optimistic token mismatch on append; retried once by
  the save handler, then surfaced as a Fault.
- BusinessRuleViolation: raised by collaborators and propagated verbatim.
- InfrastructureError: storage or network failure inside an adapter.
- HandlerNotFound / HandlerContractViolation / DuplicateHandlerError:
  gateway wiring problems.
- OperationCancelled: the caller's cancel token fired.
"""

from __future__ import annotations


class ContentCoreError(Exception):
    """Base class for all contentcore errors."""


class ConcurrencyConflict(ContentCoreError):
    def __init__(self, article_number: int, expected_token: object, actual_token: object) -> None:
        self.article_number = article_number
        self.expected_token = expected_token
        self.actual_token = actual_token
        super().__init__(
            f"Concurrent modification of article {article_number}: "
            f"expected head {expected_token}, found {actual_token}"
        )


class BusinessRuleViolation(ContentCoreError):
    def __init__(self, code: str, message: str, field: str | None = None) -> None:
        self.code = code
        self.message = message
        self.field = field
        super().__init__(message)


class InfrastructureError(ContentCoreError):
    """Storage, network or CDN failure inside an adapter."""


class HandlerNotFound(ContentCoreError):
    def __init__(self, command_type: type, result_type: type) -> None:
        self.command_type = command_type
        self.result_type = result_type
        super().__init__(
            f"No handler registered for {command_type.__name__} -> {result_type.__name__}"
        )


class HandlerContractViolation(ContentCoreError):
    """Handler returned something other than the declared result."""


class DuplicateHandlerError(ContentCoreError):
    """A handler is already registered for the command/result pair."""


class OperationCancelled(ContentCoreError):
    """The cancel token fired before the operation completed."""
