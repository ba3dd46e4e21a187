"""
Dispatch component - routes commands to their registered handler.

Handlers are registered explicitly against (command type, result type). The
lookup at send time is a dictionary access keyed on the command's class and
its declared result type.

Invariants:
- I1: at most one handler per (command type, result type)
- I2: send returns a CommandResult whose Success value is the declared type
- I3: the unit of work and cancel token reach the handler unchanged
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

from contentcore.core.ports.db import UnitOfWorkPort
from contentcore.domain.errors import (
    DuplicateHandlerError,
    HandlerContractViolation,
    HandlerNotFound,
)
from contentcore.domain.result import RESULT_VARIANTS, CancelToken, Success, check_cancelled

from .ports import CommandHandlerPort

logger = logging.getLogger(__name__)


class CommandGateway:
    """Explicit registry of command handlers."""

    def __init__(self) -> None:
        self._handlers: dict[tuple[type, type], CommandHandlerPort] = {}

    def register(
        self,
        command_type: type,
        result_type: type,
        handler: CommandHandlerPort,
    ) -> None:
        key = (command_type, result_type)
        if key in self._handlers:
            raise DuplicateHandlerError(
                f"Handler already registered for {command_type.__name__} -> {result_type.__name__}"
            )
        self._handlers[key] = handler
        logger.debug(
            "Registered %s for %s -> %s",
            type(handler).__name__,
            command_type.__name__,
            result_type.__name__,
        )

    def handles(self, command_type: type, result_type: type | None = None) -> bool:
        if result_type is None:
            result_type = getattr(command_type, "result_type", None)
            if result_type is None:
                return False
        return (command_type, result_type) in self._handlers

    def _resolve(self, command: Any) -> tuple[CommandHandlerPort, type]:
        command_type = type(command)
        result_type = getattr(command_type, "result_type", None)
        if not isinstance(result_type, type):
            raise HandlerContractViolation(
                f"{command_type.__name__} does not declare a result_type"
            )

        handler = self._handlers.get((command_type, result_type))
        if handler is None:
            raise HandlerNotFound(command_type, result_type)
        return handler, result_type

    async def send(
        self,
        command: Any,
        *,
        uow: UnitOfWorkPort,
        cancel: CancelToken | None = None,
    ) -> Any:
        """
        Dispatch a command and return its CommandResult.

        Raises:
            HandlerNotFound: nothing registered for the command.
            HandlerContractViolation: the handler did not return an awaitable
                CommandResult carrying the declared result type.
            OperationCancelled: the token fired before dispatch.
        """
        if command is None:
            raise ValueError("command is required")

        handler, result_type = self._resolve(command)
        check_cancelled(cancel)

        pending = handler.handle(command, uow=uow, cancel=cancel)
        if not inspect.isawaitable(pending):
            raise HandlerContractViolation(
                f"Handler for {type(command).__name__} did not return an awaitable"
            )

        result = await pending

        if not isinstance(result, RESULT_VARIANTS):
            raise HandlerContractViolation(
                f"Handler for {type(command).__name__} returned "
                f"{type(result).__name__}, not a CommandResult"
            )
        if isinstance(result, Success) and not isinstance(result.value, result_type):
            raise HandlerContractViolation(
                f"Handler for {type(command).__name__} returned Success carrying "
                f"{type(result.value).__name__}, expected {result_type.__name__}"
            )
        return result
