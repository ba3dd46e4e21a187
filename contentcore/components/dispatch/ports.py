"""
Dispatch component port definitions.
"""

from __future__ import annotations

from typing import Any, ClassVar, Protocol

from contentcore.core.ports.db import UnitOfWorkPort
from contentcore.domain.result import CancelToken


class CommandPort(Protocol):
    """A command declares the type carried by its Success result."""

    result_type: ClassVar[type]


class CommandHandlerPort(Protocol):
    """Handles one command type inside the caller's unit of work."""

    async def handle(
        self,
        command: Any,
        *,
        uow: UnitOfWorkPort,
        cancel: CancelToken | None = None,
    ) -> Any: ...
