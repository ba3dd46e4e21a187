"""
Service wiring.

ServiceContext builds every collaborator from Rules once, registers the two
command handlers with the gateway, and hands out units of work for either the
SQLite database or a shared in-memory store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from contentcore.adapters.clock import SystemClock
from contentcore.adapters.memory import InMemoryDatabase, InMemoryUnitOfWork
from contentcore.adapters.sqlite.repos import SQLiteUnitOfWork
from contentcore.components.catalog import CatalogProjector
from contentcore.components.dispatch import CommandGateway
from contentcore.components.markup import MarkupNormalizer, create_normalizer
from contentcore.components.propagation import (
    PublishDesignCommand,
    PublishDesignHandler,
    PublishDesignOutcome,
)
from contentcore.components.publishing import PagePublisher, create_cdn_driver
from contentcore.components.redirects import SlugRedirectHandler
from contentcore.components.save import (
    SaveContentCommand,
    SaveContentHandler,
    SaveContentOutcome,
)
from contentcore.core.ports.db import UnitOfWorkPort
from contentcore.core.ports.time import ClockPort
from contentcore.domain.result import CancelToken
from contentcore.rules.adapters import RulesAdapter
from contentcore.rules.models import Rules


@dataclass
class ServiceContext:
    rules: Rules
    clock: ClockPort
    normalizer: MarkupNormalizer
    catalog: CatalogProjector
    publisher: PagePublisher
    redirects: SlugRedirectHandler
    gateway: CommandGateway
    db_path: str | None = None
    memory: InMemoryDatabase | None = None

    @classmethod
    def create(
        cls,
        rules: Rules,
        db_path: str | None = None,
        clock: ClockPort | None = None,
        cdn: Any = None,
    ) -> ServiceContext:
        """
        Wire the engine.

        With no db_path every unit of work shares one in-memory database.
        `cdn` overrides the driver named in rules.publishing.cdn_provider.
        """
        clock = clock or SystemClock()
        adapter = RulesAdapter(rules)

        normalizer = create_normalizer(adapter)
        catalog = CatalogProjector(normalizer, adapter)
        publisher = PagePublisher(cdn or create_cdn_driver(adapter.get_cdn_provider()), clock)
        redirects = SlugRedirectHandler(clock, adapter)

        gateway = CommandGateway()
        gateway.register(
            SaveContentCommand,
            SaveContentOutcome,
            SaveContentHandler(normalizer, catalog, publisher, redirects, clock, adapter),
        )
        gateway.register(
            PublishDesignCommand,
            PublishDesignOutcome,
            PublishDesignHandler(normalizer, catalog, publisher, clock),
        )

        return cls(
            rules=rules,
            clock=clock,
            normalizer=normalizer,
            catalog=catalog,
            publisher=publisher,
            redirects=redirects,
            gateway=gateway,
            db_path=db_path,
            memory=None if db_path else InMemoryDatabase(),
        )

    def unit_of_work(self) -> UnitOfWorkPort:
        if self.db_path:
            return SQLiteUnitOfWork(self.db_path)
        assert self.memory is not None
        return InMemoryUnitOfWork(self.memory)

    async def execute(self, command: Any, cancel: CancelToken | None = None) -> Any:
        """Dispatch a command inside a fresh unit of work."""
        async with self.unit_of_work() as uow:
            return await self.gateway.send(command, uow=uow, cancel=cancel)
