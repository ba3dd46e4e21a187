from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from contentcore.adapters.clock import FixedClock
from contentcore.adapters.memory import InMemoryDatabase, InMemoryUnitOfWork
from contentcore.app_shell.context import ServiceContext
from contentcore.components.publishing import LoggingCdnDriver
from contentcore.domain.entities import ContentVersion
from contentcore.rules.loader import load_rules
from contentcore.rules.models import Rules, default_rules

RULES_FILE = Path(__file__).resolve().parents[1] / "rules.yaml"

EDITOR_ID = UUID("11111111-1111-4111-8111-111111111111")
PUBLISHED_AT = datetime(2024, 6, 1, 9, 0, 0, tzinfo=UTC)


@pytest.fixture
def rules() -> Rules:
    return default_rules()


@pytest.fixture
def shipped_rules() -> Rules:
    """The rules.yaml that ships at the repository root."""
    return load_rules(RULES_FILE)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def editor_id() -> UUID:
    return EDITOR_ID


@pytest.fixture
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def uow(memory_db) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(memory_db)


class RecordingCdnDriver(LoggingCdnDriver):
    """Logging driver that also remembers every purged path."""

    def __init__(self) -> None:
        self.purged: list[str] = []

    async def purge(self, paths: list[str]):
        self.purged.extend(paths)
        return await super().purge(paths)


@pytest.fixture
def cdn() -> RecordingCdnDriver:
    return RecordingCdnDriver()


@pytest.fixture
def ctx(rules, clock, cdn) -> ServiceContext:
    """In-memory context with a recording CDN driver."""
    return ServiceContext.create(rules, clock=clock, cdn=cdn)


@pytest.fixture
def make_version() -> Callable[..., ContentVersion]:
    """Factory for versions; defaults describe an unpublished general page."""

    def _make(article_number: int = 42, version_number: int = 1, **overrides) -> ContentVersion:
        fields = {
            "id": uuid4(),
            "article_number": article_number,
            "version_number": version_number,
            "title": "About Us",
            "content": '<div contenteditable="true" data-ccms-ceid="R1">Hello</div>',
            "editor_id": EDITOR_ID,
            "url_path": "about-us",
            "updated_at": datetime(2024, 6, 1, 8, 0, 0, tzinfo=UTC),
        }
        fields.update(overrides)
        return ContentVersion(**fields)

    return _make
