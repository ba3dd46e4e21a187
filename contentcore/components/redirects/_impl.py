"""
Path helpers for the redirect handler.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_SEPARATORS = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9\-/]")
_DASHES = re.compile(r"-{2,}")


@dataclass(frozen=True)
class RedirectConfig:
    status_code: int = 301
    reserved_paths: frozenset[str] = field(default_factory=frozenset)


DEFAULT_CONFIG = RedirectConfig()


def normalize_path(path: str | None) -> str:
    """Lowercase, trim slashes, collapse whitespace to hyphens."""
    if not path:
        return ""
    value = path.strip().strip("/").lower()
    value = _SEPARATORS.sub("-", value)
    value = _DISALLOWED.sub("", value)
    return _DASHES.sub("-", value)


def is_reserved(path: str | None, config: RedirectConfig = DEFAULT_CONFIG) -> bool:
    """True when the first segment of a path is reserved by the application."""
    normalized = normalize_path(path)
    if not normalized:
        return False
    first_segment = normalized.split("/", 1)[0]
    return first_segment in config.reserved_paths


def slugify(title: str | None) -> str:
    """URL path segment for a title: 'Hello, World!' -> 'hello-world'."""
    if not title:
        return ""
    value = title.strip().lower()
    value = re.sub(r"[^\w\s-]", "", value)
    value = _SEPARATORS.sub("-", value)
    value = re.sub(r"[^a-z0-9\-]", "", value)
    return _DASHES.sub("-", value).strip("-")
