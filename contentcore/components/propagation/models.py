"""
Propagation component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar
from uuid import UUID


@dataclass(frozen=True)
class PublishDesignOutcome:
    """
    Result of publishing a design version.

    `failed` lists article numbers whose regeneration did not complete; they
    keep their previous version and need a manual re-publish.
    """

    template_id: UUID
    updated: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    republished: list[int] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class PublishDesignCommand:
    result_type: ClassVar[type] = PublishDesignOutcome

    design_version_id: UUID
    editor_id: UUID
