"""
Markup component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ._impl import MergeReport


@dataclass(frozen=True)
class NormalizeMarkupInput:
    """Input for adding editable region markers."""

    html: str


@dataclass(frozen=True)
class ExtractIntroductionInput:
    """Input for deriving a plain-text introduction."""

    html: str


@dataclass(frozen=True)
class MergeRegionsInput:
    """Input for regenerating a body from a template."""

    old_html: str
    template_html: str


@dataclass(frozen=True)
class MarkupOutput:
    """Output containing transformed markup or text."""

    text: str
    success: bool = True


@dataclass(frozen=True)
class MergeOutput:
    """Output of a region merge."""

    html: str
    report: MergeReport = field(default_factory=MergeReport)
    success: bool = True
