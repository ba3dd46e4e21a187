"""
Markup component - editable regions, introductions and region merge.

Invariants:
- I1: every editable element leaving the normalizer carries a region id
- I2: existing region ids are never rewritten
- I3: merged output always has the template's structure
- I4: introductions never exceed the configured maximum
"""

from __future__ import annotations

from ._impl import DEFAULT_CONFIG, MarkupConfig, MarkupNormalizer
from .models import (
    ExtractIntroductionInput,
    MarkupOutput,
    MergeOutput,
    MergeRegionsInput,
    NormalizeMarkupInput,
)
from .ports import RulesPort


def _build_config(rules: RulesPort | None) -> MarkupConfig:
    """Build markup config from rules port."""
    if rules is None:
        return DEFAULT_CONFIG

    attrs = rules.get_markup_attrs()
    return MarkupConfig(
        editable_attr=attrs.get("editable_attr", DEFAULT_CONFIG.editable_attr),
        region_id_attr=attrs.get("region_id_attr", DEFAULT_CONFIG.region_id_attr),
        region_index_attr=attrs.get("region_index_attr", DEFAULT_CONFIG.region_index_attr),
        introduction_max=rules.get_introduction_max(),
    )


def create_normalizer(rules: RulesPort | None = None) -> MarkupNormalizer:
    """Factory for a normalizer configured from rules."""
    return MarkupNormalizer(_build_config(rules))


# --- Component Entry Points ---


def run_normalize(
    inp: NormalizeMarkupInput,
    *,
    rules: RulesPort | None = None,
) -> MarkupOutput:
    """Ensure every editable region has a stable id and index."""
    normalizer = create_normalizer(rules)
    return MarkupOutput(text=normalizer.ensure_editable_markers(inp.html))


def run_extract_introduction(
    inp: ExtractIntroductionInput,
    *,
    rules: RulesPort | None = None,
) -> MarkupOutput:
    """Derive a plain-text introduction from body markup."""
    normalizer = create_normalizer(rules)
    return MarkupOutput(text=normalizer.extract_introduction(inp.html))


def run_merge(
    inp: MergeRegionsInput,
    *,
    rules: RulesPort | None = None,
) -> MergeOutput:
    """
    Regenerate a body against a template, preserving matched regions.

    Args:
        inp: Old body and newly published template body.
        rules: Optional rules port for attribute names.

    Returns:
        MergeOutput with merged markup and a report of matched/defaulted ids.
    """
    normalizer = create_normalizer(rules)
    html, report = normalizer.merge_regions_with_report(inp.old_html, inp.template_html)
    return MergeOutput(html=html, report=report)
