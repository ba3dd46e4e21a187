"""
Markup component - editable region markers, introductions, region merge.
"""

from ._impl import (
    DEFAULT_CONFIG,
    MarkupConfig,
    MarkupNormalizer,
    MergeReport,
    collect_regions,
    ensure_editable_markers,
    extract_introduction,
    merge_regions,
    parse_markup,
)
from .component import (
    create_normalizer,
    run_extract_introduction,
    run_merge,
    run_normalize,
)
from .models import (
    ExtractIntroductionInput,
    MarkupOutput,
    MergeOutput,
    MergeRegionsInput,
    NormalizeMarkupInput,
)
from .ports import MarkupNormalizerPort, RulesPort

__all__ = [
    # Entry points
    "create_normalizer",
    "run_extract_introduction",
    "run_merge",
    "run_normalize",
    # Models
    "ExtractIntroductionInput",
    "MarkupOutput",
    "MergeOutput",
    "MergeRegionsInput",
    "NormalizeMarkupInput",
    # Ports
    "MarkupNormalizerPort",
    "RulesPort",
    # Implementation
    "DEFAULT_CONFIG",
    "MarkupConfig",
    "MarkupNormalizer",
    "MergeReport",
    "collect_regions",
    "ensure_editable_markers",
    "extract_introduction",
    "merge_regions",
    "parse_markup",
]
