"""
Markup normalizer - editable region markers, introductions, region merge.

Key behaviors:
- Every contenteditable element gets a stable region id and an ordering index
- Markup with no editable element is wrapped in one editable div
- Introductions come from the first non-empty paragraph (or text block)
- Region-preserving merge: template structure wins, editor content survives
  in every region whose id exists in both trees

Region identity is the id attribute alone. Position and text similarity are
never consulted. When an id is duplicated inside one tree, the first element
in document order is the one that counts.
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from uuid import uuid4

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

logger = logging.getLogger(__name__)

PARSER = "html.parser"

# --- Configuration ---


@dataclass(frozen=True)
class MarkupConfig:
    """Attribute names and limits used by the normalizer."""

    editable_attr: str = "contenteditable"
    region_id_attr: str = "data-ccms-ceid"
    region_index_attr: str = "data-ccms-index"
    introduction_max: int = 512


DEFAULT_CONFIG = MarkupConfig()

_TRUE = re.compile(r"^\s*true\s*$", re.IGNORECASE)

_TEXT_BLOCKS = ("p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote", "div", "span")


# --- Merge report ---


@dataclass
class MergeReport:
    """What the region merge did, for logging and tests."""

    matched: list[str] = field(default_factory=list)
    defaulted: list[str] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)
    fallback: bool = False


# --- Parsing ---


def parse_markup(html: str | None) -> BeautifulSoup | None:
    """Parse a fragment; None when the input is empty or rejected by the parser."""
    if html is None or not html.strip():
        return None
    try:
        return BeautifulSoup(html, PARSER)
    except (ParserRejectedMarkup, TypeError, ValueError, AssertionError):
        logger.warning("Markup rejected by parser; treating as region-free")
        return None


def _new_region_id() -> str:
    return uuid4().hex


def collect_regions(
    soup: BeautifulSoup | None, config: MarkupConfig = DEFAULT_CONFIG
) -> dict[str, Tag]:
    """Map region id -> first element carrying it, in document order."""
    regions: dict[str, Tag] = {}
    if soup is None:
        return regions
    for el in soup.find_all(attrs={config.region_id_attr: True}):
        region_id = el.get(config.region_id_attr)
        if isinstance(region_id, list):
            region_id = " ".join(region_id)
        if region_id and region_id not in regions:
            regions[region_id] = el
    return regions


# --- Normalizer ---


class MarkupNormalizer:
    """HTML operations the save and propagation handlers depend on."""

    def __init__(self, config: MarkupConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def _empty_region(self) -> str:
        c = self.config
        return (
            f'<div {c.editable_attr}="true" {c.region_id_attr}="{_new_region_id()}" '
            f'{c.region_index_attr}="0"></div>'
        )

    def ensure_editable_markers(self, html: str) -> str:
        """
        Give every editable element a stable id and an ordering index.

        Existing ids and indexes are left untouched. Markup the parser rejects
        is returned as-is.
        """
        if html is None or not html.strip():
            return self._empty_region()

        soup = parse_markup(html)
        if soup is None:
            return html

        c = self.config
        editable = soup.find_all(attrs={c.editable_attr: _TRUE})

        if not editable:
            wrapper = soup.new_tag("div")
            wrapper[c.editable_attr] = "true"
            wrapper[c.region_id_attr] = _new_region_id()
            wrapper[c.region_index_attr] = "0"
            for child in list(soup.contents):
                wrapper.append(child.extract())
            soup.append(wrapper)
            return str(soup)

        for index, node in enumerate(editable):
            if not node.get(c.region_id_attr):
                node[c.region_id_attr] = _new_region_id()
            if node.get(c.region_index_attr) is None:
                node[c.region_index_attr] = str(index)

        return str(soup)

    def extract_introduction(self, html: str | None) -> str:
        """First non-empty paragraph as plain text, truncated to the configured max."""
        soup = parse_markup(html)
        if soup is None:
            return ""

        text = ""
        for p in soup.find_all("p"):
            text = p.get_text(" ", strip=True)
            if text:
                break

        if not text:
            for block in soup.find_all(_TEXT_BLOCKS):
                text = block.get_text(" ", strip=True)
                if text:
                    break

        if not text:
            text = soup.get_text(" ", strip=True)

        return text[: self.config.introduction_max]

    def merge_regions_with_report(
        self, old_html: str | None, template_html: str
    ) -> tuple[str, MergeReport]:
        """
        Regenerate a body from the template while keeping editor content.

        For every region in the template: if the old body has a region with the
        same id, its children replace the template's default children.
        Regions only in the template keep their default content; regions only
        in the old body are dropped along with the old structure.
        """
        report = MergeReport()

        new_soup = parse_markup(template_html)
        if new_soup is None:
            report.fallback = True
            return template_html or "", report

        old_regions = collect_regions(parse_markup(old_html), self.config)
        if not old_regions:
            report.fallback = True

        new_regions = collect_regions(new_soup, self.config)

        # Duplicates in the template: only the first element with an id is merged.
        for region_id, new_el in new_regions.items():
            old_el = old_regions.get(region_id)
            if old_el is None:
                report.defaulted.append(region_id)
                continue

            new_el.clear()
            for child in old_el.contents:
                new_el.append(copy.copy(child))
            report.matched.append(region_id)

        report.dropped = [rid for rid in old_regions if rid not in new_regions]
        return str(new_soup), report

    def merge_regions(self, old_html: str | None, template_html: str) -> str:
        merged, _ = self.merge_regions_with_report(old_html, template_html)
        return merged


# --- Module-level helpers ---

_default_normalizer = MarkupNormalizer()


def ensure_editable_markers(html: str) -> str:
    return _default_normalizer.ensure_editable_markers(html)


def extract_introduction(html: str | None) -> str:
    return _default_normalizer.extract_introduction(html)


def merge_regions(old_html: str | None, template_html: str) -> str:
    return _default_normalizer.merge_regions(old_html, template_html)
