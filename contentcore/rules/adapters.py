"""
Adapter mapping the validated Rules model onto every component RulesPort.
"""

from __future__ import annotations

from contentcore.rules.models import Rules


class RulesAdapter:
    """Adapter to map generic Rules to the component RulesPorts."""

    def __init__(self, rules: Rules):
        self._rules = rules

    # markup
    def get_markup_attrs(self) -> dict[str, str]:
        m = self._rules.markup
        return {
            "editable_attr": m.editable_attr,
            "region_id_attr": m.region_id_attr,
            "region_index_attr": m.region_index_attr,
        }

    def get_introduction_max(self) -> int:
        return self._rules.versioning.introduction_max

    # catalog
    def get_status_labels(self) -> tuple[str, str]:
        c = self._rules.catalog
        return c.active_label, c.inactive_label

    # redirects
    def get_reserved_paths(self) -> list[str]:
        return list(self._rules.redirects.reserved_paths)

    def get_redirect_status_code(self) -> int:
        return self._rules.redirects.status_code

    # save
    def get_field_limits(self) -> dict[str, int]:
        v = self._rules.versioning
        return {
            "title": v.title_max,
            "category": v.category_max,
            "introduction": v.introduction_max,
        }

    def get_save_attempts(self) -> int:
        return self._rules.versioning.save_retry_attempts

    # publishing
    def get_cdn_provider(self) -> str:
        return self._rules.publishing.cdn_provider
