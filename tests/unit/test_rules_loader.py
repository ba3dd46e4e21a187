from pathlib import Path

import pytest

from contentcore.rules.adapters import RulesAdapter
from contentcore.rules.loader import load_rules, parse_rules


def test_project_rules_file_loads() -> None:
    rules = load_rules(Path("rules.yaml"))
    assert rules.project.slug == "contentcore"
    assert rules.markup.region_id_attr == "data-ccms-ceid"
    assert rules.versioning.save_retry_attempts == 2
    assert "admin" in rules.redirects.reserved_paths


def test_plain_yaml_without_fence() -> None:
    rules = parse_rules("project:\n  slug: demo\n  rules_version: '2'\n")
    assert rules.project.slug == "demo"
    assert rules.versioning.title_max == 254
    assert rules.publishing.cdn_provider == "none"


def test_fenced_block_is_extracted() -> None:
    text = "# notes\n\n```yaml\nproject:\n  slug: fenced\n  rules_version: '1'\n```\ntrailing"
    assert parse_rules(text).project.slug == "fenced"


def test_invalid_yaml_raises_value_error() -> None:
    with pytest.raises(ValueError, match="Invalid YAML"):
        parse_rules("project: [unclosed")


def test_schema_violation_raises_value_error() -> None:
    with pytest.raises(ValueError, match="validation failed"):
        parse_rules(
            "project:\n  slug: x\n  rules_version: '1'\n"
            "versioning:\n  save_retry_attempts: 0\n"
        )


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_adapter_exposes_component_settings(rules) -> None:
    adapter = RulesAdapter(rules)
    assert adapter.get_markup_attrs()["region_index_attr"] == "data-ccms-index"
    assert adapter.get_introduction_max() == 512
    assert adapter.get_status_labels() == ("Active", "Inactive")
    assert adapter.get_redirect_status_code() == 301
    assert adapter.get_field_limits() == {"title": 254, "category": 64, "introduction": 512}
    assert adapter.get_save_attempts() == 2
