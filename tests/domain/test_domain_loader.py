"""
Tests for domain configuration loading and validation.
"""

import pytest
import yaml
from pydantic import ValidationError

from drapekit.domain import (
    clear_domain_cache,
    get_domain,
    list_domains,
    load_domain,
)
from drapekit.domain.loader import CONFIGS_DIR
from drapekit.ir.enums import Area, Icon


@pytest.fixture
def draping_data():
    with open(CONFIGS_DIR / "draping.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_domain(tmp_path, data):
    path = tmp_path / "custom.yaml"
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
    return path


class TestBundledDomain:

    def test_default_domain(self):
        domain = get_domain()
        assert domain.domain.id == "draping"

    def test_cached(self):
        assert get_domain("draping") is get_domain("draping")

    def test_cache_clear_reloads(self):
        first = get_domain("draping")
        clear_domain_cache()
        second = get_domain("draping")

        assert first is not second
        assert first.model_dump() == second.model_dump()

    def test_listed(self):
        assert "draping" in list_domains()

    def test_unknown_domain(self):
        with pytest.raises(FileNotFoundError):
            get_domain("does_not_exist")

    def test_tables_use_closed_vocabularies(self, domain):
        assert {r.value for r in domain.icons.rules} <= Icon.values()
        assert set(domain.icons.fallback_cycle) <= Icon.values()
        assert {r.value for r in domain.areas.rules} <= Area.values()
        assert set(domain.areas.fallback_cycle) <= Area.values()

    def test_keywords_lowercased(self, domain):
        for rule in domain.icons.rules + domain.areas.rules:
            assert all(k == k.lower() for k in rule.keywords)

    def test_is_conversational(self, domain):
        assert domain.is_conversational("这张图展示了一条裙子")
        assert domain.is_conversational("Based on the image")
        assert not domain.is_conversational("公主线连衣裙")


class TestLoadDomain:

    def test_round_trip(self, tmp_path, draping_data):
        domain = load_domain(write_domain(tmp_path, draping_data))
        assert domain.placeholders.design_name == "立裁设计"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_domain(tmp_path / "missing.yaml")

    def test_unknown_icon_rejected(self, tmp_path, draping_data):
        draping_data["icons"]["rules"][0]["value"] = "hammer"

        with pytest.raises(ValidationError):
            load_domain(write_domain(tmp_path, draping_data))

    def test_cycle_must_start_diverse(self, tmp_path, draping_data):
        draping_data["areas"]["fallback_cycle"] = ["chest", "chest", "waist"]

        with pytest.raises(ValidationError):
            load_domain(write_domain(tmp_path, draping_data))

    def test_bad_regex_rejected(self, tmp_path, draping_data):
        draping_data["conversational_patterns"].append("(unclosed")

        with pytest.raises(ValidationError):
            load_domain(write_domain(tmp_path, draping_data))

    def test_placeholder_must_not_be_conversational(self, tmp_path, draping_data):
        draping_data["placeholders"]["generic_design_name"] = "图片中的设计"

        with pytest.raises(ValidationError):
            load_domain(write_domain(tmp_path, draping_data))

    def test_defaults_required(self, tmp_path, draping_data):
        draping_data["default_tools"] = []

        with pytest.raises(ValidationError):
            load_domain(write_domain(tmp_path, draping_data))

    def test_unknown_keys_rejected(self, tmp_path, draping_data):
        draping_data["placeholders"]["typo_field"] = "x"

        with pytest.raises(ValidationError):
            load_domain(write_domain(tmp_path, draping_data))
