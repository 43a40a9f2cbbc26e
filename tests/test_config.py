"""Tests for configuration loading and merging."""

from __future__ import annotations

import json

import pytest

from seedsight.core.config import (
    SeedSightConfig,
    dict_to_config,
    generate_default_config,
    get_config,
    load_config,
    load_env_config,
    merge_configs,
    reset_config,
    save_config,
    set_config,
)


class TestLoadConfig:
    """Test the file/env precedence chain."""

    def test_defaults(self):
        config = SeedSightConfig()
        assert config.fetch.concurrency_limit == 5
        assert config.fetch.cache_ttl_seconds == 300
        assert config.filters.types == [2]

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "seedsight.yaml"
        path.write_text("fetch:\n  concurrency_limit: 8\napi:\n  match_count: 20\n")
        config = load_config(path, include_env=False)
        assert config.fetch.concurrency_limit == 8
        assert config.api.match_count == 20

    def test_toml_file(self, tmp_path):
        path = tmp_path / "seedsight.toml"
        path.write_text('[logging]\nlevel = "DEBUG"\n')
        assert load_config(path, include_env=False).logging.level == "DEBUG"

    def test_json_file(self, tmp_path):
        path = tmp_path / "seedsight.json"
        path.write_text(json.dumps({"filters": {"types": [1, 2]}}))
        assert load_config(path, include_env=False).filters.types == [1, 2]

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "seedsight.yaml"
        path.write_text("fetch:\n  concurrency_limit: 8\n")
        monkeypatch.setenv("SEEDSIGHT_FETCH_CONCURRENCY", "2")
        monkeypatch.setenv("MCSR_API_KEY", "12345")
        monkeypatch.setenv("MCSR_API_BASE", "https://mirror.example")
        config = load_config(path)
        assert config.fetch.concurrency_limit == 2
        assert config.api.api_key == "12345"
        assert config.api.base_url == "https://mirror.example"

    def test_env_type_conversion(self, monkeypatch):
        monkeypatch.setenv("SEEDSIGHT_CACHE_TTL", "12.5")
        assert load_env_config()["fetch"]["cache_ttl_seconds"] == 12.5

    def test_unknown_keys_ignored(self):
        config = dict_to_config({"fetch": {"bogus": 1}, "nonsense": {"a": 1}})
        assert not hasattr(config.fetch, "bogus")

    def test_merge_configs_recursive(self):
        merged = merge_configs({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
        assert merged == {"a": {"x": 1, "y": 3}}


class TestSaveConfig:
    """Test config persistence."""

    def test_yaml_round_trip(self, tmp_path):
        config = SeedSightConfig()
        config.fetch.concurrency_limit = 3
        path = tmp_path / "out.yaml"
        save_config(config, path)
        assert load_config(path, include_env=False).fetch.concurrency_limit == 3

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError):
            save_config(SeedSightConfig(), tmp_path / "out.ini")

    def test_generate_default_yaml(self, tmp_path):
        path = tmp_path / "seedsight.yaml"
        generate_default_config(path)
        config = load_config(path, include_env=False)
        assert config.fetch.cache_ttl_seconds == 300


class TestGlobalConfig:
    def test_set_and_reset(self):
        custom = SeedSightConfig()
        custom.api.match_count = 7
        set_config(custom)
        assert get_config().api.match_count == 7
        reset_config()
