# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for Config — layered configuration and typed binding."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from pydantic import BaseModel

from snapbridge.core.config import Config, config_properties


class TestConfig:
    def test_get_nested_value(self):
        config = Config({"snapbridge": {"streams": {"capacity": 10}}})
        assert config.get("snapbridge.streams.capacity") == 10

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "default") == "default"

    def test_get_through_non_dict_returns_default(self):
        config = Config({"a": 1})
        assert config.get("a.b", "fallback") == "fallback"

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SNAPBRIDGE_STREAMS_CAPACITY", "64")
        config = Config({"snapbridge": {"streams": {"capacity": 10}}})
        assert config.get("snapbridge.streams.capacity") == "64"

    def test_env_key(self):
        assert Config.env_key("snapbridge.fields.timeout") == "SNAPBRIDGE_FIELDS_TIMEOUT"
        assert Config.env_key("app.max-size") == "SNAPBRIDGE_APP_MAX_SIZE"

    def test_get_section_applies_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SNAPBRIDGE_STREAMS_OVERFLOW", "drop_oldest")
        config = Config({"snapbridge": {"streams": {"capacity": 5, "overflow": "fail"}}})
        assert config.get_section("snapbridge.streams") == {"capacity": 5, "overflow": "drop_oldest"}

    def test_get_section_missing_prefix(self):
        assert Config({}).get_section("snapbridge.streams") == {}


class TestConfigFiles:
    def test_defaults_are_packaged(self):
        config = Config.defaults()
        assert config.get("snapbridge.streams.capacity") == 0
        assert config.get("snapbridge.streams.overflow") == "fail"
        assert config.get("snapbridge.logging.format") == "console"

    def test_load_yaml_over_defaults(self, tmp_path: Path):
        config_file = tmp_path / "snapbridge.yaml"
        config_file.write_text("snapbridge:\n  streams:\n    capacity: 32\n")
        config = Config.from_file(config_file)
        assert config.get("snapbridge.streams.capacity") == 32
        assert config.get("snapbridge.streams.overflow") == "fail"
        assert config.loaded_sources[-1] == str(config_file)

    def test_load_toml(self, tmp_path: Path):
        config_file = tmp_path / "snapbridge.toml"
        config_file.write_text("[snapbridge.fields]\ntimeout = 2.5\n")
        config = Config.from_file(config_file, load_defaults=False)
        assert config.get("snapbridge.fields.timeout") == 2.5
        assert config.get("snapbridge.streams.capacity") is None

    def test_missing_file_keeps_defaults(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("snapbridge.streams.skip_first_cache_hit") is False
        assert len(config.loaded_sources) == 1

    def test_profile_overlay(self, tmp_path: Path):
        (tmp_path / "snapbridge.yaml").write_text("snapbridge:\n  streams:\n    capacity: 8\n    overflow: fail\n")
        (tmp_path / "snapbridge-dev.yaml").write_text("snapbridge:\n  streams:\n    overflow: drop_newest\n")
        config = Config.from_file(tmp_path / "snapbridge.yaml", active_profiles=["dev"])
        assert config.get("snapbridge.streams.capacity") == 8
        assert config.get("snapbridge.streams.overflow") == "drop_newest"
        assert "(profile: dev)" in config.loaded_sources[-1]


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="app.worker")
        @dataclass
        class WorkerConfig:
            name: str = "default"
            threads: int = 1

        config = Config({"app": {"worker": {"name": "ingest", "threads": 4}}})
        worker = config.bind(WorkerConfig)
        assert worker.name == "ingest"
        assert worker.threads == 4

    def test_bind_converts_env_strings(self, monkeypatch: pytest.MonkeyPatch):
        @config_properties(prefix="app.worker")
        @dataclass
        class WorkerConfig:
            threads: int = 1
            enabled: bool = False
            timeout: float | None = 1.0

        monkeypatch.setenv("SNAPBRIDGE_APP_WORKER_THREADS", "3")
        monkeypatch.setenv("SNAPBRIDGE_APP_WORKER_ENABLED", "yes")
        monkeypatch.setenv("SNAPBRIDGE_APP_WORKER_TIMEOUT", "none")
        config = Config({"app": {"worker": {"threads": 1, "enabled": False, "timeout": 1.0}}})
        worker = config.bind(WorkerConfig)
        assert worker.threads == 3
        assert worker.enabled is True
        assert worker.timeout is None

    def test_bind_pydantic_model(self):
        @config_properties(prefix="app.limits")
        class Limits(BaseModel):
            size: int = 1

        assert Config({"app": {"limits": {"size": 9}}}).bind(Limits).size == 9

    def test_bind_pydantic_validation_error(self):
        @config_properties(prefix="app.limits")
        class Limits(BaseModel):
            size: int = 1

        with pytest.raises(ValueError, match="Limits"):
            Config({"app": {"limits": {"size": "many"}}}).bind(Limits)

    def test_bind_undecorated_class_fails(self):
        @dataclass
        class Plain:
            value: int = 0

        with pytest.raises(ValueError, match="config_properties"):
            Config({}).bind(Plain)
