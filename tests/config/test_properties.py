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
"""Tests for the typed configuration properties of streams, fields and logging."""

from __future__ import annotations

import pytest

from snapbridge.config.properties import FieldWaitProperties, LoggingProperties, StreamProperties
from snapbridge.core.config import Config
from snapbridge.kernel.types import OverflowPolicy


class TestStreamProperties:
    def test_packaged_defaults(self):
        properties = Config.defaults().bind(StreamProperties)
        assert properties.capacity == 0
        assert properties.overflow is OverflowPolicy.FAIL
        assert properties.skip_first_cache_hit is False
        assert properties.include_metadata_changes is True

    def test_bind_from_yaml_values(self):
        config = Config(
            {"snapbridge": {"streams": {"capacity": 4, "overflow": "drop_oldest", "skip_first_cache_hit": True}}}
        )
        properties = config.bind(StreamProperties)
        assert properties.capacity == 4
        assert properties.overflow is OverflowPolicy.DROP_OLDEST
        assert properties.skip_first_cache_hit is True

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SNAPBRIDGE_STREAMS_CAPACITY", "128")
        properties = Config.defaults().bind(StreamProperties)
        assert properties.capacity == 128

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError, match="StreamProperties"):
            Config({"snapbridge": {"streams": {"capacity": -1}}}).bind(StreamProperties)

    def test_unknown_overflow_rejected(self):
        with pytest.raises(ValueError):
            Config({"snapbridge": {"streams": {"overflow": "block"}}}).bind(StreamProperties)


class TestFieldWaitProperties:
    def test_default_waits_forever(self):
        assert Config.defaults().bind(FieldWaitProperties).timeout is None

    def test_timeout_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SNAPBRIDGE_FIELDS_TIMEOUT", "2.5")
        assert Config.defaults().bind(FieldWaitProperties).timeout == 2.5


class TestLoggingProperties:
    def test_defaults(self):
        properties = Config.defaults().bind(LoggingProperties)
        assert properties.format == "console"
        assert properties.level == {"root": "INFO"}
