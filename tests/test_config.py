"""Tests for HeftConfig environment loading."""

from __future__ import annotations

import os
from unittest.mock import patch

from goheft.core.config import HeftConfig

_VARS = [
    "GOHEFT_GO_BINARY",
    "GOHEFT_DESCRIPTOR",
    "GOHEFT_LOG_LEVEL",
    "GOHEFT_LOG_FORMAT",
    "NO_COLOR",
    "CI",
]


class TestHeftConfig:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=False):
            for k in _VARS:
                os.environ.pop(k, None)
            config = HeftConfig.from_env()
        assert config == HeftConfig()
        assert config.go_binary == "go"
        assert config.descriptor_name == "importcfg"

    def test_overrides(self):
        env = {
            "GOHEFT_GO_BINARY": "/opt/go/bin/go",
            "GOHEFT_DESCRIPTOR": "importcfg.link",
            "GOHEFT_LOG_LEVEL": "debug",
            "GOHEFT_LOG_FORMAT": "JSON",
            "NO_COLOR": "1",
            "CI": "true",
        }
        with patch.dict(os.environ, env):
            config = HeftConfig.from_env()
        assert config.go_binary == "/opt/go/bin/go"
        assert config.descriptor_name == "importcfg.link"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.no_color is True
        assert config.is_ci is True

    def test_empty_go_binary_falls_back(self):
        with patch.dict(os.environ, {"GOHEFT_GO_BINARY": ""}):
            assert HeftConfig.from_env().go_binary == "go"
