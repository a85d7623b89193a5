"""Runtime configuration, read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_GO_BINARY = "go"
_DEFAULT_DESCRIPTOR = "importcfg"


@dataclass
class HeftConfig:
    """Settings shared by the build, scan and presentation layers.

    Environment variables:
        GOHEFT_GO_BINARY   go executable to run (default: go)
        GOHEFT_DESCRIPTOR  per-package descriptor file name (default: importcfg)
        GOHEFT_LOG_LEVEL   log level (default: WARNING)
        GOHEFT_LOG_FORMAT  console | json (default: console)
        NO_COLOR           disable colored output when set
        CI                 disable live progress output when set
    """

    go_binary: str = _DEFAULT_GO_BINARY
    descriptor_name: str = _DEFAULT_DESCRIPTOR
    log_level: str = "WARNING"
    log_format: str = "console"
    no_color: bool = False
    is_ci: bool = False

    @classmethod
    def from_env(cls) -> HeftConfig:
        return cls(
            go_binary=os.environ.get("GOHEFT_GO_BINARY") or _DEFAULT_GO_BINARY,
            descriptor_name=os.environ.get("GOHEFT_DESCRIPTOR") or _DEFAULT_DESCRIPTOR,
            log_level=os.environ.get("GOHEFT_LOG_LEVEL", "WARNING").upper(),
            log_format=os.environ.get("GOHEFT_LOG_FORMAT", "console").lower(),
            no_color=bool(os.environ.get("NO_COLOR")),
            is_ci=bool(os.environ.get("CI")),
        )
