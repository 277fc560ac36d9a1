# -----------------------------------------------------------------------------
# Copyright (C) 2025 Jeff Luster, mailto:jeff.luster96@gmail.com
# License: GNU AFFERO GPL 3.0, https://www.gnu.org/licenses/agpl-3.0.html
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Full license text can be found in the file "COPYING.txt".
# Full copyright text can be found in the file "main.py".
# -----------------------------------------------------------------------------

#!/usr/bin/env python3
"""
Analyzer configuration and pattern compilation.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Pattern

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, ValidationError

from .decoder import DEFAULT_MAX_DECOMPRESSED_SIZE
from .exceptions import ConfigError

DEFAULT_FILE_SIZE_THRESHOLD = 10 * 1024 * 1024
DEFAULT_SUSPICIOUS_PATTERNS = ["eval", "exec", "spawn", "shell"]
DEFAULT_METADATA_PATTERNS = ["(adobe|microsoft|office)"]

# Negative lookahead on the empty string never matches anything
NEVER_MATCHES = "(?!)"


def build_pattern(fragments: List[str]) -> Pattern:
    """Join regex fragments into one case-insensitive alternation."""
    if not fragments:
        return re.compile(NEVER_MATCHES)

    source = "|".join(f"(?:{fragment})" for fragment in fragments)
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as e:
        raise ConfigError(f"Invalid pattern in {fragments!r}: {e}") from e


@dataclass(frozen=True)
class CompiledPatterns:
    suspicious: Pattern
    metadata: Pattern


def describe_validation_error(error: ValidationError) -> str:
    """One line per offending field, e.g. 'file_size_threshold: Input should be ...'."""
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'config'}: {item['msg']}"
        for item in error.errors()
    )


class AnalyzerConfig(BaseModel):
    """Thresholds and patterns used by the detectors."""

    model_config = ConfigDict(extra="forbid", strict=True)

    file_size_threshold: NonNegativeInt = DEFAULT_FILE_SIZE_THRESHOLD
    suspicious_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_SUSPICIOUS_PATTERNS))
    suspicious_metadata_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_METADATA_PATTERNS))
    max_decompressed_size: PositiveInt = DEFAULT_MAX_DECOMPRESSED_SIZE

    def compile(self) -> CompiledPatterns:
        """Compile the pattern alternations, raising ConfigError for invalid syntax."""
        return CompiledPatterns(
            suspicious=build_pattern(self.suspicious_patterns),
            metadata=build_pattern(self.suspicious_metadata_patterns),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Any) -> "AnalyzerConfig":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {describe_validation_error(e)}") from e

    def with_overrides(self, **overrides) -> "AnalyzerConfig":
        """Validated copy with the given fields replaced."""
        return self.from_dict({**self.to_dict(), **overrides})


def load_config(path: str = None) -> AnalyzerConfig:
    """Load configuration from a JSON file, or return the defaults."""
    if path is None:
        return AnalyzerConfig()

    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigError(f"Unable to read config file {config_path}: {e}") from e

    try:
        return AnalyzerConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {config_path}: {describe_validation_error(e)}") from e
