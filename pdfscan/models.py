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
Data models for PDF analysis results.
"""

import os
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .severity import severity_tier, verdict


@dataclass(frozen=True)
class JavaScriptObject:
    id: int
    content: str


@dataclass(frozen=True)
class DecodeFailure:
    id: int
    reason: str


@dataclass(frozen=True)
class ObjectStatistics:
    total_objects: int = 0
    stream_objects: int = 0
    js_objects: int = 0
    obj_stm_objects: int = 0

    def __add__(self, other: "ObjectStatistics") -> "ObjectStatistics":
        return ObjectStatistics(
            total_objects=self.total_objects + other.total_objects,
            stream_objects=self.stream_objects + other.stream_objects,
            js_objects=self.js_objects + other.js_objects,
            obj_stm_objects=self.obj_stm_objects + other.obj_stm_objects,
        )


@dataclass
class AnalysisResult:
    """Indicators, statistics and score for one document."""

    has_javascript: bool = False
    has_auto_action: bool = False
    has_obj_stm: bool = False
    suspicious_names: List[str] = field(default_factory=list)
    hidden_content: bool = False
    large_file_size: bool = False
    suspicious_metadata: bool = False
    unusual_objects: List[str] = field(default_factory=list)
    object_statistics: ObjectStatistics = field(default_factory=ObjectStatistics)
    severity_score: int = 0
    javascript_objects: List[JavaScriptObject] = field(default_factory=list)
    decode_errors: List[DecodeFailure] = field(default_factory=list)

    @property
    def severity(self) -> str:
        return severity_tier(self.severity_score)

    @property
    def verdict(self) -> str:
        return verdict(self.severity_score)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity
        data["verdict"] = self.verdict
        return data


class FileAnalysis:
    """Container for the analysis of one PDF file."""

    def __init__(self, file_path: str, backend: str = "pypdf"):
        self.file_path = file_path
        self.filename = os.path.basename(file_path)
        self.file_size = os.path.getsize(file_path) if os.path.exists(file_path) else 0
        self.timestamp = datetime.now().isoformat()
        self.backend = backend

        # Filled in by the analyzer
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[str] = None
        self.load_warnings: List[str] = []

    @property
    def succeeded(self) -> bool:
        return self.result is not None and self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "file_path": self.file_path,
            "file_size": self.file_size,
            "timestamp": self.timestamp,
            "backend": self.backend,
            "error": self.error,
            "load_warnings": self.load_warnings,
            "result": self.result.to_dict() if self.result is not None else None,
        }
