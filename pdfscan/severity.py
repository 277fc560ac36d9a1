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
Severity scoring.

The score is a weighted sum of the indicators on an AnalysisResult:

    JavaScript present         3
    auto action present        2
    object stream marker       2
    each suspicious name       1
    hidden content             2
    large file                 1
    suspicious metadata        2
    each unusual object type   1
    each JavaScript object     2
    each object stream object  1
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import AnalysisResult

LOW = "Low"
MEDIUM = "Medium"
HIGH = "High"
CRITICAL = "Critical"

POTENTIALLY_MALICIOUS = "Potentially malicious"
LIKELY_BENIGN = "Likely benign"


def calculate_severity_score(result: "AnalysisResult") -> int:
    """Weighted sum of every indicator and structural count on the result."""
    score = 0
    if result.has_javascript:
        score += 3
    if result.has_auto_action:
        score += 2
    if result.has_obj_stm:
        score += 2
    score += len(result.suspicious_names)
    if result.hidden_content:
        score += 2
    if result.large_file_size:
        score += 1
    if result.suspicious_metadata:
        score += 2
    score += len(result.unusual_objects)
    score += result.object_statistics.js_objects * 2
    score += result.object_statistics.obj_stm_objects
    return score


def severity_tier(score: int) -> str:
    if score <= 2:
        return LOW
    elif score <= 5:
        return MEDIUM
    elif score <= 10:
        return HIGH
    return CRITICAL


def verdict(score: int) -> str:
    return POTENTIALLY_MALICIOUS if score > 0 else LIKELY_BENIGN
