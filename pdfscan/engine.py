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
Runs the detector pipeline over a document and scores the outcome.
"""

from concurrent.futures import Executor
from typing import List, Optional

from .config import AnalyzerConfig
from .detectors import DETECTORS, DetectionContext, Detector, Findings
from .document import Document
from .models import AnalysisResult
from .severity import calculate_severity_score
from .stats import calculate_object_statistics


def merge_findings(result: AnalysisResult, findings: Findings):
    """Fold one detector's findings into the result."""
    for name, value in findings.items():
        current = getattr(result, name)
        if isinstance(current, list):
            current.extend(value)
        elif isinstance(current, bool):
            setattr(result, name, current or value)
        else:
            raise TypeError(f"Detector produced unsupported field {name!r}")


def analyze_document(document: Document, config: Optional[AnalyzerConfig] = None,
                     context: Optional[DetectionContext] = None,
                     executor: Optional[Executor] = None,
                     detectors: Optional[List[Detector]] = None) -> AnalysisResult:
    """Run every detector and the statistics pass, then compute the score.

    With an executor, detectors run concurrently against the shared document;
    their findings are still merged in pipeline order so the result does not
    depend on scheduling.
    """
    if context is None:
        context = DetectionContext.from_config(config or AnalyzerConfig())
    detectors = DETECTORS if detectors is None else detectors

    if executor is None:
        all_findings = [detector(document, context) for detector in detectors]
        statistics = calculate_object_statistics(document)
    else:
        futures = [executor.submit(detector, document, context) for detector in detectors]
        statistics_future = executor.submit(calculate_object_statistics, document)
        all_findings = [future.result() for future in futures]
        statistics = statistics_future.result()

    result = AnalysisResult()
    for findings in all_findings:
        merge_findings(result, findings)
    result.decode_errors = list(dict.fromkeys(result.decode_errors))
    result.object_statistics = statistics
    result.severity_score = calculate_severity_score(result)
    return result
