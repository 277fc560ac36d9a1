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
Threat indicator detectors.

Every detector is a pure function of a Document and a DetectionContext and
returns a dict of AnalysisResult fields it found. The engine merges these in
the order of DETECTORS: booleans are OR-ed, lists are concatenated.

Objects that do not have the shape a detector looks for simply contribute
nothing; none of these functions raise for malformed objects.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Tuple

from .config import AnalyzerConfig, CompiledPatterns
from .decoder import decode_lossy_text, decode_text, is_flate
from .document import Document, PdfDictionary, PdfName, PdfString, PdfStream, as_dictionary
from .exceptions import StreamDecodeError
from .models import DecodeFailure, JavaScriptObject
from .stats import OBJECT_STREAM_KEY, SCRIPT_KEYS

logger = logging.getLogger(__name__)

AUTO_ACTION_KEYS = (b"AA", b"OpenAction")
HIDDEN_CONTENT_KEYS = (b"OCG", b"OCGs")
COMMON_TYPES = frozenset([b"Catalog", b"Pages", b"Page", b"Font", b"XObject", b"Metadata"])
STREAM_CONTENT_FINDING = "Suspicious content in stream"


@dataclass(frozen=True)
class DetectionContext:
    config: AnalyzerConfig
    patterns: CompiledPatterns

    @classmethod
    def from_config(cls, config: AnalyzerConfig) -> "DetectionContext":
        return cls(config=config, patterns=config.compile())


Findings = Dict[str, Any]


@dataclass(frozen=True)
class Detector:
    name: str
    func: Callable[[Document, DetectionContext], Findings]

    def __call__(self, document: Document, context: DetectionContext) -> Findings:
        return self.func(document, context)


def iter_dictionaries(document: Document) -> Iterator[Tuple[int, PdfDictionary]]:
    """Yield (id, dictionary) for every Dictionary or Stream object."""
    for object_id, obj in document:
        dictionary = as_dictionary(obj)
        if dictionary is not None:
            yield object_id, dictionary


def has_any_key(dictionary: PdfDictionary, keys) -> bool:
    return any(dictionary.has(key) for key in keys)


def is_javascript_action(dictionary: PdfDictionary) -> bool:
    match dictionary.get(b"S"):
        case PdfName(value=b"JavaScript"):
            return True
        case _:
            return False


def check_for_javascript(document: Document, context: DetectionContext) -> Findings:
    found = any(
        has_any_key(dictionary, SCRIPT_KEYS) or is_javascript_action(dictionary)
        for _, dictionary in iter_dictionaries(document)
    )
    return {"has_javascript": found}


def find_javascript_objects(document: Document, context: DetectionContext) -> Findings:
    """Extract the text of Flate-compressed streams that carry a script key."""
    scripts: List[JavaScriptObject] = []
    failures: List[DecodeFailure] = []
    max_size = context.config.max_decompressed_size

    for object_id, obj in document:
        match obj:
            case PdfStream(dictionary=dictionary) if has_any_key(dictionary, SCRIPT_KEYS):
                try:
                    scripts.append(JavaScriptObject(id=object_id, content=decode_text(obj, max_size)))
                except StreamDecodeError as e:
                    logger.debug(f"Skipping script stream {object_id}: {e.message}")
                    failures.append(DecodeFailure(id=object_id, reason=e.message))
            case _:
                continue

    return {"javascript_objects": scripts, "decode_errors": failures}


def check_for_auto_action(document: Document, context: DetectionContext) -> Findings:
    found = any(has_any_key(dictionary, AUTO_ACTION_KEYS) for _, dictionary in iter_dictionaries(document))
    return {"has_auto_action": found}


def check_for_obj_stm(document: Document, context: DetectionContext) -> Findings:
    found = any(dictionary.has(OBJECT_STREAM_KEY) for _, dictionary in iter_dictionaries(document))
    return {"has_obj_stm": found}


def check_for_suspicious_names(document: Document, context: DetectionContext) -> Findings:
    pattern = context.patterns.suspicious
    matches = []
    for _, obj in document:
        match obj:
            case PdfName() | PdfString():
                if pattern.search(obj.text):
                    matches.append(obj.text)
            case _:
                continue
    return {"suspicious_names": matches}


def check_for_hidden_content(document: Document, context: DetectionContext) -> Findings:
    found = any(has_any_key(dictionary, HIDDEN_CONTENT_KEYS) for _, dictionary in iter_dictionaries(document))
    return {"hidden_content": found}


def check_file_size(document: Document, context: DetectionContext) -> Findings:
    return {"large_file_size": document.size > context.config.file_size_threshold}


def check_metadata(document: Document, context: DetectionContext) -> Findings:
    """Flag Info strings that do not match the known producer patterns.

    Any string entry that fails to match counts, so most documents that carry
    an Info dictionary outside the Adobe/Microsoft/Office family are flagged.
    """
    info = document.info()
    if info is None:
        return {"suspicious_metadata": False}

    pattern = context.patterns.metadata
    flagged = False
    for key, value in info.items():
        match value:
            case PdfString() if not pattern.search(value.text):
                logger.debug(f"Unrecognized metadata /{key.decode('latin-1')}: {value.text!r}")
                flagged = True
            case _:
                continue
    return {"suspicious_metadata": flagged}


def check_for_unusual_objects(document: Document, context: DetectionContext) -> Findings:
    unusual = []
    for _, dictionary in iter_dictionaries(document):
        match dictionary.get(b"Type"):
            case PdfName(value=type_name) if type_name not in COMMON_TYPES:
                unusual.append(type_name.decode("utf-8", errors="replace"))
            case _:
                continue
    return {"unusual_objects": unusual}


def analyze_streams(document: Document, context: DetectionContext) -> Findings:
    """Scan decompressed Flate streams for the suspicious patterns."""
    pattern = context.patterns.suspicious
    max_size = context.config.max_decompressed_size
    findings = []
    failures = []

    for object_id, obj in document:
        match obj:
            case PdfStream() if is_flate(obj):
                try:
                    content = decode_lossy_text(obj, max_size)
                except StreamDecodeError as e:
                    logger.debug(f"Skipping stream {object_id}: {e.message}")
                    failures.append(DecodeFailure(id=object_id, reason=e.message))
                    continue
                if pattern.search(content):
                    findings.append(STREAM_CONTENT_FINDING)
            case _:
                continue

    return {"suspicious_names": findings, "decode_errors": failures}


# Order matters for list fields: name findings precede stream findings
DETECTORS = [
    Detector("javascript", check_for_javascript),
    Detector("javascript_objects", find_javascript_objects),
    Detector("auto_action", check_for_auto_action),
    Detector("object_streams", check_for_obj_stm),
    Detector("suspicious_names", check_for_suspicious_names),
    Detector("hidden_content", check_for_hidden_content),
    Detector("file_size", check_file_size),
    Detector("metadata", check_metadata),
    Detector("unusual_objects", check_for_unusual_objects),
    Detector("stream_content", analyze_streams),
]
