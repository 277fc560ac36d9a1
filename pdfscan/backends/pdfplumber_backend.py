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
Document backend built on pdfplumber and its pdfminer.six object graph.

pdfminer decodes object streams and cross-reference streams while opening a
file, which drops their raw bytes; those streams come through with empty
content.
"""

import io
import logging
from typing import Any, Dict

import pdfplumber
from pdfminer.pdftypes import PDFObjRef, PDFStream
from pdfminer.psparser import PSKeyword, PSLiteral

from ..document import (
    Document,
    PdfArray,
    PdfBoolean,
    PdfDictionary,
    PdfName,
    PdfNull,
    PdfNumber,
    PdfObject,
    PdfReference,
    PdfStream,
    PdfString,
)
from ..exceptions import DocumentLoadError
from .base import MAX_NESTING_DEPTH, BaseBackend, LoadedDocument, capture_parser_warnings

logger = logging.getLogger(__name__)


def to_bytes(value) -> bytes:
    return value if isinstance(value, bytes) else str(value).encode("utf-8", errors="replace")


def convert_object(value: Any, depth: int = 0) -> PdfObject:
    """Convert a pdfminer object to the document model without following references."""
    if depth > MAX_NESTING_DEPTH:
        return PdfNull()

    match value:
        case PDFObjRef():
            return PdfReference(object_id=value.objid)
        case PDFStream():
            return PdfStream(
                dictionary=convert_dictionary(value.attrs, depth),
                content=value.rawdata or b"",
            )
        case dict():
            return convert_dictionary(value, depth)
        case list() | tuple():
            return PdfArray(tuple(convert_object(item, depth + 1) for item in value))
        case PSLiteral():
            return PdfName(to_bytes(value.name))
        case bytes():
            return PdfString(value)
        case str():
            return PdfString(value.encode("utf-8", errors="replace"))
        case bool():
            return PdfBoolean(value)
        case int() | float():
            return PdfNumber(value)
        case PSKeyword() | None:
            return PdfNull()
        case _:
            logger.debug(f"Unhandled pdfminer object type {type(value).__name__}")
            return PdfNull()


def convert_dictionary(value: Dict[Any, Any], depth: int = 0) -> PdfDictionary:
    return PdfDictionary({
        to_bytes(key): convert_object(item, depth + 1)
        for key, item in value.items()
    })


class PdfplumberBackend(BaseBackend):
    """Backend implementation that reads the pdfminer document behind pdfplumber."""

    name = "pdfplumber"

    def load_bytes(self, data: bytes) -> LoadedDocument:
        with capture_parser_warnings("pdfminer") as messages:
            try:
                pdf = pdfplumber.open(io.BytesIO(data))
            except Exception as e:
                raise DocumentLoadError(f"pdfplumber could not parse document: {e}") from e

            with pdf:
                doc = pdf.doc
                ids = sorted({objid for xref in doc.xrefs for objid in xref.get_objids()})

                objects = {}
                for objid in ids:
                    try:
                        value = doc.getobj(objid)
                    except Exception as e:
                        messages.append(f"Object {objid} unreadable: {e}")
                        continue
                    objects[objid] = convert_object(value)

                # Newer sections come first in doc.xrefs and win
                trailer: Dict[Any, Any] = {}
                for xref in doc.xrefs:
                    for key, value in xref.get_trailer().items():
                        trailer.setdefault(key, value)

        document = Document(objects=objects, trailer=convert_dictionary(trailer), size=len(data))
        logger.debug(f"pdfplumber loaded {len(document)} objects")
        return LoadedDocument(document=document, warnings=list(messages))
