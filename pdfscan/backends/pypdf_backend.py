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
Document backend built on pypdf.
"""

import io
import logging
from typing import Any, Dict, List, Tuple

from pypdf import PdfReader
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    ByteStringObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    StreamObject,
    TextStringObject,
)

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


def name_bytes(name: str) -> bytes:
    """pypdf names keep their leading slash; the document model does not."""
    return name[1:].encode("utf-8", errors="replace") if name.startswith("/") else name.encode("utf-8", errors="replace")


def convert_object(value: Any, depth: int = 0) -> PdfObject:
    """Convert a pypdf object to the document model without following references."""
    if depth > MAX_NESTING_DEPTH:
        return PdfNull()

    match value:
        case IndirectObject():
            return PdfReference(object_id=value.idnum, generation=value.generation)
        case StreamObject():
            return PdfStream(
                dictionary=convert_dictionary(value, depth),
                content=bytes(value._data or b""),
            )
        case DictionaryObject():
            return convert_dictionary(value, depth)
        case ArrayObject():
            return PdfArray(tuple(convert_object(item, depth + 1) for item in value))
        case NameObject():
            return PdfName(name_bytes(value))
        case TextStringObject():
            return PdfString(bytes(value.original_bytes))
        case ByteStringObject():
            return PdfString(bytes(value))
        case BooleanObject():
            return PdfBoolean(bool(value.value))
        case NumberObject():
            return PdfNumber(int(value))
        case FloatObject():
            return PdfNumber(float(value))
        case NullObject() | None:
            return PdfNull()
        case _:
            logger.debug(f"Unhandled pypdf object type {type(value).__name__}")
            return PdfNull()


def convert_dictionary(value: DictionaryObject, depth: int = 0) -> PdfDictionary:
    return PdfDictionary({
        name_bytes(key): convert_object(item, depth + 1)
        for key, item in value.items()
    })


def object_ids(reader: PdfReader) -> List[Tuple[int, int]]:
    """(id, generation) for every in-use object the reader knows about."""
    free_entries = getattr(reader, "xref_free_entry", {})
    ids: Dict[int, int] = {}
    for generation, entries in reader.xref.items():
        for idnum in entries:
            if free_entries.get(generation, {}).get(idnum):
                continue
            ids.setdefault(idnum, generation)
    for idnum in reader.xref_objStm:
        ids.setdefault(idnum, 0)
    return sorted(ids.items())


class PypdfBackend(BaseBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    name = "pypdf"

    def load_bytes(self, data: bytes) -> LoadedDocument:
        with capture_parser_warnings("pypdf") as messages:
            try:
                reader = PdfReader(io.BytesIO(data), strict=False)
                decrypted = reader.decrypt("") if reader.is_encrypted else True
            except Exception as e:
                raise DocumentLoadError(f"pypdf could not parse document: {e}") from e
            if not decrypted:
                raise DocumentLoadError("PDF is encrypted and cannot be opened with an empty password")

            objects = {}
            for idnum, generation in object_ids(reader):
                try:
                    value = IndirectObject(idnum, generation, reader).get_object()
                except Exception as e:
                    messages.append(f"Object {idnum} {generation} R unreadable: {e}")
                    continue
                if value is None:
                    continue
                objects[idnum] = convert_object(value)

            trailer = convert_dictionary(reader.trailer)

        document = Document(objects=objects, trailer=trailer, size=len(data))
        logger.debug(f"pypdf loaded {len(document)} objects")
        return LoadedDocument(document=document, warnings=list(messages))
