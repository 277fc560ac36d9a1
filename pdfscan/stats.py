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
Structural object counts.
"""

from functools import reduce

from .document import Document, PdfDictionary, PdfObject, PdfStream
from .models import ObjectStatistics

SCRIPT_KEYS = (b"JS", b"JavaScript")
OBJECT_STREAM_KEY = b"ObjStm"


def count_object(obj: PdfObject) -> ObjectStatistics:
    """Statistics contribution of a single object."""
    match obj:
        case PdfStream(dictionary=dictionary):
            stream_objects = 1
        case PdfDictionary():
            dictionary, stream_objects = obj, 0
        case _:
            return ObjectStatistics(total_objects=1)

    return ObjectStatistics(
        total_objects=1,
        stream_objects=stream_objects,
        js_objects=1 if any(dictionary.has(key) for key in SCRIPT_KEYS) else 0,
        obj_stm_objects=1 if dictionary.has(OBJECT_STREAM_KEY) else 0,
    )


def calculate_object_statistics(document: Document) -> ObjectStatistics:
    return reduce(
        lambda total, obj: total + count_object(obj),
        document.objects.values(),
        ObjectStatistics(),
    )
