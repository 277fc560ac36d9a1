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
Bounded decoding of filtered stream content.

Only Flate (zlib) streams are decoded. Every failure surfaces as a
StreamDecodeError so callers can skip the stream and keep going.
"""

import zlib

from .document import PdfStream
from .exceptions import DecompressionLimitError, StreamDecodeError, UnsupportedFilterError

FLATE_FILTERS = ("FlateDecode", "Fl")
DEFAULT_MAX_DECOMPRESSED_SIZE = 32 * 1024 * 1024


def is_flate(stream: PdfStream) -> bool:
    """True if the stream declares exactly one Flate filter."""
    filters = stream.filters
    return len(filters) == 1 and filters[0] in FLATE_FILTERS


def decode_stream(stream: PdfStream, max_size: int = DEFAULT_MAX_DECOMPRESSED_SIZE) -> bytes:
    """Decompress a Flate stream, refusing to produce more than max_size bytes."""
    if not is_flate(stream):
        declared = "/".join(stream.filters) or "none"
        raise UnsupportedFilterError(f"Unsupported filter: {declared}")

    decompressor = zlib.decompressobj()
    try:
        # One byte of headroom distinguishes "exactly max_size" from "too big"
        data = decompressor.decompress(stream.content, max_size + 1)
        if len(data) > max_size:
            raise DecompressionLimitError(f"Decompressed content exceeds {max_size} bytes")
        data += decompressor.flush()
    except zlib.error as e:
        raise StreamDecodeError(f"Corrupt Flate data: {e}") from e

    if len(data) > max_size:
        raise DecompressionLimitError(f"Decompressed content exceeds {max_size} bytes")
    if not decompressor.eof:
        raise StreamDecodeError("Truncated Flate data")
    return data


def decode_text(stream: PdfStream, max_size: int = DEFAULT_MAX_DECOMPRESSED_SIZE) -> str:
    """Decode a stream to text, requiring valid UTF-8."""
    data = decode_stream(stream, max_size)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StreamDecodeError(f"Stream content is not valid UTF-8: {e.reason}") from e


def decode_lossy_text(stream: PdfStream, max_size: int = DEFAULT_MAX_DECOMPRESSED_SIZE) -> str:
    """Decode a stream to text for pattern matching, replacing invalid bytes."""
    return decode_stream(stream, max_size).decode("utf-8", errors="replace")
