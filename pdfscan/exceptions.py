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
Exceptions raised by the PDF scanner.
"""


class PDFScanError(Exception):
    """Base exception for all scanner errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF scanner error occurred."


class ConfigError(PDFScanError):
    """Raised when the analyzer configuration is invalid."""

    @property
    def default_message(self) -> str:
        return "Invalid analyzer configuration."


class DocumentLoadError(PDFScanError):
    """Raised when a PDF cannot be read or parsed into a document."""

    @property
    def default_message(self) -> str:
        return "Unable to load PDF document."


class LoadTimeoutError(DocumentLoadError):
    """Raised when loading a PDF takes longer than the configured timeout."""

    @property
    def default_message(self) -> str:
        return "Loading the PDF document timed out."


class StreamDecodeError(PDFScanError):
    """Raised when a stream's content cannot be decoded."""

    @property
    def default_message(self) -> str:
        return "Unable to decode stream content."


class UnsupportedFilterError(StreamDecodeError):
    """Raised for streams whose filter the decoder does not handle."""

    @property
    def default_message(self) -> str:
        return "Unsupported stream filter."


class DecompressionLimitError(StreamDecodeError):
    """Raised when decompressed stream content exceeds the size cap."""

    @property
    def default_message(self) -> str:
        return "Decompressed stream exceeds the maximum allowed size."
