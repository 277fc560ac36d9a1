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
Common pieces shared by the parser backends.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Protocol

from ..document import Document
from ..exceptions import DocumentLoadError

# Nested direct objects deeper than this are replaced by null
MAX_NESTING_DEPTH = 64


@dataclass
class LoadedDocument:
    """A parsed document plus whatever the parser complained about."""

    document: Document
    warnings: List[str] = field(default_factory=list)


class DocumentBackend(Protocol):
    """Protocol for turning PDF bytes into a Document."""

    name: str

    def load(self, pdf_path: str) -> LoadedDocument:
        """Read and parse a PDF file."""

    def load_bytes(self, data: bytes) -> LoadedDocument:
        """Parse PDF bytes already in memory."""


class BaseBackend:
    name = "base"

    def load(self, pdf_path: str) -> LoadedDocument:
        path = Path(pdf_path)
        if not path.is_file():
            raise DocumentLoadError(f"PDF file not found: {pdf_path}")

        try:
            data = path.read_bytes()
        except OSError as e:
            raise DocumentLoadError(f"Unable to read PDF file: {pdf_path}. Error: {e}") from e

        return self.load_bytes(data)

    def load_bytes(self, data: bytes) -> LoadedDocument:
        raise NotImplementedError


class _ThreadLogCollector(logging.Handler):
    """Collect log records emitted by a single thread."""

    def __init__(self, thread_id: int):
        super().__init__(level=logging.WARNING)
        self.thread_id = thread_id
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord):
        if record.thread == self.thread_id:
            self.messages.append(record.getMessage())


@contextmanager
def capture_parser_warnings(logger_name: str):
    """Context manager collecting warnings a parser library logs on this thread."""
    handler = _ThreadLogCollector(threading.get_ident())
    parser_logger = logging.getLogger(logger_name)
    parser_logger.addHandler(handler)
    try:
        yield handler.messages
    finally:
        parser_logger.removeHandler(handler)
