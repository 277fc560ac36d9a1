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
Parser backends that produce a Document from PDF bytes.
"""

from .base import BaseBackend, DocumentBackend, LoadedDocument
from .pdfplumber_backend import PdfplumberBackend
from .pypdf_backend import PypdfBackend
from ..exceptions import ConfigError

BACKENDS = {
    PypdfBackend.name: PypdfBackend,
    PdfplumberBackend.name: PdfplumberBackend,
}


def get_backend(name: str) -> DocumentBackend:
    """Instantiate a backend by name."""
    try:
        return BACKENDS[name]()
    except KeyError:
        raise ConfigError(f"Unknown backend '{name}', expected one of: {', '.join(BACKENDS)}") from None


__all__ = [
    'BACKENDS',
    'BaseBackend',
    'DocumentBackend',
    'LoadedDocument',
    'PdfplumberBackend',
    'PypdfBackend',
    'get_backend',
]
