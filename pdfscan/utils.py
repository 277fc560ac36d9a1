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
Utility functions for PDF analysis.
"""

import threading
import queue
from typing import Any, Callable

from .exceptions import LoadTimeoutError


def run_with_timeout(func: Callable, timeout_seconds: int, *args, **kwargs) -> Any:
    """Run a function with timeout using threading approach.

    Returns the function's result, re-raises its exception, or raises
    LoadTimeoutError if it is still running after timeout_seconds. A timed
    out worker is left running as a daemon thread.
    """
    result_queue = queue.Queue()
    exception_queue = queue.Queue()

    def worker():
        try:
            result = func(*args, **kwargs)
            result_queue.put(result)
        except Exception as e:
            exception_queue.put(e)

    # Start the worker thread
    thread = threading.Thread(target=worker)
    thread.daemon = True
    thread.start()

    # Wait for completion or timeout
    thread.join(timeout=timeout_seconds)

    if thread.is_alive():
        raise LoadTimeoutError(f"Operation timed out after {timeout_seconds} seconds")

    if not exception_queue.empty():
        raise exception_queue.get()
    return result_queue.get()


def format_size(num_bytes: int) -> str:
    """Human readable byte count, e.g. '10.0 MiB'."""
    if num_bytes < 1024:
        return f"{num_bytes:,} bytes"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KiB"
    return f"{num_bytes / (1024 * 1024):.1f} MiB"
