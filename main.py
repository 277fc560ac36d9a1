# -----------------------------------------------------------------------------

# Part of "pdf-threat-analyzer", a tool to statically triage PDF files for
# signs of weaponized content.
# Copyright (C) 2025 Jeff Luster, mailto:jeff.luster96@gmail.com

# License: GNU AFFERO GPL 3.0, https://www.gnu.org/licenses/agpl-3.0.html
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program in the file "COPYING.txt". If not, see
# <http://www.gnu.org/licenses/>.
# -----------------------------------------------------------------------------

#!/usr/bin/env python3
"""
Main CLI interface for the PDF threat analyzer.
"""

import argparse
import sys
import logging

from pdfscan.analyzer import PDFAnalyzer
from pdfscan.backends import BACKENDS
from pdfscan.config import load_config
from pdfscan.exceptions import ConfigError

QUIET_MODES = ("progress", "logs", "all")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Statically analyze PDF files for signs of malicious content")
    parser.add_argument("files", nargs="*", help="PDF files to analyze (default: every PDF in --docs_dir)")
    parser.add_argument("--docs_dir", default=None, help="Directory containing PDF files")
    parser.add_argument("--info_dir", help="Directory to store analysis results and logs (default: {docs_dir}-info)")
    parser.add_argument("--config", help="JSON configuration file with thresholds and patterns")
    parser.add_argument("--size_threshold", type=int, help="Override the large file threshold in bytes")
    parser.add_argument("--backend", default="pypdf", choices=sorted(BACKENDS), help="PDF parser backend (default: pypdf)")
    parser.add_argument("--report_output", default="pdf_scan_report.json", help="Output report file")
    parser.add_argument("--summary_output", help="Output summary file")
    parser.add_argument("--timeout", type=int, default=30, help="Timeout in seconds for loading each PDF (default: 30)")
    parser.add_argument("--workers", type=int, default=1, help="Number of files analyzed in parallel (default: 1)")
    parser.add_argument("--parallel_detectors", action="store_true", help="Run the detectors of each file concurrently")
    parser.add_argument("--limit", type=int, help="Limit the number of PDF files to process (default: process all)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--quiet", nargs='?', const="all", default=None, help="Quiet mode: 'progress' hides progress bar, 'logs' hides console logs, 'all' hides both (default: all when --quiet is used or is followed by a file)")
    parser.add_argument("--flagged_only", action="store_true", help="Only print files that look potentially malicious or failed to load")
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    """Parse arguments, allowing files and options in any order."""
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    # A bare --quiet swallows the following file path as its value
    if args.quiet is not None and args.quiet not in QUIET_MODES:
        args.files.insert(0, args.quiet)
        args.quiet = "all"
    return args


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    if not args.files and args.docs_dir is None:
        args.docs_dir = "files/docs"

    logger = logging.getLogger("pdfscan")

    try:
        config = load_config(args.config)
        if args.size_threshold is not None:
            config = config.with_overrides(file_size_threshold=args.size_threshold)

        # Create analyzer (logging and pattern compilation happen in the constructor)
        analyzer = PDFAnalyzer(args.docs_dir, info_dir=args.info_dir, config=config, backend=args.backend,
                               timeout_seconds=args.timeout, workers=args.workers,
                               parallel_detectors=args.parallel_detectors, verbose=args.verbose,
                               limit=args.limit, quiet=args.quiet)
        logger = analyzer.logger

        logger.info(f"Starting PDF scan with the {args.backend} backend...")
        if args.files:
            results = analyzer.analyze_files(args.files[:args.limit] if args.limit is not None else args.files)
        else:
            results = analyzer.analyze_all_pdfs()

        if not results:
            logger.warning("No PDF files found to analyze")
            return 0

        analyzer.generate_report(args.report_output)
        analyzer.print_summary(args.summary_output, flagged_only=args.flagged_only)

        logger.info("PDF scan completed successfully")
        return 0

    except ConfigError as e:
        logger.error(f"Configuration error: {e.message}")
        return 2
    except Exception as e:
        logger.error(f"Analysis failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
