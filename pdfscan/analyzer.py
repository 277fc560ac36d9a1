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
Main PDF analyzer class.
"""

import os
import logging
import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from tqdm import tqdm

from .backends import LoadedDocument, get_backend
from .config import AnalyzerConfig
from .detectors import DETECTORS, DetectionContext
from .document import Document
from .engine import analyze_document
from .exceptions import DocumentLoadError
from .models import AnalysisResult, FileAnalysis
from .severity import CRITICAL, HIGH, LOW, MEDIUM
from .utils import format_size, run_with_timeout

DEFAULT_INFO_DIR = "pdf-scan-info"
LOG_FILE_NAME = "pdf_scan_results.log"


class PDFAnalyzer:
    """Loads PDFs, runs the detector pipeline and reports the results."""

    def __init__(self, docs_dir: str = None, info_dir: str = None, config: AnalyzerConfig = None,
                 backend: str = "pypdf", timeout_seconds: int = 30, workers: int = 1,
                 parallel_detectors: bool = False, verbose: bool = False, limit: int = None,
                 quiet: str = None):
        self.docs_dir = Path(docs_dir) if docs_dir is not None else None
        self.results: List[FileAnalysis] = []
        self.timeout_seconds = timeout_seconds
        self.workers = max(1, workers)
        self.parallel_detectors = parallel_detectors
        self.limit = limit
        self.quiet = quiet

        # Check if docs directory exists
        if self.docs_dir is not None and not self.docs_dir.exists():
            raise FileNotFoundError(f"docs directory '{docs_dir}' not found")

        # Set info directory - use provided path or default to one next to the docs directory
        if info_dir is not None:
            self.info_dir = Path(info_dir)
        elif self.docs_dir is not None:
            self.info_dir = self.docs_dir.parent / f"{self.docs_dir.name}-info"
        else:
            self.info_dir = Path(DEFAULT_INFO_DIR)
        self.info_dir.mkdir(parents=True, exist_ok=True)

        # Setup logging with output in info directory
        log_level = logging.DEBUG if verbose else logging.INFO
        self.logger = self._setup_logging(log_level)

        # Invalid patterns fail here, before any document is touched
        self.config = config or AnalyzerConfig()
        self.context = DetectionContext.from_config(self.config)
        self.backend = get_backend(backend)

    def _setup_logging(self, log_level=logging.INFO):
        """Setup logging configuration with output in info directory."""
        # Package-level logger so detector and backend messages share the handlers
        logger = logging.getLogger(__package__)
        logger.setLevel(log_level)

        # Clear any existing handlers
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

        # Create formatter
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

        # File handler - output to info directory (always enabled)
        log_file = self.info_dir / LOG_FILE_NAME
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # Console handler - conditionally enabled based on quiet flag
        if self.quiet not in ["logs", "all"]:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(log_level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        return logger

    def load_document(self, file_path: str) -> LoadedDocument:
        """Parse a PDF with the configured backend, bounded by the timeout."""
        return run_with_timeout(self.backend.load, self.timeout_seconds, file_path)

    def analyze_document(self, document: Document) -> AnalysisResult:
        """Run the detector pipeline on an already loaded document."""
        if not self.parallel_detectors:
            return analyze_document(document, context=self.context)

        with ThreadPoolExecutor(max_workers=len(DETECTORS) + 1) as pool:
            return analyze_document(document, context=self.context, executor=pool)

    def analyze_pdf(self, file_path: str) -> FileAnalysis:
        """Analyze a single PDF file. Load failures propagate as DocumentLoadError."""
        self.logger.debug(f"Analyzing: {os.path.basename(file_path)}")

        analysis = FileAnalysis(file_path, backend=self.backend.name)
        loaded = self.load_document(file_path)
        analysis.load_warnings = loaded.warnings
        for warning in loaded.warnings:
            self.logger.debug(f"{analysis.filename}: {warning}")

        analysis.result = self.analyze_document(loaded.document)
        for failure in analysis.result.decode_errors:
            self.logger.debug(f"{analysis.filename}: stream {failure.id} skipped ({failure.reason})")

        self.logger.debug(
            f"{analysis.filename}: score {analysis.result.severity_score} ({analysis.result.severity})"
        )
        return analysis

    def _analyze_file_safely(self, file_path: str) -> FileAnalysis:
        """Analyze one file of a batch, recording failures instead of raising."""
        try:
            return self.analyze_pdf(file_path)
        except DocumentLoadError as e:
            self.logger.error(f"Failed to analyze {file_path}: {e.message}")
            error = e.message
        except Exception as e:
            self.logger.error(f"Failed to analyze {file_path}: {e}", exc_info=True)
            error = f"Unexpected error: {e}"

        analysis = FileAnalysis(file_path, backend=self.backend.name)
        analysis.error = error
        return analysis

    def analyze_files(self, file_paths: Iterable[str]) -> List[FileAnalysis]:
        """Analyze the given PDF files, keeping their order in the results."""
        file_paths = [str(path) for path in file_paths]
        if not file_paths:
            return self.results

        show_progress = self.quiet not in ["progress", "all"]
        with tqdm(total=len(file_paths), desc="Analyzing PDFs", unit="file",
                  bar_format='{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}] {postfix}',
                  leave=True, dynamic_ncols=True, disable=not show_progress) as pbar:
            if self.workers == 1:
                for file_path in file_paths:
                    self.results.append(self._analyze_file_safely(file_path))
                    pbar.update(1)
            else:
                with ThreadPoolExecutor(max_workers=self.workers) as pool:
                    futures = [pool.submit(self._analyze_file_safely, path) for path in file_paths]
                    for future in futures:
                        self.results.append(future.result())
                        pbar.update(1)

        return self.results

    def analyze_all_pdfs(self) -> List[FileAnalysis]:
        """Analyze all PDF files in the docs directory."""
        if self.docs_dir is None:
            raise ValueError("No docs directory configured")

        pdf_files = sorted(self.docs_dir.glob("*.pdf"))

        if not pdf_files:
            self.logger.warning(f"No PDF files found in {self.docs_dir}")
            return []

        # Apply limit if specified
        if self.limit is not None:
            self.logger.info(f"Found {len(pdf_files)} PDF files total, processing first {min(self.limit, len(pdf_files))} files")
            pdf_files = pdf_files[:self.limit]
        else:
            self.logger.info(f"Found {len(pdf_files)} PDF files to analyze")

        return self.analyze_files(pdf_files)

    def _resolve_output(self, output_file: Optional[str], default_name: str) -> Path:
        # Relative paths land in the info directory
        if output_file is None:
            return self.info_dir / default_name
        if not os.path.isabs(output_file):
            return self.info_dir / output_file
        return Path(output_file)

    def _get_summary_stats(self) -> Dict[str, int]:
        """Get summary statistics for the analysis results."""
        analyzed = [r.result for r in self.results if r.succeeded]
        return {
            "total": len(self.results),
            "analyzed": len(analyzed),
            "failed": len(self.results) - len(analyzed),
            "potentially_malicious": len([r for r in analyzed if r.severity_score > 0]),
            "low": len([r for r in analyzed if r.severity == LOW]),
            "medium": len([r for r in analyzed if r.severity == MEDIUM]),
            "high": len([r for r in analyzed if r.severity == HIGH]),
            "critical": len([r for r in analyzed if r.severity == CRITICAL]),
        }

    def generate_report(self, output_file: str = None) -> Dict:
        """Generate a detailed JSON analysis report."""
        output_file = self._resolve_output(output_file, "pdf_scan_report.json")

        report = {
            "analysis_timestamp": datetime.now().isoformat(),
            "docs_directory": str(self.docs_dir) if self.docs_dir is not None else None,
            "backend": self.backend.name,
            "config": self.config.to_dict(),
            "total_files": len(self.results),
            "summary": self._get_summary_stats(),
            "detailed_results": [analysis.to_dict() for analysis in self.results],
        }

        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        self.logger.info(f"Analysis report saved to {output_file}")
        return report

    @staticmethod
    def format_result(analysis: FileAnalysis) -> List[str]:
        """Human readable lines for one analyzed file."""
        lines = [f"\nFile: {analysis.filename}", f"Size: {format_size(analysis.file_size)}"]
        if not analysis.succeeded:
            lines.append(f"Analysis failed: {analysis.error}")
            return lines

        result = analysis.result
        stats = result.object_statistics
        lines.extend([
            "PDF Analysis Result:",
            f"- Contains JavaScript: {result.has_javascript}",
            f"- Contains Auto Action: {result.has_auto_action}",
            f"- Contains Object Streams: {result.has_obj_stm}",
            f"- Suspicious names found: {result.suspicious_names}",
            f"- Contains hidden content: {result.hidden_content}",
            f"- Large file size: {result.large_file_size}",
            f"- Suspicious metadata: {result.suspicious_metadata}",
            f"- Unusual objects: {result.unusual_objects}",
            "- Object Statistics:",
            f"  Total Objects: {stats.total_objects}",
            f"  Stream Objects: {stats.stream_objects}",
            f"  JavaScript Objects: {stats.js_objects}",
            f"  Object Stream Objects: {stats.obj_stm_objects}",
        ])

        if result.javascript_objects:
            lines.append("JavaScript Objects:")
            for js_obj in result.javascript_objects:
                lines.extend([
                    f"Object ID: {js_obj.id}",
                    f"JavaScript Content:\n{js_obj.content}",
                    "-" * 20,
                ])

        if result.decode_errors:
            lines.append(f"- Undecodable streams: {len(result.decode_errors)}")

        lines.extend([
            f"- Severity Score: {result.severity_score}",
            f"\nOverall assessment: {result.verdict} (Severity: {result.severity})",
        ])
        return lines

    def print_summary(self, output_file: str = None, flagged_only: bool = False):
        """Print a summary of the analysis results and save it to file."""
        output_file = self._resolve_output(output_file, "pdf_scan_summary.txt")

        if not self.results:
            message = "No PDF files analyzed."
            print(message)
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(message)
            return

        stats = self._get_summary_stats()
        full_summary_lines = [
            "\n" + "=" * 60,
            "PDF SCAN SUMMARY",
            "=" * 60,
            f"Total PDF files: {stats['total']}",
            f"Analyzed: {stats['analyzed']}",
            f"Failed to load: {stats['failed']}",
            f"Potentially malicious: {stats['potentially_malicious']}",
            f"\nSeverity breakdown:",
            f"  Low (0-2): {stats['low']}",
            f"  Medium (3-5): {stats['medium']}",
            f"  High (6-10): {stats['high']}",
            f"  Critical (11+): {stats['critical']}",
            "-" * 50,
        ]

        console_lines = list(full_summary_lines)
        for analysis in self.results:
            details = self.format_result(analysis)
            full_summary_lines.extend(details)
            flagged = not analysis.succeeded or analysis.result.severity_score > 0
            if not flagged_only or flagged:
                console_lines.extend(details)

        # Print to console
        for line in console_lines:
            print(line)

        # Always write full summary to file
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write('\n'.join(full_summary_lines))

        self.logger.info(f"Summary saved to {output_file}")
