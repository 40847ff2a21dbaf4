"""Run a batch audit over a query file and write the XLSX report.

Usage:
    python scripts/batch_audit.py queries.txt --output batch_audit_results.xlsx
"""

from __future__ import annotations

import argparse
from pathlib import Path

from funcaudit.api.app import build_workspace
from funcaudit.audit.report import format_report, write_report_xlsx
from funcaudit.core.config import AppSettings
from funcaudit.core.log import configure_logging
from funcaudit.ingestion.file_parser import load_query_document
from funcaudit.models.batch import BatchProgress
from funcaudit.models.report import REPORT_FILE_NAME


def print_progress(progress: BatchProgress) -> None:
    print(f"  [{progress.percent:3d}%] {progress.item.status.value:<9} {progress.item.query}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Batch-audit queries against the function catalog")
    parser.add_argument("queries", type=Path, help="Query file (.txt, .json, .csv, .xlsx)")
    parser.add_argument("--output", type=Path, default=Path(REPORT_FILE_NAME), help="Report path")
    args = parser.parse_args()

    settings = AppSettings()
    configure_logging(settings.log_level)
    workspace = build_workspace(settings)

    queries = load_query_document(args.queries.read_bytes(), args.queries.name)
    if not queries:
        print("No queries found.")
        return

    print(f"Auditing {len(queries)} queries against {len(workspace.functions)} functions...")
    summary = workspace.run_batch(queries, on_progress=print_progress)
    write_report_xlsx(format_report(summary.items), args.output)
    print(f"Done! {summary.completed_count} completed, {summary.error_count} failed -> {args.output}")


if __name__ == "__main__":
    main()
