#!/usr/bin/env python3
"""
Script to manually run the summary export.
Reads the ledger once and writes the ranked summary document.

Usage:
    python -m scripts.tasks.run_export_summary --output-path docs/summary.json --labels-path data/labels.json
"""
import argparse
import os
import sys
from dotenv import load_dotenv
from loguru import logger

# Add project root to python path
sys.path.append(os.getcwd())

from flow_pipeline import setup_logger, setup_metrics
from flow_pipeline.jobs.base.task_models import SummaryTaskContext
from flow_pipeline.jobs.tasks.export_summary_task import ExportSummaryTask
from flow_pipeline.storage.constants import TOP_N


def main():
    parser = argparse.ArgumentParser(description="Export flow and holder summary")
    parser.add_argument("--output-path", type=str, default=None, help="Summary JSON destination (default: $OUTPUT_PATH)")
    parser.add_argument("--labels-path", type=str, default=None, help="Address label directory (default: $LABELS_PATH)")
    parser.add_argument("--top-n", type=int, default=TOP_N, help="Rows per ranking")
    parser.add_argument("--metrics-port", type=int, default=None, help="Expose Prometheus metrics on this port")
    args = parser.parse_args()

    load_dotenv()

    service_name = "flow-pipeline-export-summary"
    setup_logger(service_name)
    if args.metrics_port:
        setup_metrics(service_name, port=args.metrics_port)

    context = SummaryTaskContext(top_n=args.top_n, service_name=service_name)
    if args.output_path:
        context.output_path = args.output_path
    if args.labels_path:
        context.labels_path = args.labels_path

    try:
        result = ExportSummaryTask().execute(context)
        logger.success(f"Export completed: {result}")
    except Exception as e:
        logger.error(f"Export failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
