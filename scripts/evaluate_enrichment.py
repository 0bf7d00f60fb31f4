#!/usr/bin/env python3
"""Evaluation harness for virtual screening rankings.

This script loads a ranked screening dataset (identifier, score, hit flag)
and reports the early-recognition metrics RIE, BEDROC, EF, AUC and AUAC.

Usage:
    python scripts/evaluate_enrichment.py data/dud_egfr.csv \
        --alpha 0.20 \
        --top 0.05 \
        --output-dir data/outputs/enrichment/2026-10-19/

Outputs:
    - enrichment_report.md: Human-readable report with metrics per direction
    - enrichment_results.json: Full metric values
"""

import argparse
import json
import logging
import math
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from enrichment_eval.datasets import load_screening_csv
from enrichment_eval.errors import EnrichmentError
from enrichment_eval.metrics import compute_all_metrics
from enrichment_eval.settings import DEFAULT_PRECISION, MetricSettings

logger = logging.getLogger(__name__)

METRIC_LABELS = [
    ("bedroc", "BEDROC"),
    ("ef", "EF"),
    ("rie", "RIE"),
    ("auac", "AUAC"),
    ("auc", "AUC"),
]


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    settings = MetricSettings.from_env()
    parser = argparse.ArgumentParser(
        description="Compute early-recognition metrics for a ranked screening dataset",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "data_file",
        type=Path,
        help="Path to dataset with header and columns (identifier, score, hit flag)",
    )
    parser.add_argument(
        "--delimiter",
        type=str,
        default=",",
        help="Column separator (default: ',')",
    )

    # Metric parameters
    parser.add_argument(
        "--alpha",
        type=float,
        default=settings.alpha,
        help=f"Early-recognition weight for RIE/BEDROC (default: {settings.alpha})",
    )
    parser.add_argument(
        "--top",
        type=float,
        default=settings.top,
        help=f"Fraction of the list for EF/AUC/AUAC (default: {settings.top})",
    )

    direction = parser.add_mutually_exclusive_group()
    direction.add_argument(
        "--decreasing",
        dest="directions",
        action="store_const",
        const=["decreasing"],
        help="Only rank by decreasing score (higher is better)",
    )
    direction.add_argument(
        "--increasing",
        dest="directions",
        action="store_const",
        const=["increasing"],
        help="Only rank by increasing score (lower is better, e.g. energies)",
    )
    direction.add_argument(
        "--both",
        dest="directions",
        action="store_const",
        const=["decreasing", "increasing"],
        help="Report both directions (default)",
    )

    # Output
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for enrichment_report.md and enrichment_results.json",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=DEFAULT_PRECISION,
        help=f"Decimal places in printed output (default: {DEFAULT_PRECISION})",
    )

    # Debug
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)
    if args.directions is None:
        args.directions = ["decreasing", "increasing"]
    return args


def format_value(value: float, precision: int) -> str:
    return f"{value:.{precision}f}"


def format_summary(results: Dict[str, Any], directions: List[str], precision: int) -> str:
    """Plain-text summary printed to stdout."""
    lines = [f"Number of data points: {results['n_items']}"]
    for direction in directions:
        lines.append(f"Ranking: {direction}")
        for key, label in METRIC_LABELS:
            lines.append(f"  Virtual Screening {label}: {format_value(results[direction][key], precision)}")
    return "\n".join(lines)


def generate_report(
    results: Dict[str, Any],
    directions: List[str],
    data_file: Path,
    precision: int = DEFAULT_PRECISION,
) -> str:
    """Generate markdown evaluation report.

    Args:
        results: Output of compute_all_metrics
        directions: Directions to include, in column order
        data_file: Dataset the metrics were computed from
        precision: Decimal places for metric values

    Returns:
        Markdown report string
    """
    lines = []

    # Header
    lines.append("# Virtual Screening Enrichment Report")
    lines.append("")
    lines.append(f"**Generated:** {datetime.now().isoformat()}")
    lines.append(f"**Dataset:** {data_file}")
    lines.append(f"**Total Items:** {results['n_items']}")
    lines.append(f"**Hits:** {results['n_positives']}")
    lines.append(f"**alpha (RIE/BEDROC):** {results['alpha']}")
    lines.append(f"**top (EF/AUC/AUAC):** {results['top']}")
    lines.append("")

    # Metrics table
    lines.append("## Metrics")
    lines.append("")
    lines.append("| Metric | " + " | ".join(directions) + " |")
    lines.append("|--------|" + "|".join("-" * (len(d) + 2) for d in directions) + "|")
    for key, label in METRIC_LABELS:
        values = [format_value(results[d][key], precision) for d in directions]
        lines.append(f"| {label} | " + " | ".join(values) + " |")
    lines.append("")

    return "\n".join(lines)


def _json_safe(value: Any) -> Any:
    """Replace NaN and infinite floats with None so the output is strict JSON."""
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def export_results_json(
    results: Dict[str, Any],
    output_path: Path,
    data_file: Path,
) -> None:
    """Export metric values to JSON.

    Undefined values (e.g. EF with top=0) are written as null.
    """
    output = {
        "data_file": str(data_file),
        "generated_at": datetime.now().isoformat(),
        "metrics": _json_safe(results),
    }

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2, allow_nan=False)

    logger.info("Exported results to %s", output_path)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        dataset = load_screening_csv(args.data_file, delimiter=args.delimiter)
        results = compute_all_metrics(
            dataset.scores,
            dataset.labels,
            alpha=args.alpha,
            top=args.top,
            directions=args.directions,
        )
    except EnrichmentError as e:
        logger.error("Evaluation failed: %s", e)
        return 1

    print(format_summary(results, args.directions, args.precision))

    if args.output_dir:
        args.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Output directory: %s", args.output_dir)

        report_path = args.output_dir / "enrichment_report.md"
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(generate_report(results, args.directions, args.data_file, args.precision))
        logger.info("Wrote report to %s", report_path)

        export_results_json(results, args.output_dir / "enrichment_results.json", args.data_file)

    return 0


if __name__ == "__main__":
    sys.exit(main())
