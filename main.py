"""
Kathmandu Valley Tourism Analytics - Main Pipeline.

Computes the tourism analytics from the CSV datasets and writes them as
JSON, or renders the plain-text KPI report with charts.

Usage:
    python main.py                         # Run every analytic
    python main.py --step overview         # Headline KPIs only
    python main.py --step clustering       # Customer segmentation only
    python main.py --step report           # KPI report + PNG charts
    python main.py --step vendor --output vendor.json
"""

import argparse
import json
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Dict, Any, Callable

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.absolute()
sys.path.insert(0, str(PROJECT_ROOT))

from tourism_analytics.config.config import PLOTS_DIR, REPORTS_DIR
from tourism_analytics.data import Dataset, DataProvider
from tourism_analytics.analytics import (
    compute_overview,
    compute_spending_breakdown,
    list_nationalities,
    compute_time_series,
    perform_regression_analysis,
    perform_cohort_analysis,
    perform_customer_segmentation,
    vendor_insights,
    VENDOR_VIEWS,
    run_diagnostics
)
from tourism_analytics.exceptions import TourismAnalyticsError, DataUnavailableError
from tourism_analytics.reporting import KPIReporter, ChartExporter
from tourism_analytics.utils.logger import setup_logger

logger = setup_logger(__name__)


ANALYTIC_STEPS: Dict[str, Callable[[Dataset], Any]] = {
    'overview': compute_overview,
    'spending': lambda ds: compute_spending_breakdown(ds.tourists),
    'regression': lambda ds: perform_regression_analysis(ds.tourists),
    'cohort': lambda ds: perform_cohort_analysis(ds.tourists),
    'clustering': lambda ds: perform_customer_segmentation(ds.tourists),
    'vendor': lambda ds: {category: vendor_insights(ds, category) for category in VENDOR_VIEWS},
    'nationality': lambda ds: list_nationalities(ds.tourists),
    'timeseries': lambda ds: compute_time_series(ds.tourists),
    'diagnostics': run_diagnostics,
}


def run_analytic(step: str, dataset: Dataset) -> Any:
    logger.info("=" * 70)
    logger.info(f"STEP: {step.upper()}")
    logger.info("=" * 70)

    result = ANALYTIC_STEPS[step](dataset)
    logger.info(f"Completed {step}")
    return result


def write_json(results: Any, output: Optional[Path], step: str) -> Path:
    """Write results as indented JSON, by default into the reports directory."""
    if output is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output = REPORTS_DIR / f"{step}_{timestamp}.json"

    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, 'w', encoding='utf-8') as f:
        json.dump(results, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"Results saved to: {output}")
    return output


def run_report(dataset: Dataset, output: Optional[Path] = None) -> Dict[str, Any]:
    """
    Render the KPI report and the standard chart set.

    Args:
        dataset: Loaded tourism dataset
        output: Optional path for the text report

    Returns:
        Dictionary with the report path and chart paths
    """
    logger.info("=" * 70)
    logger.info("STEP: KPI REPORT & CHARTS")
    logger.info("=" * 70)

    overview = compute_overview(dataset)
    spending = compute_spending_breakdown(dataset.tourists)
    diagnostics = run_diagnostics(dataset)

    reporter = KPIReporter()
    report = reporter.generate_kpi_report(
        overview, spending, diagnostics['market_opportunities']
    )
    print(report)

    if output is not None:
        report_path = reporter.save_kpi_report(report, filename=output.name, report_dir=output.parent)
    else:
        report_path = reporter.save_kpi_report(report)

    exporter = ChartExporter(plot_dir=PLOTS_DIR)
    charts = [
        exporter.plot_season_distribution(overview),
        exporter.plot_spending_breakdown(spending),
        exporter.plot_cluster_sizes(perform_customer_segmentation(dataset.tourists)),
        exporter.plot_time_series(compute_time_series(dataset.tourists)),
    ]

    logger.info(f"\n Outputs saved to:")
    logger.info(f"   - Report: {report_path}")
    logger.info(f"   - Plots: {PLOTS_DIR}")

    return {
        'report': report_path,
        'charts': [path for path in charts if path is not None]
    }


def run_full_pipeline(dataset: Dataset, output: Optional[Path] = None) -> Dict[str, Any]:
    """Run every analytic and write the combined results as one JSON document."""
    start_time = datetime.now()
    logger.info("\n" + "=" * 70)
    logger.info("KATHMANDU VALLEY TOURISM ANALYTICS PIPELINE")
    logger.info(f"Started: {start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 70)

    results = {step: run_analytic(step, dataset) for step in ANALYTIC_STEPS}
    write_json(results, output, 'all')

    elapsed = (datetime.now() - start_time).total_seconds()
    logger.info(f"\n Completed in {elapsed:.1f}s")
    return results


def main():
    """Main entry point with command-line interface."""
    parser = argparse.ArgumentParser(
        description="Kathmandu Valley Tourism Analytics Pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py                               # Run every analytic
    python main.py --step cohort                 # Cohort analysis only
    python main.py --data-dir path/to/csvs       # Use a custom data directory
    python main.py --step report                 # KPI report and charts
        """
    )

    parser.add_argument(
        '--step',
        type=str,
        choices=list(ANALYTIC_STEPS) + ['report', 'all'],
        default='all',
        help='Run a specific analytic only'
    )

    parser.add_argument(
        '--data-dir', '-d',
        type=str,
        default=None,
        help='Directory holding the four tourism CSV files'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Output file (default: timestamped file in outputs/reports)'
    )

    args = parser.parse_args()

    data_dir = Path(args.data_dir) if args.data_dir else None
    output = Path(args.output) if args.output else None

    try:
        dataset = DataProvider(data_dir=data_dir).get()
    except DataUnavailableError as e:
        logger.error(f"Data file not found: {e}")
        sys.exit(1)

    try:
        if args.step == 'all':
            run_full_pipeline(dataset, output)
        elif args.step == 'report':
            run_report(dataset, output)
        else:
            write_json(run_analytic(args.step, dataset), output, args.step)
    except TourismAnalyticsError as e:
        logger.error(f"Pipeline error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
