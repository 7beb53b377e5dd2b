"""
Unit tests for the KPI report and chart export.
"""

import pytest
import sys
from pathlib import Path

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from tourism_analytics.analytics import (
    compute_overview, compute_spending_breakdown, compute_time_series,
    perform_customer_segmentation, run_diagnostics
)
from tourism_analytics.reporting import KPIReporter, ChartExporter


class TestKPIReporter:
    def test_report_sections(self, sample_dataset):
        overview = compute_overview(sample_dataset)
        spending = compute_spending_breakdown(sample_dataset.tourists)
        report = KPIReporter().generate_kpi_report(overview, spending)
        assert 'KEY PERFORMANCE INDICATORS' in report
        assert f"{overview['total_tourists']:,}" in report
        assert 'AVERAGE SPENDING BREAKDOWN' in report

    def test_empty_dataset_skips_spending(self, empty_dataset):
        report = KPIReporter().generate_kpi_report(compute_overview(empty_dataset))
        assert 'SPENDING & EXPERIENCE' not in report

    def test_opportunities_listed(self, sample_dataset):
        opportunities = run_diagnostics(sample_dataset)['market_opportunities']
        report = KPIReporter().generate_kpi_report(compute_overview(sample_dataset),
                                                  opportunities=opportunities)
        assert 'MARKET OPPORTUNITIES' in report

    def test_save(self, tmp_path):
        path = KPIReporter().save_kpi_report("report body", filename="kpi.txt", report_dir=tmp_path)
        assert path == tmp_path / "kpi.txt"
        assert path.read_text(encoding='utf-8') == "report body"


class TestChartExporter:
    @pytest.fixture
    def exporter(self, tmp_path):
        return ChartExporter(plot_dir=tmp_path)

    def test_charts_written(self, exporter, sample_dataset):
        paths = [
            exporter.plot_season_distribution(compute_overview(sample_dataset)),
            exporter.plot_spending_breakdown(compute_spending_breakdown(sample_dataset.tourists)),
            exporter.plot_cluster_sizes(perform_customer_segmentation(sample_dataset.tourists)),
            exporter.plot_time_series(compute_time_series(sample_dataset.tourists)),
        ]
        for path in paths:
            assert path is not None
            assert path.exists()
            assert path.suffix == '.png'

    def test_empty_inputs_skipped(self, exporter, empty_dataset):
        assert exporter.plot_season_distribution(compute_overview(empty_dataset)) is None
        assert exporter.plot_cluster_sizes(perform_customer_segmentation([])) is None
        assert exporter.plot_time_series([]) is None

    def test_no_save(self, tmp_path, sample_dataset):
        exporter = ChartExporter(save_plots=False, plot_dir=tmp_path)
        assert exporter.plot_time_series(compute_time_series(sample_dataset.tourists)) is None
        assert list(tmp_path.iterdir()) == []
