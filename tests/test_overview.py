"""
Unit tests for the overview analytics.
"""

import pytest
import sys
from datetime import date
from pathlib import Path

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from tourism_analytics.analytics.overview import (
    compute_overview, compute_spending_breakdown, list_nationalities,
    nationality_detail, compute_time_series
)
from tourism_analytics.analytics.factors import analyze_nationality_spending
from tourism_analytics.data.models import Dataset
from tourism_analytics.exceptions import NationalityNotFoundError


class TestComputeOverview:
    def test_counts(self, sample_dataset):
        overview = compute_overview(sample_dataset)
        assert overview['total_tourists'] == 200
        assert overview['total_attractions'] == 12
        assert overview['total_accommodations'] == 8
        assert overview['total_visits'] == 600

    def test_total_revenue_matches_nationality_totals(self, sample_dataset):
        overview = compute_overview(sample_dataset)
        by_nationality = analyze_nationality_spending(sample_dataset.tourists)
        # Each per-nationality total is rounded separately
        assert abs(overview['total_revenue'] - sum(n['total_revenue'] for n in by_nationality)) <= len(by_nationality)

    def test_rates_within_bounds(self, sample_dataset):
        overview = compute_overview(sample_dataset)
        assert 0 <= overview['recommend_rate'] <= 100
        assert 0 <= overview['guide_usage_rate'] <= 100
        assert len(overview['top_nationalities']) <= 10
        assert len(overview['top_attractions']) <= 15

    def test_distributions_sum_to_total(self, sample_dataset):
        overview = compute_overview(sample_dataset)
        for key in ['season_distribution', 'purpose_distribution',
                    'accommodation_distribution', 'transport_distribution']:
            assert sum(entry['count'] for entry in overview[key]) == 200

    def test_empty_dataset(self, empty_dataset):
        overview = compute_overview(empty_dataset)
        assert overview['total_tourists'] == 0
        assert overview['avg_spending'] is None
        assert overview['avg_satisfaction'] is None
        assert overview['recommend_rate'] is None
        assert overview['total_revenue'] == 0
        assert overview['season_distribution'] == []


class TestSpendingBreakdown:
    def test_guide_averaged_over_paying_tourists(self, make_tourist):
        tourists = [make_tourist(1, guide_cost_npr=4000.0), make_tourist(2, guide_cost_npr=0.0)]
        result = compute_spending_breakdown(tourists)
        assert result['breakdown']['guide'] == 4000
        assert result['breakdown']['food'] == 5000

    def test_percentages_cover_components(self, sample_dataset):
        result = compute_spending_breakdown(sample_dataset.tourists)
        assert sum(result['percentages'].values()) == pytest.approx(100, abs=0.5)

    def test_no_guide_spend(self, make_tourist):
        result = compute_spending_breakdown([make_tourist(1)])
        assert result['breakdown']['guide'] is None
        assert result['percentages']['guide'] is None


class TestNationalities:
    def test_list_sorted_by_count(self, sample_dataset):
        result = list_nationalities(sample_dataset.tourists)
        counts = [n['count'] for n in result]
        assert counts == sorted(counts, reverse=True)
        assert sum(counts) == 200

    def test_detail_case_insensitive(self, sample_dataset):
        detail = nationality_detail(sample_dataset, 'indian')
        assert detail['nationality'] == 'Indian'
        assert detail['count'] == sum(1 for t in sample_dataset.tourists if t.nationality == 'Indian')
        assert 'guide' not in detail['spending_breakdown']

    def test_detail_unknown_raises(self, sample_dataset):
        with pytest.raises(NationalityNotFoundError):
            nationality_detail(sample_dataset, 'Atlantean')


class TestTimeSeries:
    def test_chronological_months(self, make_tourist):
        tourists = [
            make_tourist(1, arrival_date=date(2024, 5, 2)),
            make_tourist(2, arrival_date=date(2023, 12, 30)),
            make_tourist(3, arrival_date=date(2024, 5, 20), total_spent_npr=31000.0),
        ]
        series = compute_time_series(tourists)
        assert [m['month'] for m in series] == ['2023-12', '2024-05']
        assert series[1]['visitors'] == 2
        assert series[1]['total_revenue'] == 60000
        assert series[1]['avg_spending'] == 30000

    def test_empty(self):
        assert compute_time_series([]) == []
