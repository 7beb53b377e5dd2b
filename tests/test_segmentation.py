"""
Unit tests for the k-means customer segmentation.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from tourism_analytics.analytics.segmentation import (
    ClusterStats, assign_cluster_name, generate_cluster_diagnostics,
    generate_vendor_recommendations, build_feature_matrix, share_percentages,
    perform_customer_segmentation
)


def cluster_stats(**overrides):
    fields = dict(
        avg_spending=45000.0, avg_duration=6.0, avg_satisfaction=7.2, avg_attractions=5.0,
        top_nationality='German', top_purpose='Trekking', top_accommodation='Guesthouse',
        top_transport='Bus', guide_usage_rate=35.0, recommend_rate=70.0,
    )
    fields.update(overrides)
    return ClusterStats(**fields)


class TestClusterNaming:
    @pytest.mark.parametrize("overrides,expected", [
        ({'avg_spending': 90000.0, 'avg_duration': 10.0}, 'Premium Long-stay Seekers'),
        ({'avg_spending': 90000.0, 'avg_duration': 6.0, 'avg_satisfaction': 8.0},
         'High-Value Cultural Enthusiasts'),
        ({'avg_spending': 25000.0, 'avg_duration': 3.0}, 'Budget Quick Visitors'),
        ({'avg_duration': 9.0, 'avg_satisfaction': 7.5}, 'Satisfied Extended Explorers'),
        ({}, 'General Tourists'),
    ])
    def test_rules_in_order(self, overrides, expected):
        assert assign_cluster_name(cluster_stats(**overrides)) == expected

    def test_diagnostics_accumulate(self):
        stats = cluster_stats(avg_spending=75000.0, guide_usage_rate=60.0, avg_satisfaction=6.5)
        insights = [d['insight'] for d in generate_cluster_diagnostics(stats)]
        assert insights == ['High spending segment', 'High guide usage', 'Below average satisfaction']

    def test_vendor_recommendations(self):
        stats = cluster_stats(top_purpose='Pilgrimage', top_nationality='Indian')
        recommendations = generate_vendor_recommendations(stats)
        assert 'Offer vegetarian food options prominently' in recommendations
        assert 'Hindi-speaking staff recommended' in recommendations
        assert len(recommendations) == 4


class TestSharePercentages:
    def test_sums_to_hundred(self):
        shares = share_percentages([1, 1, 1])
        assert sum(shares) == pytest.approx(100.0)
        assert sorted(shares) == [33.3, 33.3, 33.4]

    def test_exact_shares_untouched(self):
        assert share_percentages([1, 3]) == [25.0, 75.0]


class TestSegmentation:
    def test_feature_matrix_scaling(self, make_tourist):
        features = build_feature_matrix([make_tourist(1)])
        assert features.shape == (1, 4)
        np.testing.assert_allclose(features[0], [29.0, 5, 8.0, 4])

    def test_cluster_sizes_and_percentages(self, sample_dataset):
        result = perform_customer_segmentation(sample_dataset.tourists)
        clusters = result['clusters']
        assert len(clusters) == 4
        assert sum(c['size'] for c in clusters) == 200
        assert sum(c['percentage'] for c in clusters) == pytest.approx(100.0, abs=0.1)
        assert len(result['centroids']) == 4
        assert all(len(centroid) == 4 for centroid in result['centroids'])

    def test_every_tourist_assigned(self, sample_dataset):
        result = perform_customer_segmentation(sample_dataset.tourists)
        assignments = result['tourist_clusters']
        assert len(assignments) == 200
        cluster_ids = {c['cluster_id'] for c in result['clusters']}
        assert {a['cluster'] for a in assignments} <= cluster_ids

    def test_deterministic(self, sample_dataset):
        first = perform_customer_segmentation(sample_dataset.tourists)
        second = perform_customer_segmentation(sample_dataset.tourists)
        assert first['tourist_clusters'] == second['tourist_clusters']

    def test_fewer_tourists_than_clusters(self, make_tourist):
        tourists = [make_tourist(1, total_spent_npr=10000.0), make_tourist(2, total_spent_npr=90000.0)]
        result = perform_customer_segmentation(tourists)
        assert sum(c['size'] for c in result['clusters']) == 2

    def test_empty(self):
        assert perform_customer_segmentation([]) == {
            'clusters': [], 'centroids': [], 'tourist_clusters': []
        }
