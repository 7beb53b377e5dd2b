"""
Segmentation (Clustering) Analytics.

K-means customer segmentation over a four-feature space
[total_spent_npr / 1000, duration_days, satisfaction_score,
num_attractions_visited]. Spending is only scaled down to the magnitude of
the other features; no z-scoring is applied.

Cluster naming, diagnostics and vendor recommendations are ordered decision
tables evaluated top to bottom.
"""

import warnings
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

import numpy as np
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

from tourism_analytics.analytics.aggregation import group_by, mean, most_frequent, rate
from tourism_analytics.config.config import analytics_config
from tourism_analytics.data.models import Tourist
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClusterStats:
    avg_spending: float
    avg_duration: float
    avg_satisfaction: float
    avg_attractions: float
    top_nationality: str
    top_purpose: str
    top_accommodation: str
    top_transport: str
    guide_usage_rate: float
    recommend_rate: float

    @classmethod
    def from_group(cls, group: List[Tourist]) -> 'ClusterStats':
        return cls(
            avg_spending=mean(t.total_spent_npr for t in group),
            avg_duration=mean(t.duration_days for t in group),
            avg_satisfaction=mean(t.satisfaction_score for t in group),
            avg_attractions=mean(t.num_attractions_visited for t in group),
            top_nationality=most_frequent(t.nationality for t in group),
            top_purpose=most_frequent(t.travel_purpose for t in group),
            top_accommodation=most_frequent(t.accommodation_type for t in group),
            top_transport=most_frequent(t.primary_transport for t in group),
            guide_usage_rate=rate(group, lambda t: t.uses_tour_guide),
            recommend_rate=rate(group, lambda t: t.would_recommend),
        )


Rule = Tuple[Callable[[ClusterStats], bool], Any]

CLUSTER_NAME_RULES: List[Rule] = [
    (lambda s: s.avg_spending > 80000 and s.avg_duration > 8, 'Premium Long-stay Seekers'),
    (lambda s: s.avg_spending > 60000 and s.avg_satisfaction > 7.5, 'High-Value Cultural Enthusiasts'),
    (lambda s: s.avg_spending < 30000 and s.avg_duration < 5, 'Budget Quick Visitors'),
    (lambda s: s.avg_duration > 7 and s.avg_satisfaction > 7, 'Satisfied Extended Explorers'),
]
DEFAULT_CLUSTER_NAME = 'General Tourists'

CLUSTER_DIAGNOSTIC_RULES: List[Rule] = [
    (lambda s: s.avg_spending > 70000, lambda s: {
        'insight': 'High spending segment',
        'reason': f"This cluster has significantly higher spending (NPR {round(s.avg_spending)}), "
                  "likely due to preference for premium services and longer stays.",
        'action': 'Target with luxury offerings and personalized experiences.',
    }),
    (lambda s: s.avg_spending < 30000, lambda s: {
        'insight': 'Budget-conscious segment',
        'reason': 'Lower spending indicates price sensitivity. '
                  'Common among backpackers and pilgrimage tourists.',
        'action': 'Offer value packages and group discounts.',
    }),
    (lambda s: s.guide_usage_rate > 50, lambda s: {
        'insight': 'High guide usage',
        'reason': f"Over {round(s.guide_usage_rate)}% use tour guides, "
                  "indicating preference for structured experiences.",
        'action': 'Partner with local guides for referral programs.',
    }),
    (lambda s: s.avg_satisfaction < 7, lambda s: {
        'insight': 'Below average satisfaction',
        'reason': f"Satisfaction score of {s.avg_satisfaction:.1f} suggests room for "
                  "improvement in service quality.",
        'action': 'Focus on improving pain points: wait times, language barriers, '
                  'service consistency.',
    }),
]

VENDOR_RECOMMENDATION_RULES: List[Rule] = [
    (lambda s: s.avg_spending > 60000, [
        'Premium service positioning - tourists willing to pay more for quality',
        'Focus on exclusive experiences and personalized attention',
    ]),
    (lambda s: s.top_purpose == 'Pilgrimage', [
        'Partner with temple management for pilgrimage packages',
        'Offer vegetarian food options prominently',
    ]),
    (lambda s: s.top_purpose == 'Cultural Tourism', [
        'Highlight heritage and authenticity in marketing',
        'Offer cultural workshops and local artisan connections',
    ]),
    (lambda s: s.top_nationality == 'Indian', [
        'Hindi-speaking staff recommended',
        'Indian payment methods (UPI, Paytm) beneficial',
    ]),
    (lambda s: s.top_nationality == 'Chinese', [
        'Mandarin-speaking staff and signage valuable',
        'Accept WeChat Pay/Alipay if possible',
    ]),
]


def assign_cluster_name(stats: ClusterStats) -> str:
    for predicate, name in CLUSTER_NAME_RULES:
        if predicate(stats):
            return name
    return DEFAULT_CLUSTER_NAME


def generate_cluster_diagnostics(stats: ClusterStats) -> List[Dict[str, str]]:
    return [build(stats) for predicate, build in CLUSTER_DIAGNOSTIC_RULES if predicate(stats)]


def generate_vendor_recommendations(stats: ClusterStats) -> List[str]:
    recommendations = []
    for predicate, texts in VENDOR_RECOMMENDATION_RULES:
        if predicate(stats):
            recommendations.extend(texts)
    return recommendations


def build_feature_matrix(tourists: List[Tourist], config=analytics_config) -> np.ndarray:
    return np.array([
        [
            t.total_spent_npr / config.spending_scale,
            t.duration_days,
            t.satisfaction_score,
            t.num_attractions_visited,
        ]
        for t in tourists
    ], dtype=float)


def share_percentages(sizes: List[int]) -> List[float]:
    """
    Percentages at one decimal that sum to exactly 100.0.
    
    Tenths are floored, then the leftover tenths go to the largest remainders.
    """
    total = sum(sizes)
    raw = [size * 1000 / total for size in sizes]
    tenths = [int(value) for value in raw]
    leftover = 1000 - sum(tenths)
    by_remainder = sorted(range(len(sizes)), key=lambda i: raw[i] - tenths[i], reverse=True)
    for i in by_remainder[:leftover]:
        tenths[i] += 1
    return [value / 10 for value in tenths]


def run_kmeans(features: np.ndarray, config=analytics_config) -> Tuple[np.ndarray, np.ndarray]:
    """
    Fit k-means and return (labels, centroids).
    
    Stopping at the iteration cap is not an error; the best result found is
    returned.
    """
    n_clusters = min(config.n_clusters, len(features))
    kmeans = KMeans(
        n_clusters=n_clusters,
        max_iter=config.max_iterations,
        n_init=config.n_init,
        random_state=config.random_state,
    )
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', category=ConvergenceWarning)
        labels = kmeans.fit_predict(features)
    if kmeans.n_iter_ >= config.max_iterations:
        logger.warning(f"K-means stopped at iteration cap ({config.max_iterations})")
    return labels, kmeans.cluster_centers_


def analyze_cluster_characteristics(
    tourists: List[Tourist],
    labels: np.ndarray
) -> List[Dict[str, Any]]:
    labelled = list(zip((int(label) for label in labels), tourists))
    groups = group_by(labelled, lambda pair: pair[0])
    cluster_ids = sorted(groups)
    percentages = share_percentages([len(groups[c]) for c in cluster_ids])
    
    clusters = []
    for cluster_id, share in zip(cluster_ids, percentages):
        group = [t for _, t in groups[cluster_id]]
        stats = ClusterStats.from_group(group)
        clusters.append({
            'cluster_id': cluster_id,
            'name': assign_cluster_name(stats),
            'size': len(group),
            'percentage': share,
            'characteristics': {
                'avg_spending': round(stats.avg_spending),
                'avg_duration': round(stats.avg_duration, 1),
                'avg_satisfaction': round(stats.avg_satisfaction, 2),
                'avg_attractions': round(stats.avg_attractions, 1),
                'top_nationality': stats.top_nationality,
                'top_purpose': stats.top_purpose,
                'top_accommodation': stats.top_accommodation,
                'top_transport': stats.top_transport,
                'guide_usage_rate': round(stats.guide_usage_rate, 1),
                'recommend_rate': round(stats.recommend_rate, 1),
            },
            'diagnostics': generate_cluster_diagnostics(stats),
            'vendor_recommendations': generate_vendor_recommendations(stats),
        })
    return clusters


def perform_customer_segmentation(tourists: List[Tourist], config=analytics_config) -> Dict[str, Any]:
    logger.info(f"Running k-means segmentation over {len(tourists)} tourists...")
    if not tourists:
        logger.warning("No tourists to segment")
        return {'clusters': [], 'centroids': [], 'tourist_clusters': []}
    
    features = build_feature_matrix(tourists, config)
    labels, centroids = run_kmeans(features, config)
    
    result = {
        'clusters': analyze_cluster_characteristics(tourists, labels),
        'centroids': centroids.tolist(),
        'tourist_clusters': [
            {'tourist_id': t.tourist_id, 'cluster': int(label)}
            for t, label in zip(tourists, labels)
        ],
    }
    logger.info(f"Segmentation complete: {len(result['clusters'])} clusters")
    return result
