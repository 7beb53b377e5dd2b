"""
Overview Analytics.

Dataset-wide KPIs and distributions, plus the spending breakdown, nationality
list/detail and monthly time series views.
"""

from typing import Any, Dict, List

from tourism_analytics.analytics.aggregation import (
    Bucket, bucketize, distribution, group_by, mean, or_none, percentage,
    rate, rounded, top_n
)
from tourism_analytics.config.config import analytics_config
from tourism_analytics.data.models import Dataset, Tourist
from tourism_analytics.exceptions import NationalityNotFoundError
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)

COST_COMPONENTS = {
    'accommodation': 'accommodation_cost_npr',
    'food': 'food_cost_npr',
    'shopping': 'shopping_cost_npr',
    'activities': 'activities_cost_npr',
    'transport': 'transport_cost_npr',
    'guide': 'guide_cost_npr',
}

AGE_BUCKETS = [
    Bucket('18-25', 18, 25),
    Bucket('26-35', 26, 35),
    Bucket('36-45', 36, 45),
    Bucket('46-55', 46, 55),
    Bucket('56-65', 56, 65),
    Bucket('65+', 65, 100),
]


def compute_overview(dataset: Dataset, config=analytics_config) -> Dict[str, Any]:
    """
    Dataset-wide KPIs.
    
    With no tourists every mean and rate is None and the distributions are
    empty; collection counts are always reported.
    """
    logger.info("Computing overview KPIs...")
    tourists = dataset.tourists
    
    overview = {
        'total_tourists': len(tourists),
        'total_attractions': len(dataset.attractions),
        'total_accommodations': len(dataset.accommodations),
        'total_visits': len(dataset.visits),
        'avg_spending': rounded(or_none(mean, (t.total_spent_npr for t in tourists))),
        'avg_duration': rounded(or_none(mean, (t.duration_days for t in tourists)), 1),
        'avg_satisfaction': rounded(or_none(mean, (t.satisfaction_score for t in tourists)), 2),
        'recommend_rate': rounded(or_none(rate, tourists, lambda t: t.would_recommend), 1),
        'guide_usage_rate': rounded(or_none(rate, tourists, lambda t: t.uses_tour_guide), 1),
        'total_revenue': round(sum(t.total_spent_npr for t in tourists)),
        'top_nationalities': top_n((t.nationality for t in tourists), config.top_nationalities),
        'season_distribution': distribution(tourists, 'season'),
        'purpose_distribution': distribution(tourists, 'travel_purpose'),
        'accommodation_distribution': distribution(tourists, 'accommodation_type'),
        'transport_distribution': distribution(tourists, 'primary_transport'),
        'top_attractions': top_n((v.attraction_name for v in dataset.visits), config.top_attractions),
    }
    
    logger.info(f"Overview computed for {len(tourists)} tourists")
    return overview


def compute_spending_breakdown(tourists: List[Tourist]) -> Dict[str, Any]:
    """Mean of each cost component and its share of the summed means."""
    breakdown = {}
    for name, attr in COST_COMPONENTS.items():
        values = [getattr(t, attr) for t in tourists]
        if name == 'guide':
            # Guide cost averaged over tourists who paid for one
            values = [v for v in values if v > 0]
        breakdown[name] = rounded(or_none(mean, values))
    
    total = sum(v for v in breakdown.values() if v is not None)
    percentages = {
        name: rounded(or_none(percentage, value, total), 1) if value is not None else None
        for name, value in breakdown.items()
    }
    return {'breakdown': breakdown, 'percentages': percentages}


def list_nationalities(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    groups = group_by(tourists, 'nationality')
    result = [
        {
            'nationality': nationality,
            'count': len(group),
            'market_share': round(percentage(len(group), len(tourists)), 1),
            'avg_spending': round(mean(t.total_spent_npr for t in group)),
        }
        for nationality, group in groups.items()
    ]
    return sorted(result, key=lambda n: n['count'], reverse=True)


def age_distribution(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    buckets = bucketize(tourists, lambda t: t.age, AGE_BUCKETS)
    return [
        {
            'age_group': label,
            'count': len(group),
            'percentage': rounded(or_none(percentage, len(group), len(tourists)), 1),
        }
        for label, group in buckets.items()
    ]


def nationality_detail(dataset: Dataset, nationality: str) -> Dict[str, Any]:
    """Profile of one nationality, matched case-insensitively."""
    tourists = dataset.tourists
    filtered = [t for t in tourists if t.nationality.lower() == nationality.lower()]
    if not filtered:
        raise NationalityNotFoundError(f"Nationality not found: {nationality}")
    
    tourist_ids = {t.tourist_id for t in filtered}
    nationality_visits = [v for v in dataset.visits if v.tourist_id in tourist_ids]
    
    return {
        'nationality': filtered[0].nationality,
        'count': len(filtered),
        'market_share': round(percentage(len(filtered), len(tourists)), 1),
        'avg_spending': round(mean(t.total_spent_npr for t in filtered)),
        'avg_duration': round(mean(t.duration_days for t in filtered), 1),
        'avg_satisfaction': round(mean(t.satisfaction_score for t in filtered), 2),
        'recommend_rate': round(rate(filtered, lambda t: t.would_recommend), 1),
        'age_distribution': age_distribution(filtered),
        'purpose_distribution': distribution(filtered, 'travel_purpose'),
        'accommodation_preference': distribution(filtered, 'accommodation_type'),
        'transport_preference': distribution(filtered, 'primary_transport'),
        'season_distribution': distribution(filtered, 'season'),
        'top_attractions': top_n((v.attraction_name for v in nationality_visits), 10),
        'spending_breakdown': {
            name: round(mean(getattr(t, attr) for t in filtered))
            for name, attr in COST_COMPONENTS.items() if name != 'guide'
        },
    }


def compute_time_series(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    monthly = group_by(tourists, lambda t: t.arrival_month)
    return [
        {
            'month': month,
            'visitors': len(monthly[month]),
            'avg_spending': round(mean(t.total_spent_npr for t in monthly[month])),
            'total_revenue': round(sum(t.total_spent_npr for t in monthly[month])),
            'avg_satisfaction': round(mean(t.satisfaction_score for t in monthly[month]), 2),
        }
        for month in sorted(monthly)
    ]
