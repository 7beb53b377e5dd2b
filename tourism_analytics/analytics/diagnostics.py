"""
Diagnostics Engine.

Cross-cutting heuristics for the dashboard's diagnostic views: satisfaction
drivers, spending-pattern segments, seasonal insight text, attraction
performance classes and market-opportunity detection.
"""

from typing import Any, Dict, List, Optional

from tourism_analytics.analytics.aggregation import (
    group_by, mean, percentage, rate, top_n
)
from tourism_analytics.config.config import analytics_config
from tourism_analytics.data.models import Attraction, Dataset, Tourist, Visit
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)

SEASONAL_INSIGHTS = {
    'Autumn': 'Peak season with highest tourist volume and spending',
    'Spring': 'Second peak with pleasant weather and festivals',
    'Monsoon': 'Low season with reduced prices - opportunity for long-stay visitors',
    'Winter': 'Moderate season with clear mountain views',
}

# Ordered (lower bound, label); ratings must exceed the bound
PERFORMANCE_CLASSES = [(8, 'Excellent'), (7, 'Good'), (6, 'Average')]
DEFAULT_PERFORMANCE = 'Needs Improvement'


def classify_performance(avg_rating: float) -> str:
    for bound, label in PERFORMANCE_CLASSES:
        if avg_rating > bound:
            return label
    return DEFAULT_PERFORMANCE


def analyze_satisfaction_drivers(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    drivers = []
    
    with_guide = [t.satisfaction_score for t in tourists if t.uses_tour_guide]
    without_guide = [t.satisfaction_score for t in tourists if not t.uses_tour_guide]
    if with_guide and without_guide:
        drivers.append({
            'factor': 'Tour Guide Usage',
            'with_factor': round(mean(with_guide), 2),
            'without_factor': round(mean(without_guide), 2),
            'impact': round(mean(with_guide) - mean(without_guide), 2),
            'insight': 'Tour guides significantly boost satisfaction through expertise and convenience',
        })
    
    season_satisfaction = sorted([
        {'season': season, 'satisfaction': round(mean(t.satisfaction_score for t in group), 2)}
        for season, group in group_by(tourists, 'season').items()
    ], key=lambda s: s['satisfaction'], reverse=True)
    if season_satisfaction:
        best, worst = season_satisfaction[0], season_satisfaction[-1]
        drivers.append({
            'factor': 'Season',
            'best': best,
            'worst': worst,
            'insight': f"{best['season']} provides best experience, {worst['season']} needs improvement",
        })
    
    return drivers


def _characterize(segment: str, group: List[Tourist], total: int) -> Dict[str, Any]:
    return {
        'segment': segment,
        'count': len(group),
        'percentage': round(percentage(len(group), total), 1),
        'characteristics': {
            'avg_duration': round(mean(t.duration_days for t in group), 1),
            'top_nationalities': top_n((t.nationality for t in group), 3),
            'guide_usage': round(rate(group, lambda t: t.uses_tour_guide), 1),
        },
    }


def analyze_spending_patterns(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    """High (>1.5x mean) and budget (<0.5x mean) spenders; empty segments are omitted."""
    if not tourists:
        return []
    avg_spend = mean(t.total_spent_npr for t in tourists)
    segments = [
        ('High Spenders (>1.5x average)', [t for t in tourists if t.total_spent_npr > avg_spend * 1.5]),
        ('Budget Travelers (<0.5x average)', [t for t in tourists if t.total_spent_npr < avg_spend * 0.5]),
    ]
    return [_characterize(name, group, len(tourists)) for name, group in segments if group]


def analyze_seasonal_patterns(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    return [
        {
            'season': season,
            'visitors': len(group),
            'avg_spending': round(mean(t.total_spent_npr for t in group)),
            'avg_satisfaction': round(mean(t.satisfaction_score for t in group), 2),
            'recommend_rate': round(rate(group, lambda t: t.would_recommend), 1),
            'insight': SEASONAL_INSIGHTS.get(season, ''),
        }
        for season, group in group_by(tourists, 'season').items()
    ]


def analyze_attraction_performance(
    visits: List[Visit],
    attractions: List[Attraction],
    config=analytics_config
) -> List[Dict[str, Any]]:
    by_attraction = group_by(visits, 'attraction_id')
    performance = []
    for attraction in attractions:
        attraction_visits = by_attraction.get(attraction.attraction_id, [])
        avg_rating = mean(v.visit_rating for v in attraction_visits) if attraction_visits else 0.0
        performance.append({
            'attraction_id': attraction.attraction_id,
            'name': attraction.attraction_name,
            'city': attraction.city,
            'category': attraction.category,
            'visit_count': len(attraction_visits),
            'avg_rating': round(avg_rating, 2),
            'performance': classify_performance(avg_rating),
        })
    performance.sort(key=lambda a: a['visit_count'], reverse=True)
    return performance[:config.top_performance_attractions]


def _monsoon_opportunity(tourists: List[Tourist]) -> Optional[Dict[str, Any]]:
    monsoon = [t for t in tourists if t.season == 'Monsoon']
    if not monsoon:
        return None
    return {
        'type': 'Seasonal Opportunity',
        'season': 'Monsoon',
        'insight': 'Lower volume but longer stays',
        'avg_daily_spend': round(mean(t.daily_spend_npr for t in monsoon)),
        'recommendation': 'Create monsoon packages with indoor activities, cultural experiences',
    }


def identify_market_opportunities(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    opportunities = []
    
    for nationality, group in group_by(tourists, 'nationality').items():
        market_share = percentage(len(group), len(tourists))
        avg_satisfaction = mean(t.satisfaction_score for t in group)
        avg_spending = mean(t.total_spent_npr for t in group)
        
        if market_share < 5 and avg_satisfaction > 7.5 and avg_spending > 50000:
            opportunities.append({
                'type': 'Underserved High-Value Market',
                'nationality': nationality,
                'current_share': round(market_share, 1),
                'satisfaction': round(avg_satisfaction, 2),
                'avg_spending': round(avg_spending),
                'recommendation': f"Increase marketing to {nationality} market - "
                                  "high satisfaction and spending potential",
            })
    
    monsoon = _monsoon_opportunity(tourists)
    if monsoon:
        opportunities.append(monsoon)
    
    return opportunities


def run_diagnostics(dataset: Dataset) -> Dict[str, Any]:
    logger.info("Running diagnostics...")
    tourists = dataset.tourists
    return {
        'satisfaction_drivers': analyze_satisfaction_drivers(tourists),
        'spending_patterns': analyze_spending_patterns(tourists),
        'seasonal_insights': analyze_seasonal_patterns(tourists),
        'attraction_performance': analyze_attraction_performance(dataset.visits, dataset.attractions),
        'market_opportunities': identify_market_opportunities(tourists),
    }
