"""
Factor Analytics (regression-style).

Correlation and simple linear regression between spending/satisfaction and
candidate factors, nationality aggregates and fixed-cohort predictive
profiles.

Factor results form a tagged union discriminated by ``kind``:
CorrelationFactor, BinarySplitFactor and CategoricalBreakdownFactor.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from tourism_analytics.analytics.aggregation import (
    Bucket, bucketize, correlation, group_by, mean, most_frequent, or_none,
    percentage, rate, simple_linear_regression, top_n
)
from tourism_analytics.config.config import analytics_config
from tourism_analytics.data.models import Tourist
from tourism_analytics.exceptions import InsufficientDataError
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)

# Ordered (predicate, label) rules plus a default: first matching predicate wins.
ImpactRules = Tuple[Sequence[Tuple[Callable[[float], bool], str]], str]

DURATION_IMPACT: ImpactRules = (
    [(lambda r: r > 0.5, 'Strong Positive'), (lambda r: r > 0.3, 'Moderate Positive')],
    'Weak',
)
GROUP_SIZE_IMPACT: ImpactRules = (
    [(lambda r: r > 0.3, 'Positive'), (lambda r: r < -0.1, 'Negative')],
    'Minimal',
)
AGE_IMPACT: ImpactRules = ([(lambda r: r > 0.2, 'Moderate Positive')], 'Weak')
ATTRACTIONS_IMPACT: ImpactRules = ([(lambda r: r > 0.4, 'Strong Positive')], 'Moderate')

DURATION_BUCKETS = [
    Bucket('1-3 days', 1, 3),
    Bucket('4-7 days', 4, 7),
    Bucket('8-14 days', 8, 14),
    Bucket('15+ days', 15, 100),
]


def classify_impact(value: float, rules: ImpactRules) -> str:
    predicates, default = rules
    for predicate, label in predicates:
        if predicate(value):
            return label
    return default


@dataclass(frozen=True)
class CorrelationFactor:
    factor: str
    correlation: float
    impact: str
    insight: str
    kind: str = field(default='correlation', init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'factor': self.factor,
            'correlation': round(self.correlation, 3),
            'impact': self.impact,
            'insight': self.insight,
        }


@dataclass(frozen=True)
class BinarySplitFactor:
    factor: str
    with_factor: float
    without_factor: float
    insight: str
    kind: str = field(default='binary_split', init=False)

    @property
    def difference(self) -> float:
        return self.with_factor - self.without_factor

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'factor': self.factor,
            'with_factor': round(self.with_factor, 2),
            'without_factor': round(self.without_factor, 2),
            'difference': round(self.difference, 2),
            'insight': self.insight,
        }


@dataclass(frozen=True)
class CategoricalBreakdownFactor:
    factor: str
    category_key: str
    breakdown: List[Tuple[str, float, int]]  # (category, mean satisfaction, count)
    insight: str
    kind: str = field(default='categorical_breakdown', init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'factor': self.factor,
            'breakdown': [
                {self.category_key: category, 'avg_satisfaction': round(avg, 2), 'count': count}
                for category, avg, count in self.breakdown
            ],
            'insight': self.insight,
        }


Factor = Union[CorrelationFactor, BinarySplitFactor, CategoricalBreakdownFactor]


def correlation_factor(
    tourists: List[Tourist],
    name: str,
    value_fn: Callable[[Tourist], float],
    rules: ImpactRules,
    insight: str
) -> Optional[CorrelationFactor]:
    """Correlate a factor with total spending; None when undefined."""
    try:
        r = correlation([value_fn(t) for t in tourists], [t.total_spent_npr for t in tourists])
    except InsufficientDataError as e:
        logger.warning(f"Omitting factor '{name}': {e}")
        return None
    return CorrelationFactor(factor=name, correlation=r,
                             impact=classify_impact(r, rules), insight=insight)


def binary_split_factor(
    tourists: List[Tourist],
    name: str,
    predicate: Callable[[Tourist], bool],
    insight: str
) -> Optional[BinarySplitFactor]:
    with_group = [t.satisfaction_score for t in tourists if predicate(t)]
    without_group = [t.satisfaction_score for t in tourists if not predicate(t)]
    try:
        return BinarySplitFactor(factor=name, with_factor=mean(with_group),
                                 without_factor=mean(without_group), insight=insight)
    except InsufficientDataError:
        logger.warning(f"Omitting factor '{name}': one side of the split is empty")
        return None


def categorical_breakdown_factor(
    tourists: List[Tourist],
    name: str,
    attribute: str,
    category_key: str,
    insight: str
) -> CategoricalBreakdownFactor:
    breakdown = [
        (category, mean(t.satisfaction_score for t in group), len(group))
        for category, group in group_by(tourists, attribute).items()
    ]
    breakdown.sort(key=lambda row: row[1], reverse=True)
    return CategoricalBreakdownFactor(factor=name, category_key=category_key,
                                      breakdown=breakdown, insight=insight)


def spending_regression(tourists: List[Tourist]) -> Optional[Dict[str, Any]]:
    """OLS regression of total spending on trip duration."""
    try:
        fit = simple_linear_regression(
            [t.duration_days for t in tourists], [t.total_spent_npr for t in tourists]
        )
    except InsufficientDataError as e:
        logger.warning(f"Spending regression unavailable: {e}")
        return None
    return {
        'slope': round(fit.slope, 2),
        'intercept': round(fit.intercept, 2),
        'equation': f"Spending = {fit.slope:.0f} × Days + {fit.intercept:.0f}",
    }


def analyze_spending_factors(tourists: List[Tourist]) -> Dict[str, Any]:
    avg_daily = or_none(mean, (t.daily_spend_npr for t in tourists))
    duration_insight = (
        f"Each additional day adds approximately NPR {round(avg_daily)} to spending"
        if avg_daily is not None else "Not enough data to estimate daily spending"
    )
    
    candidates = [
        correlation_factor(tourists, 'Duration (days)', lambda t: t.duration_days,
                           DURATION_IMPACT, duration_insight),
        correlation_factor(tourists, 'Group Size', lambda t: t.group_size, GROUP_SIZE_IMPACT,
                           'Larger groups tend to spend more on group activities '
                           'but may seek budget options per person'),
        correlation_factor(tourists, 'Age', lambda t: t.age, AGE_IMPACT,
                           'Older tourists tend to have higher budgets and preference for comfort'),
        correlation_factor(tourists, 'Attractions Visited', lambda t: t.num_attractions_visited,
                           ATTRACTIONS_IMPACT,
                           'More attractions = higher activity costs and entry fees'),
    ]
    return {
        'factors': [f.to_dict() for f in candidates if f is not None],
        'regression': spending_regression(tourists),
    }


def analyze_satisfaction_factors(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    factors: List[Optional[Factor]] = [
        binary_split_factor(tourists, 'Tour Guide Usage', lambda t: t.uses_tour_guide,
                            'Tour guides significantly improve satisfaction through '
                            'expert knowledge and convenience'),
        categorical_breakdown_factor(tourists, 'Accommodation Type', 'accommodation_type', 'type',
                                     'Higher-end accommodations correlate with better satisfaction'),
        categorical_breakdown_factor(tourists, 'Season', 'season', 'season',
                                     'Weather and crowd levels significantly impact satisfaction'),
    ]
    return [f.to_dict() for f in factors if f is not None]


def analyze_duration_impact(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    impact = []
    for label, group in bucketize(tourists, lambda t: t.duration_days, DURATION_BUCKETS).items():
        if not group:
            continue
        impact.append({
            'duration': label,
            'count': len(group),
            'avg_spending': round(mean(t.total_spent_npr for t in group)),
            'avg_daily_spending': round(mean(t.daily_spend_npr for t in group)),
            'avg_satisfaction': round(mean(t.satisfaction_score for t in group), 2),
            'recommend_rate': round(rate(group, lambda t: t.would_recommend), 1),
        })
    return impact


def analyze_nationality_spending(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    """Per-nationality aggregates sorted by total revenue."""
    result = []
    for nationality, group in group_by(tourists, 'nationality').items():
        result.append({
            'nationality': nationality,
            'count': len(group),
            'market_share': round(percentage(len(group), len(tourists)), 1),
            'avg_spending': round(mean(t.total_spent_npr for t in group)),
            'avg_duration': round(mean(t.duration_days for t in group), 1),
            'avg_satisfaction': round(mean(t.satisfaction_score for t in group), 2),
            'top_purpose': most_frequent(t.travel_purpose for t in group),
            'top_accommodation': most_frequent(t.accommodation_type for t in group),
            'guide_usage_rate': round(rate(group, lambda t: t.uses_tour_guide), 1),
            'total_revenue': round(sum(t.total_spent_npr for t in group)),
        })
    return sorted(result, key=lambda n: n['total_revenue'], reverse=True)


def generate_predictive_insights(tourists: List[Tourist], config=analytics_config) -> List[Dict[str, Any]]:
    insights = []
    
    high_value = [t for t in tourists if t.total_spent_npr > config.high_value_threshold]
    if high_value:
        insights.append({
            'type': 'high_value_profile',
            'title': 'High-Value Tourist Profile',
            'profile': {
                'avg_age': round(mean(t.age for t in high_value)),
                'top_nationalities': top_n((t.nationality for t in high_value), 3),
                'avg_duration': round(mean(t.duration_days for t in high_value), 1),
                'top_purposes': top_n((t.travel_purpose for t in high_value), 3),
                'guide_usage_rate': round(rate(high_value, lambda t: t.uses_tour_guide), 1),
            },
            'recommendation': 'Target marketing towards this profile for maximum revenue',
        })
    
    at_risk = [t for t in tourists if t.satisfaction_score < config.low_satisfaction_threshold]
    if at_risk:
        insights.append({
            'type': 'at_risk_segment',
            'title': 'At-Risk Segment Analysis',
            'profile': {
                'count': len(at_risk),
                'percentage': round(percentage(len(at_risk), len(tourists)), 1),
                'top_nationalities': top_n((t.nationality for t in at_risk), 3),
                'common_issues': top_n((t.travel_purpose for t in at_risk), 3),
                'avg_spending': round(mean(t.total_spent_npr for t in at_risk)),
            },
            'recommendation': 'Address service gaps for these segments to improve overall ratings',
        })
    
    return insights


def perform_regression_analysis(tourists: List[Tourist]) -> Dict[str, Any]:
    logger.info(f"Running factor analysis over {len(tourists)} tourists...")
    result = {
        'spending_factors': analyze_spending_factors(tourists),
        'satisfaction_factors': analyze_satisfaction_factors(tourists),
        'duration_impact': analyze_duration_impact(tourists),
        'nationality_spending': analyze_nationality_spending(tourists),
        'predictive_insights': generate_predictive_insights(tourists),
    }
    logger.info("Factor analysis complete")
    return result
