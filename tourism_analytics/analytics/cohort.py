"""
Cohort Analytics.

Tourists are grouped into monthly cohorts by arrival date. Cohorts are then
rolled into the four seasons, and diagnostics flag the spending extremes and
satisfaction dips.
"""

import calendar
from typing import Any, Dict, List

from tourism_analytics.analytics.aggregation import falls_below, group_by, mean, rate, top_n
from tourism_analytics.config.config import analytics_config
from tourism_analytics.data.models import Tourist
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)


def cohort_label(cohort_id: str) -> str:
    """``2024-03`` -> ``Mar 2024``."""
    year, month = cohort_id.split('-')
    return f"{calendar.month_abbr[int(month)]} {year}"


def group_into_cohorts(tourists: List[Tourist]) -> Dict[str, List[Tourist]]:
    """Monthly cohorts keyed by arrival year-month, in chronological order."""
    groups = group_by(tourists, lambda t: t.arrival_month)
    return {cohort_id: groups[cohort_id] for cohort_id in sorted(groups)}


def build_cohort_metrics(cohorts: Dict[str, List[Tourist]]) -> List[Dict[str, Any]]:
    return [
        {
            'cohort_id': cohort_id,
            'cohort_label': cohort_label(cohort_id),
            'size': len(group),
            'metrics': {
                'avg_spending': round(mean(t.total_spent_npr for t in group)),
                'avg_duration': round(mean(t.duration_days for t in group), 1),
                'avg_satisfaction': round(mean(t.satisfaction_score for t in group), 2),
                'recommend_rate': round(rate(group, lambda t: t.would_recommend), 1),
                'guide_usage_rate': round(rate(group, lambda t: t.uses_tour_guide), 1),
            },
            'top_nationalities': top_n((t.nationality for t in group), 3),
            'top_purposes': top_n((t.travel_purpose for t in group), 3),
        }
        for cohort_id, group in cohorts.items()
    ]


def calculate_return_visitor_trend(cohorts: Dict[str, List[Tourist]]) -> List[Dict[str, Any]]:
    trend = []
    for month, group in cohorts.items():
        returning = sum(1 for t in group if t.previous_visits > 0)
        trend.append({
            'month': month,
            'total_visitors': len(group),
            'return_visitors': returning,
            'return_rate': round(returning / len(group) * 100, 1),
        })
    return trend


def analyze_seasonal_patterns(cohort_metrics: List[Dict[str, Any]], config=analytics_config) -> List[Dict[str, Any]]:
    """
    Roll monthly cohorts into seasons by calendar month.
    
    Spending and satisfaction are means of the per-cohort means, not
    recomputed over raw records. A season without cohorts reports zeros.
    """
    patterns = []
    for season, months in config.season_months.items():
        members = [c for c in cohort_metrics if c['cohort_id'].split('-')[1] in months]
        patterns.append({
            'season': season,
            'total_visitors': sum(c['size'] for c in members),
            'avg_spending': round(mean(c['metrics']['avg_spending'] for c in members)) if members else 0,
            'avg_satisfaction': round(mean(c['metrics']['avg_satisfaction'] for c in members), 2) if members else 0,
        })
    return patterns


def generate_cohort_diagnostics(cohort_metrics: List[Dict[str, Any]], config=analytics_config) -> List[Dict[str, Any]]:
    if not cohort_metrics:
        return []
    
    diagnostics = []
    by_spending = sorted(cohort_metrics, key=lambda c: c['metrics']['avg_spending'], reverse=True)
    highest, lowest = by_spending[0], by_spending[-1]
    
    diagnostics.append({
        'type': 'spending_variation',
        'insight': f"Highest spending cohort: {highest['cohort_label']} "
                   f"(NPR {highest['metrics']['avg_spending']})",
        'reason': 'Peak season typically attracts higher-spending tourists seeking premium experiences.',
        'recommendation': 'Increase inventory and staffing during peak months.',
    })
    diagnostics.append({
        'type': 'spending_low',
        'insight': f"Lowest spending cohort: {lowest['cohort_label']} "
                   f"(NPR {lowest['metrics']['avg_spending']})",
        'reason': 'Off-peak months draw budget-conscious and shorter-stay visitors.',
        'recommendation': 'Use off-peak promotions and value packages to lift spending.',
    })
    
    avg_satisfaction = mean(c['metrics']['avg_satisfaction'] for c in cohort_metrics)
    dips = [
        c for c in cohort_metrics
        if falls_below(c['metrics']['avg_satisfaction'], avg_satisfaction, config.satisfaction_gap)
    ]
    if dips:
        diagnostics.append({
            'type': 'satisfaction_dip',
            'insight': f"Low satisfaction periods: {', '.join(c['cohort_label'] for c in dips)}",
            'reason': 'Possible causes: overcrowding, monsoon weather, service quality issues.',
            'recommendation': 'Review operational issues during these periods. Consider capacity management.',
        })
    
    return diagnostics


def perform_cohort_analysis(tourists: List[Tourist]) -> Dict[str, Any]:
    logger.info(f"Running cohort analysis over {len(tourists)} tourists...")
    cohorts = group_into_cohorts(tourists)
    cohort_metrics = build_cohort_metrics(cohorts)
    
    result = {
        'cohorts': cohort_metrics,
        'return_visitor_trend': calculate_return_visitor_trend(cohorts),
        'diagnostics': generate_cohort_diagnostics(cohort_metrics),
        'seasonal_patterns': analyze_seasonal_patterns(cohort_metrics),
    }
    logger.info(f"Cohort analysis complete: {len(cohort_metrics)} monthly cohorts")
    return result
