"""
Vendor Analytics.

Five independent views, one per tourism sub-sector: accommodation,
attractions, food, shopping and transport. Each groups tourists (and the
catalogs where relevant) by a categorical dimension and attaches heuristic
diagnostics and recommendations.
"""

from typing import Any, Callable, Dict, List

from tourism_analytics.analytics.aggregation import (
    distribution, falls_below, group_by, mean, percentage, rate, top_n
)
from tourism_analytics.config.config import analytics_config
from tourism_analytics.data.models import Accommodation, Attraction, Dataset, Tourist, Visit
from tourism_analytics.exceptions import UnknownVendorCategoryError
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)


# Accommodation

def generate_accommodation_diagnostics(
    accommodation_type: str,
    group: List[Tourist],
    overall_satisfaction: float,
    config=analytics_config
) -> List[Dict[str, str]]:
    diagnostics = []
    avg_satisfaction = mean(t.satisfaction_score for t in group)
    
    if falls_below(avg_satisfaction, overall_satisfaction, config.satisfaction_gap):
        diagnostics.append({
            'issue': 'Below average satisfaction',
            'value': f"{avg_satisfaction:.2f}",
            'benchmark': f"{overall_satisfaction:.2f}",
            'reason': f"{accommodation_type} guests report lower satisfaction. "
                      "Common issues: amenities, service quality, value perception.",
            'action': 'Review guest feedback, improve service touchpoints, consider amenity upgrades.',
        })
    
    guide_usage = rate(group, lambda t: t.uses_tour_guide)
    if guide_usage < 30:
        diagnostics.append({
            'issue': 'Low guide usage',
            'value': f"{guide_usage:.1f}%",
            'reason': 'Guests may be unaware of guide services or find them too expensive.',
            'action': 'Partner with local guides, offer package deals with guided tours.',
        })
    
    recommend = rate(group, lambda t: t.would_recommend)
    if recommend < 60:
        diagnostics.append({
            'issue': 'Low recommendation rate',
            'value': f"{recommend:.1f}%",
            'reason': 'Guests are not enthusiastic about recommending. Service or value issues.',
            'action': 'Implement guest satisfaction program, follow up on feedback.',
        })
    
    return diagnostics


def _catalog_price(accommodations: List[Accommodation], accommodation_type: str) -> float:
    """Mean nightly rate of catalog hotels whose type matches; 0 when none do."""
    prices = [a.price_per_night for a in accommodations if a.hotel_type == accommodation_type]
    return mean(prices) if prices else 0.0


def price_insight(market_price: float, nightly_spend: float) -> str:
    if market_price > nightly_spend * 1.2:
        return 'Market prices may be too high for this segment'
    if market_price < nightly_spend * 0.8:
        return 'Opportunity to increase prices'
    return 'Pricing is well-aligned with demand'


def generate_price_recommendations(
    tourists: List[Tourist],
    accommodations: List[Accommodation]
) -> List[Dict[str, Any]]:
    recommendations = []
    for accommodation_type, group in group_by(tourists, 'accommodation_type').items():
        nightly_spend = mean(t.accommodation_cost_npr / t.duration_days for t in group)
        market_price = _catalog_price(accommodations, accommodation_type)
        recommendations.append({
            'type': accommodation_type,
            # Reported in USD next to NPR figures, without conversion
            'avg_daily_budget': round(mean(t.daily_budget_usd for t in group)),
            'avg_daily_accom_spend': round(nightly_spend),
            'current_market_price': round(market_price),
            'recommended_range': {
                'low': round(nightly_spend * 0.85),
                'high': round(nightly_spend * 1.15),
            },
            'insight': price_insight(market_price, nightly_spend),
        })
    return recommendations


def get_location_insights(tourists: List[Tourist]) -> List[Dict[str, Any]]:
    insights = [
        {
            'city': city,
            'tourist_count': len(group),
            'market_share': round(percentage(len(group), len(tourists)), 1),
            'avg_spending': round(mean(t.total_spent_npr for t in group)),
            'avg_satisfaction': round(mean(t.satisfaction_score for t in group), 2),
            'top_nationalities': top_n((t.nationality for t in group), 3),
            'top_purposes': top_n((t.travel_purpose for t in group), 3),
        }
        for city, group in group_by(tourists, 'accommodation_city').items()
    ]
    return sorted(insights, key=lambda c: c['tourist_count'], reverse=True)


def accommodation_insights(tourists: List[Tourist], accommodations: List[Accommodation]) -> Dict[str, Any]:
    logger.info("Computing accommodation vendor insights...")
    if not tourists:
        return {'type_analysis': [], 'revenue_by_type': [],
                'price_recommendations': [], 'location_insights': []}
    
    overall_satisfaction = mean(t.satisfaction_score for t in tourists)
    type_analysis = []
    for accommodation_type, group in group_by(tourists, 'accommodation_type').items():
        type_analysis.append({
            'type': accommodation_type,
            'tourist_count': len(group),
            'market_share': round(percentage(len(group), len(tourists)), 1),
            'avg_spending': round(mean(t.total_spent_npr for t in group)),
            'avg_accommodation_cost': round(mean(t.accommodation_cost_npr for t in group)),
            'avg_nightly_rate': round(_catalog_price(accommodations, accommodation_type)),
            'avg_duration': round(mean(t.duration_days for t in group), 1),
            'avg_satisfaction': round(mean(t.satisfaction_score for t in group), 2),
            'top_nationalities': top_n((t.nationality for t in group), 5),
            'top_purposes': top_n((t.travel_purpose for t in group), 3),
            'seasonal_distribution': distribution(group, 'season'),
            'diagnostics': generate_accommodation_diagnostics(
                accommodation_type, group, overall_satisfaction),
        })
    type_analysis.sort(key=lambda t: t['tourist_count'], reverse=True)
    
    revenue_by_type = [
        {'type': t['type'], 'total_revenue': round(t['avg_accommodation_cost'] * t['tourist_count'])}
        for t in type_analysis
    ]
    total_revenue = sum(r['total_revenue'] for r in revenue_by_type)
    for r in revenue_by_type:
        r['revenue_share'] = round(percentage(r['total_revenue'], total_revenue), 1) if total_revenue else 0.0
    
    return {
        'type_analysis': type_analysis,
        'revenue_by_type': revenue_by_type,
        'price_recommendations': generate_price_recommendations(tourists, accommodations),
        'location_insights': get_location_insights(tourists),
    }


# Attractions

def _visit_summary(visits: List[Visit]) -> Dict[str, Any]:
    return {
        'visit_count': len(visits),
        'avg_rating': round(mean(v.visit_rating for v in visits), 2),
        'total_revenue': round(sum(v.entry_fee_paid for v in visits)),
    }


def build_attraction_analysis(visits: List[Visit], attractions: List[Attraction]) -> List[Dict[str, Any]]:
    """Per-attraction visit stats joined against the catalog, most visited first."""
    by_attraction = group_by(visits, 'attraction_id')
    analysis = []
    for attraction in attractions:
        attraction_visits = by_attraction.get(attraction.attraction_id, [])
        analysis.append({
            'attraction_id': attraction.attraction_id,
            'attraction_name': attraction.attraction_name,
            'city': attraction.city,
            'category': attraction.category,
            'entry_fee_foreigner': attraction.entry_fee_foreigner,
            'popularity_score': attraction.popularity_score,
            'visit_count': len(attraction_visits),
            'avg_rating': round(mean(v.visit_rating for v in attraction_visits), 2) if attraction_visits else 0,
            'total_revenue': round(sum(v.entry_fee_paid for v in attraction_visits)),
            'avg_fee_collected': round(mean(v.entry_fee_paid for v in attraction_visits)) if attraction_visits else 0,
        })
    return sorted(analysis, key=lambda a: a['visit_count'], reverse=True)


def find_underperforming_attractions(attraction_analysis: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    visited = [a for a in attraction_analysis if a['visit_count'] > 0]
    if not visited:
        return []
    avg_rating = mean(a['avg_rating'] for a in visited)
    return [
        dict(a, issue='Below average satisfaction',
             recommendation='Review visitor experience, consider improvements to facilities or services')
        for a in attraction_analysis
        if a['visit_count'] > 50 and a['avg_rating'] < avg_rating - 0.5
    ]


def generate_tour_packages(attraction_analysis: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    def top_in(category: str) -> List[str]:
        return [a['attraction_name'] for a in attraction_analysis if a['category'] == category][:3]
    
    religious = top_in('Religious Sites')
    cultural = top_in('Cultural Sites')
    activities = top_in('Activities')
    
    return [
        {
            'name': 'Heritage & Spirituality Package',
            'duration': '3 days',
            'attractions': religious[:2] + cultural[:2],
            'target_market': 'Indian, Japanese, American tourists',
            'estimated_price': 'NPR 8,000-12,000',
            'rationale': 'Combines most popular religious and cultural sites',
        },
        {
            'name': 'Cultural Immersion Package',
            'duration': '5 days',
            'attractions': cultural + activities[:2],
            'target_market': 'European, American tourists',
            'estimated_price': 'NPR 15,000-25,000',
            'rationale': 'Deep cultural experience with hands-on activities',
        },
        {
            'name': 'Quick City Highlights',
            'duration': '1 day',
            'attractions': [a['attraction_name'] for a in attraction_analysis[:4]],
            'target_market': 'Business travelers, short-stay visitors',
            'estimated_price': 'NPR 3,000-5,000',
            'rationale': 'Must-see attractions for time-constrained visitors',
        },
    ]


def attraction_insights(visits: List[Visit], attractions: List[Attraction], config=analytics_config) -> Dict[str, Any]:
    logger.info("Computing attraction vendor insights...")
    attraction_analysis = build_attraction_analysis(visits, attractions)
    
    category_analysis = [
        dict(category=category, **_visit_summary(group),
             top_attractions=top_n((v.attraction_name for v in group), 5))
        for category, group in group_by(visits, 'category').items()
    ]
    category_analysis.sort(key=lambda c: c['visit_count'], reverse=True)
    
    city_analysis = [
        dict(city=city, **_visit_summary(group))
        for city, group in group_by(visits, 'city').items()
    ]
    
    return {
        'top_attractions': attraction_analysis[:config.top_attractions],
        'category_analysis': category_analysis,
        'city_analysis': city_analysis,
        'underperforming_attractions': find_underperforming_attractions(attraction_analysis),
        'tour_package_recommendations': generate_tour_packages(attraction_analysis),
    }


# Food

def _daily_food(group: List[Tourist]) -> float:
    return mean(t.food_cost_npr / t.duration_days for t in group)


def generate_food_recommendations(
    nationality_data: List[Dict[str, Any]],
    purpose_data: List[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    recommendations = []
    
    premium = [n for n in nationality_data if n['avg_daily_food'] > 1500]
    if premium:
        recommendations.append({
            'segment': 'Premium Diners',
            'nationalities': ', '.join(n['nationality'] for n in premium),
            'avg_daily_budget': round(mean(n['avg_daily_food'] for n in premium)),
            'recommendation': 'Offer premium dining experiences, international cuisine options',
            'menu_suggestions': ['Fine dining set menus', 'Wine pairing options',
                                 'Authentic local cuisine with premium presentation'],
        })
    
    budget = [n for n in nationality_data if n['avg_daily_food'] < 800 and n['count'] > 100]
    if budget:
        recommendations.append({
            'segment': 'Budget Conscious',
            'nationalities': ', '.join(n['nationality'] for n in budget),
            'avg_daily_budget': round(mean(n['avg_daily_food'] for n in budget)),
            'recommendation': 'Value meals, set lunch specials, local authentic options',
            'menu_suggestions': ['Dal Bhat combos', 'Momo platters', 'Thali meals', 'Budget breakfast sets'],
        })
    
    pilgrimage = next((p for p in purpose_data if p['purpose'] == 'Pilgrimage'), None)
    if pilgrimage:
        recommendations.append({
            'segment': 'Pilgrimage Travelers',
            'count': pilgrimage['count'],
            'recommendation': 'Vegetarian options, pure/satvik food, temple vicinity locations',
            'menu_suggestions': ['Pure vegetarian thali', 'No onion/garlic options',
                                 'Traditional sweets', 'Fresh fruit juices'],
        })
    
    return recommendations


def food_insights(tourists: List[Tourist]) -> Dict[str, Any]:
    logger.info("Computing food vendor insights...")
    by_nationality = sorted([
        {
            'nationality': nationality,
            'count': len(group),
            'avg_total_food': round(mean(t.food_cost_npr for t in group)),
            'avg_daily_food': round(_daily_food(group)),
            'avg_duration': round(mean(t.duration_days for t in group), 1),
            'total_food_revenue': round(sum(t.food_cost_npr for t in group)),
            'market_share': round(percentage(len(group), len(tourists)), 1),
        }
        for nationality, group in group_by(tourists, 'nationality').items()
    ], key=lambda n: n['avg_daily_food'], reverse=True)
    
    by_purpose = sorted([
        {
            'purpose': purpose,
            'count': len(group),
            'avg_daily_food': round(_daily_food(group)),
            'total_food_revenue': round(sum(t.food_cost_npr for t in group)),
        }
        for purpose, group in group_by(tourists, 'travel_purpose').items()
    ], key=lambda p: p['avg_daily_food'], reverse=True)
    
    by_season = [
        {
            'season': season,
            'count': len(group),
            'avg_daily_food': round(_daily_food(group)),
            'total_food_revenue': round(sum(t.food_cost_npr for t in group)),
        }
        for season, group in group_by(tourists, 'season').items()
    ]
    
    return {
        'by_nationality': by_nationality,
        'by_purpose': by_purpose,
        'by_season': by_season,
        'recommendations': generate_food_recommendations(by_nationality, by_purpose),
    }


# Shopping

def _shopping_summary(group: List[Tourist]) -> Dict[str, Any]:
    avg_shopping = mean(t.shopping_cost_npr for t in group)
    avg_total = mean(t.total_spent_npr for t in group)
    return {
        'count': len(group),
        'avg_shopping': round(avg_shopping),
        'total_shopping_revenue': round(sum(t.shopping_cost_npr for t in group)),
        'shopper_rate': round(rate(group, lambda t: t.shopping_cost_npr > 0), 1),
        'avg_total_spend': round(avg_total),
        'shopping_share_of_spend': round(percentage(avg_shopping, avg_total), 1),
    }


def generate_shopping_recommendations(nationality_data: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    recommendations = []
    
    top_shoppers = nationality_data[:3]
    if top_shoppers:
        recommendations.append({
            'title': 'Target High-Value Shoppers',
            'segments': [
                {'nationality': n['nationality'], 'avg_spend': n['avg_shopping'], 'count': n['count']}
                for n in top_shoppers
            ],
            'products': ['Premium handicrafts', 'Authentic thangka paintings',
                         'Quality pashmina', 'Silver jewelry'],
            'strategy': 'Position premium products, offer certificates of authenticity',
        })
    
    volume_market = [n for n in nationality_data if n['count'] > 500 and n['avg_shopping'] > 2000]
    if volume_market:
        recommendations.append({
            'title': 'Volume Market Opportunity',
            'segments': [
                {'nationality': n['nationality'], 'total_revenue': n['total_shopping_revenue'],
                 'count': n['count']}
                for n in volume_market
            ],
            'products': ['Souvenirs', 'Religious items', 'Budget handicrafts', 'Prayer flags'],
            'strategy': 'Stock popular items, offer bundle deals',
        })
    
    return recommendations


def shopping_insights(tourists: List[Tourist]) -> Dict[str, Any]:
    logger.info("Computing shopping vendor insights...")
    by_nationality = sorted([
        dict(nationality=nationality, **_shopping_summary(group))
        for nationality, group in group_by(tourists, 'nationality').items()
    ], key=lambda n: n['avg_shopping'], reverse=True)
    
    by_interest = sorted([
        dict(interest=interest, **_shopping_summary(group))
        for interest, group in group_by(tourists, 'main_interest').items()
    ], key=lambda i: i['avg_shopping'], reverse=True)
    
    return {
        'by_nationality': by_nationality,
        'by_interest': by_interest,
        'top_shopping_segments': by_nationality[:5],
        'recommendations': generate_shopping_recommendations(by_nationality),
    }


# Transport

def classify_transport_opportunity(market_share: float) -> str:
    if market_share < 15:
        return 'Growth opportunity - increase visibility and service quality'
    if market_share > 25:
        return 'Dominant segment - maintain quality, explore premium offerings'
    return 'Stable segment - focus on differentiation'


def generate_transport_diagnostics(transport_analysis: List[Dict[str, Any]], config=analytics_config) -> List[Dict[str, Any]]:
    if not transport_analysis:
        return []
    avg_satisfaction = mean(t['avg_satisfaction'] for t in transport_analysis)
    return [
        {
            'transport': t['transport'],
            'issue': 'Below average satisfaction',
            'value': t['avg_satisfaction'],
            'recommendation': f"Improve {t['transport']} experience - possible issues with "
                              "pricing, availability, or quality",
        }
        for t in transport_analysis
        if falls_below(t['avg_satisfaction'], avg_satisfaction, config.satisfaction_gap)
    ]


def transport_insights(tourists: List[Tourist]) -> Dict[str, Any]:
    logger.info("Computing transport vendor insights...")
    transport_analysis = sorted([
        {
            'transport': transport,
            'count': len(group),
            'market_share': round(percentage(len(group), len(tourists)), 1),
            'avg_transport_cost': round(mean(t.transport_cost_npr for t in group)),
            'avg_total_spend': round(mean(t.total_spent_npr for t in group)),
            'avg_satisfaction': round(mean(t.satisfaction_score for t in group), 2),
            'top_nationalities': top_n((t.nationality for t in group), 3),
            'top_accommodations': top_n((t.accommodation_type for t in group), 3),
        }
        for transport, group in group_by(tourists, 'primary_transport').items()
    ], key=lambda t: t['count'], reverse=True)
    
    return {
        'transport_analysis': transport_analysis,
        'diagnostics': generate_transport_diagnostics(transport_analysis),
        'opportunities': [
            {
                'transport': t['transport'],
                'current_share': t['market_share'],
                'avg_cost': t['avg_transport_cost'],
                'opportunity': classify_transport_opportunity(t['market_share']),
            }
            for t in transport_analysis
        ],
    }


VENDOR_VIEWS: Dict[str, Callable[[Dataset], Dict[str, Any]]] = {
    'accommodation': lambda d: accommodation_insights(d.tourists, d.accommodations),
    'attractions': lambda d: attraction_insights(d.visits, d.attractions),
    'food': lambda d: food_insights(d.tourists),
    'shopping': lambda d: shopping_insights(d.tourists),
    'transport': lambda d: transport_insights(d.tourists),
}


def vendor_insights(dataset: Dataset, category: str) -> Dict[str, Any]:
    """Dispatch to the vendor view named by category."""
    try:
        view = VENDOR_VIEWS[category.lower()]
    except KeyError:
        raise UnknownVendorCategoryError(
            f"Unknown vendor category '{category}'. Expected one of: {', '.join(VENDOR_VIEWS)}"
        ) from None
    return view(dataset)
