"""
Shared fixtures: record factories and a seeded synthetic dataset.
"""

import sys
from datetime import date, timedelta
from pathlib import Path

import numpy as np
import pytest

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from tourism_analytics.data.models import (
    Tourist, Attraction, Accommodation, Visit, Dataset, SEASONS
)

NATIONALITIES = ['Indian', 'Chinese', 'American', 'British', 'Japanese', 'German']
PURPOSES = ['Cultural Tourism', 'Pilgrimage', 'Trekking', 'Business', 'Leisure']
ACCOMMODATION_TYPES = ['Budget Hotel', 'Mid-range Hotel', 'Luxury Hotel', 'Guesthouse']
TRANSPORTS = ['Taxi', 'Bus', 'Private Car', 'Walking']
CITIES = ['Kathmandu', 'Lalitpur', 'Bhaktapur']
CATEGORIES = ['Religious Sites', 'Cultural Sites', 'Activities']


def build_tourist(tourist_id=1, **overrides):
    """Tourist with sensible defaults; any field can be overridden."""
    fields = dict(
        tourist_id=tourist_id,
        nationality='Indian',
        age=30,
        gender='Female',
        travel_purpose='Cultural Tourism',
        arrival_date=date(2024, 3, 10),
        departure_date=date(2024, 3, 15),
        duration_days=5,
        season='Spring',
        group_size=2,
        travel_with='Partner',
        previous_visits=0,
        accommodation_type='Mid-range Hotel',
        accommodation_city='Kathmandu',
        num_attractions_visited=4,
        primary_transport='Taxi',
        uses_tour_guide=False,
        daily_budget_usd=80.0,
        accommodation_cost_npr=15000.0,
        food_cost_npr=5000.0,
        shopping_cost_npr=3000.0,
        activities_cost_npr=4000.0,
        transport_cost_npr=2000.0,
        guide_cost_npr=0.0,
        total_spent_npr=29000.0,
        satisfaction_score=8.0,
        would_recommend=True,
        main_interest='Culture',
    )
    fields.update(overrides)
    return Tourist(**fields)


@pytest.fixture
def make_tourist():
    return build_tourist


@pytest.fixture
def sample_dataset():
    """Seeded synthetic dataset covering every season and category."""
    np.random.seed(42)
    n = 200
    tourists = []
    for i in range(n):
        arrival = date(2024, 1, 1) + timedelta(days=int(np.random.randint(0, 365)))
        duration = int(np.random.randint(1, 20))
        accommodation = float(np.random.uniform(3000, 60000))
        food = float(np.random.uniform(1000, 20000))
        shopping = float(np.random.choice([0.0, np.random.uniform(500, 15000)]))
        activities = float(np.random.uniform(500, 10000))
        transport = float(np.random.uniform(500, 8000))
        uses_guide = bool(np.random.rand() < 0.4)
        guide = float(np.random.uniform(2000, 8000)) if uses_guide else 0.0
        tourists.append(build_tourist(
            tourist_id=i + 1,
            nationality=str(np.random.choice(NATIONALITIES)),
            age=int(np.random.randint(18, 75)),
            travel_purpose=str(np.random.choice(PURPOSES)),
            arrival_date=arrival,
            departure_date=arrival + timedelta(days=duration),
            duration_days=duration,
            season=SEASONS[i % len(SEASONS)],
            group_size=int(np.random.randint(1, 8)),
            previous_visits=int(np.random.randint(0, 3)),
            accommodation_type=str(np.random.choice(ACCOMMODATION_TYPES)),
            accommodation_city=str(np.random.choice(CITIES)),
            num_attractions_visited=int(np.random.randint(1, 12)),
            primary_transport=str(np.random.choice(TRANSPORTS)),
            uses_tour_guide=uses_guide,
            daily_budget_usd=float(np.random.uniform(30, 300)),
            accommodation_cost_npr=accommodation,
            food_cost_npr=food,
            shopping_cost_npr=shopping,
            activities_cost_npr=activities,
            transport_cost_npr=transport,
            guide_cost_npr=guide,
            total_spent_npr=accommodation + food + shopping + activities + transport + guide,
            satisfaction_score=round(float(np.random.uniform(4, 10)), 1),
            would_recommend=bool(np.random.rand() < 0.75),
        ))

    attractions = [
        Attraction(attraction_id=j + 1, attraction_name=f"Attraction {j + 1}",
                   city=CITIES[j % len(CITIES)], category=CATEGORIES[j % len(CATEGORIES)],
                   entry_fee_foreigner=float(500 + 100 * j), popularity_score=float(j % 10))
        for j in range(12)
    ]
    accommodations = [
        Accommodation(hotel_id=k + 1, hotel_type=ACCOMMODATION_TYPES[k % len(ACCOMMODATION_TYPES)],
                      city=CITIES[k % len(CITIES)], price_per_night=float(1500 + 1000 * k),
                      rating=float(3 + k % 3))
        for k in range(8)
    ]
    visits = []
    for tourist in tourists:
        for attraction_id in np.random.choice(12, size=3, replace=False) + 1:
            attraction = attractions[int(attraction_id) - 1]
            visits.append(Visit(
                tourist_id=tourist.tourist_id,
                attraction_id=attraction.attraction_id,
                attraction_name=attraction.attraction_name,
                city=attraction.city,
                category=attraction.category,
                entry_fee_paid=attraction.entry_fee_foreigner,
                visit_rating=round(float(np.random.uniform(5, 10)), 1),
            ))

    return Dataset(tourists=tourists, attractions=attractions,
                   accommodations=accommodations, visits=visits)


@pytest.fixture
def empty_dataset():
    return Dataset()
