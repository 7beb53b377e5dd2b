"""
Record Model.

Typed, immutable shapes for the four datasets. Records are created once by
the loader and never mutated; analytics only read them.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

SEASONS = ("Spring", "Monsoon", "Autumn", "Winter")


@dataclass(frozen=True)
class Tourist:
    """One tourism visit record."""
    tourist_id: int
    nationality: str
    age: int
    gender: str
    travel_purpose: str
    arrival_date: date
    departure_date: date
    duration_days: int
    season: str
    group_size: int
    travel_with: str
    previous_visits: int
    accommodation_type: str
    accommodation_city: str
    num_attractions_visited: int
    primary_transport: str
    uses_tour_guide: bool
    daily_budget_usd: float
    accommodation_cost_npr: float
    food_cost_npr: float
    shopping_cost_npr: float
    activities_cost_npr: float
    transport_cost_npr: float
    guide_cost_npr: float
    total_spent_npr: float
    satisfaction_score: float
    would_recommend: bool
    hotel_id: Optional[int] = None
    cities_visited: Tuple[str, ...] = ()
    information_source: str = ""
    main_interest: str = ""

    @property
    def daily_spend_npr(self) -> float:
        return self.total_spent_npr / self.duration_days

    @property
    def arrival_month(self) -> str:
        """Calendar year-month of arrival, e.g. ``2024-03``."""
        return self.arrival_date.strftime("%Y-%m")


@dataclass(frozen=True)
class Attraction:
    attraction_id: int
    attraction_name: str
    city: str
    category: str
    entry_fee_foreigner: float
    popularity_score: float
    entry_fee_saarc: float = 0.0
    avg_duration_min: float = 0.0


@dataclass(frozen=True)
class Accommodation:
    hotel_id: int
    hotel_type: str
    city: str
    price_per_night: float
    rating: float
    area: str = ""
    has_wifi: bool = False
    has_breakfast: bool = False


@dataclass(frozen=True)
class Visit:
    tourist_id: int
    attraction_id: int
    attraction_name: str
    city: str
    category: str
    entry_fee_paid: float
    visit_rating: float


@dataclass(frozen=True)
class Dataset:
    """The four loaded collections, shared read-only across requests."""
    tourists: List[Tourist] = field(default_factory=list)
    attractions: List[Attraction] = field(default_factory=list)
    accommodations: List[Accommodation] = field(default_factory=list)
    visits: List[Visit] = field(default_factory=list)

    def counts(self) -> dict:
        return {
            'tourists': len(self.tourists),
            'attractions': len(self.attractions),
            'accommodations': len(self.accommodations),
            'visits': len(self.visits),
        }
