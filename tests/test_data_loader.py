"""
Unit tests for the data loading and cleaning module.
"""

import pytest
import pandas as pd
import sys
from datetime import date
from pathlib import Path

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from tourism_analytics.data.data_loader import DataLoader, DataCleaner, load_dataset
from tourism_analytics.data.models import Tourist, Dataset
from tourism_analytics.exceptions import DataUnavailableError
from tourism_analytics.config.config import data_config


def tourist_row(tourist_id, **overrides):
    row = {
        'tourist_id': tourist_id,
        'nationality': 'Indian',
        'age': 34,
        'gender': 'Male',
        'travel_purpose': 'Pilgrimage',
        'arrival_date': '2024-03-10',
        'departure_date': '2024-03-15',
        'duration_days': 5,
        'season': 'Spring',
        'group_size': 3,
        'travel_with': 'Family',
        'previous_visits_to_nepal': 1,
        'accommodation_type': 'Budget Hotel',
        'accommodation_city': 'Kathmandu',
        'num_attractions_visited': 4,
        'primary_transport': 'Taxi',
        'uses_tour_guide': 'True',
        'daily_budget_usd': 60.0,
        'accommodation_cost_npr': 10000.0,
        'food_cost_npr': 4000.0,
        'shopping_cost_npr': 2000.0,
        'activities_cost_npr': 3000.0,
        'transport_cost_npr': 1000.0,
        'guide_cost_npr': 3000.0,
        'total_spent_npr': 23000.0,
        'satisfaction_score': 8.2,
        'would_recommend': 'False',
        'hotel_id': 7,
        'cities_visited': 'Kathmandu, Bhaktapur',
    }
    row.update(overrides)
    return row


@pytest.fixture
def raw_tourists():
    return pd.DataFrame([
        tourist_row(1),
        tourist_row(2, hotel_id=None, departure_date=None, cities_visited=None),
        tourist_row(3, total_spent_npr=0),
        tourist_row(4, duration_days=0),
        tourist_row(5, satisfaction_score='n/a'),
        tourist_row(6, arrival_date='not-a-date'),
        tourist_row(7, accommodation_cost_npr=None, nationality=None),
    ])


@pytest.fixture
def data_dir(tmp_path, raw_tourists):
    """Write the four CSV files into a temporary data directory."""
    raw_tourists.to_csv(tmp_path / data_config.tourists_file, index=False)
    pd.DataFrame([
        {'attraction_id': 1, 'attraction_name': 'Pashupatinath', 'city': 'Kathmandu',
         'category': 'Religious Sites', 'entry_fee_foreigner_npr': 1000,
         'entry_fee_saarc_npr': 500, 'avg_visit_duration_min': 90, 'popularity_score': 9.5},
        {'attraction_id': 2, 'attraction_name': 'Durbar Square', 'city': 'Bhaktapur',
         'category': 'Cultural Sites', 'entry_fee_foreigner_npr': 1500,
         'entry_fee_saarc_npr': 500, 'avg_visit_duration_min': 120, 'popularity_score': 9.0},
    ]).to_csv(tmp_path / data_config.attractions_file, index=False)
    pd.DataFrame([
        {'hotel_id': 7, 'hotel_type': 'Budget Hotel', 'city': 'Kathmandu', 'area': 'Thamel',
         'price_per_night_npr': 2500, 'rating': 3.8, 'has_wifi': 'True', 'has_breakfast': 'False'},
    ]).to_csv(tmp_path / data_config.accommodations_file, index=False)
    pd.DataFrame([
        {'tourist_id': 1, 'attraction_id': 1, 'attraction_name': 'Pashupatinath',
         'city': 'Kathmandu', 'category': 'Religious Sites', 'entry_fee_paid': 1000, 'visit_rating': 9},
        {'tourist_id': 'abc', 'attraction_id': 2, 'attraction_name': 'Durbar Square',
         'city': 'Bhaktapur', 'category': 'Cultural Sites', 'entry_fee_paid': 1500, 'visit_rating': 8},
    ]).to_csv(tmp_path / data_config.visits_file, index=False)
    return tmp_path


class TestDataLoader:
    def test_missing_file_raises(self, tmp_path):
        loader = DataLoader(data_dir=tmp_path)
        with pytest.raises(DataUnavailableError):
            loader.load_csv("nonexistent_file.csv")

    def test_missing_file_is_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_dataset(tmp_path)

    def test_load_all(self, data_dir):
        loader = DataLoader(data_dir=data_dir)
        dataset = loader.load_all()
        assert isinstance(dataset, Dataset)
        assert dataset.counts() == {
            'tourists': 3, 'attractions': 2, 'accommodations': 1, 'visits': 1
        }

    def test_cleaning_report(self, data_dir):
        loader = DataLoader(data_dir=data_dir)
        loader.load_all()
        assert loader.cleaning_report['tourists']['rows_removed'] == 4
        assert loader.cleaning_report['visits']['rows_removed'] == 1

    def test_renamed_columns(self, data_dir):
        dataset = load_dataset(data_dir)
        assert dataset.attractions[0].entry_fee_foreigner == 1000
        assert dataset.accommodations[0].price_per_night == 2500
        assert dataset.accommodations[0].has_wifi is True
        assert dataset.tourists[0].previous_visits == 1


class TestDataCleaner:
    @pytest.fixture
    def tourists(self, raw_tourists):
        return DataCleaner().clean_tourists(raw_tourists)

    def test_invalid_rows_dropped(self, tourists):
        assert [t.tourist_id for t in tourists] == [1, 2, 7]
        assert all(t.total_spent_npr > 0 and t.duration_days >= 1 for t in tourists)

    def test_records_are_typed(self, tourists):
        tourist = tourists[0]
        assert isinstance(tourist, Tourist)
        assert tourist.arrival_date == date(2024, 3, 10)
        assert tourist.uses_tour_guide is True
        assert tourist.would_recommend is False
        assert tourist.hotel_id == 7
        assert tourist.cities_visited == ('Kathmandu', 'Bhaktapur')

    def test_optional_fields_filled(self, tourists):
        second = tourists[1]
        assert second.hotel_id is None
        assert second.cities_visited == ()
        assert second.departure_date == date(2024, 3, 15)

    def test_missing_values_defaulted(self, tourists):
        last = tourists[2]
        assert last.accommodation_cost_npr == 0.0
        assert last.nationality == 'Unknown'
