# Data Loading and Cleaning Module.
import dataclasses
from pathlib import Path
from typing import Optional, Dict, List, Any, Type

import pandas as pd

from tourism_analytics.config.config import data_config
from tourism_analytics.data.models import (
    Tourist, Attraction, Accommodation, Visit, Dataset
)
from tourism_analytics.exceptions import DataUnavailableError
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)

TOURIST_INT_COLUMNS = [
    'tourist_id', 'age', 'duration_days', 'group_size', 'previous_visits',
    'num_attractions_visited', 'hotel_id'
]
TOURIST_FLOAT_COLUMNS = [
    'daily_budget_usd', 'accommodation_cost_npr', 'food_cost_npr',
    'shopping_cost_npr', 'activities_cost_npr', 'transport_cost_npr',
    'guide_cost_npr', 'total_spent_npr', 'satisfaction_score'
]
TOURIST_BOOL_COLUMNS = ['uses_tour_guide', 'would_recommend']


class DataLoader:
    """
    Loads the four tourism CSV files and hands them to the cleaner.
    
    Missing files raise DataUnavailableError; there is no alternate source
    to fall back on.
    """
    
    def __init__(self, config=data_config, data_dir: Optional[Path] = None):
        self.config = config
        self.data_dir = Path(data_dir) if data_dir is not None else Path(config.data_dir)
        self.cleaning_report = {}
        logger.info(f"DataLoader initialized with data directory: {self.data_dir}")
    
    def load_csv(self, filename: str) -> pd.DataFrame:
        file_path = self.data_dir / filename
        logger.info(f"Loading dataset from: {file_path}")
        
        if not file_path.exists():
            error_msg = f"Dataset not found at {file_path}"
            logger.error(error_msg)
            raise DataUnavailableError(error_msg)
        
        try:
            df = pd.read_csv(file_path, encoding='utf-8', skip_blank_lines=True)
        except UnicodeDecodeError:
            logger.warning("UTF-8 decoding failed, trying latin-1 encoding")
            df = pd.read_csv(file_path, encoding='latin-1', skip_blank_lines=True)
        
        logger.info(f"Successfully loaded {filename} with shape: {df.shape}")
        return df
    
    def load_all(self) -> Dataset:
        """Load and clean all four datasets."""
        logger.info("Loading and cleaning data...")
        cleaner = DataCleaner(self.config)
        
        dataset = Dataset(
            tourists=cleaner.clean_tourists(self.load_csv(self.config.tourists_file)),
            attractions=cleaner.clean_attractions(self.load_csv(self.config.attractions_file)),
            accommodations=cleaner.clean_accommodations(self.load_csv(self.config.accommodations_file)),
            visits=cleaner.clean_visits(self.load_csv(self.config.visits_file)),
        )
        
        for name, count in dataset.counts().items():
            logger.info(f"Loaded {count} {name}")
        self.cleaning_report = cleaner.get_cleaning_report()
        return dataset


class DataCleaner:
    # Handles type coercion, invalid-row removal and conversion to records.
    
    def __init__(self, config=data_config):
        self.config = config
        self.cleaning_report = {}
        logger.info("DataCleaner initialized")
    
    def clean_tourists(self, df: pd.DataFrame) -> List[Tourist]:
        logger.info("Cleaning tourist records...")
        original_rows = len(df)
        df = df.rename(columns=self.config.tourist_renames).copy()
        
        df = self._convert_numeric(df, TOURIST_INT_COLUMNS + TOURIST_FLOAT_COLUMNS)
        df = self._convert_dates(df, ['arrival_date', 'departure_date'])
        
        # Step 1: Drop rows failing required numeric parsing
        required = [c for c in self.config.required_tourist_numeric if c in df.columns]
        df = df.dropna(subset=required + ['arrival_date'])
        
        # Step 2: Enforce record invariants
        df = df[(df['total_spent_npr'] > 0) & (df['duration_days'] >= 1)].copy()
        
        # Step 3: Fill optional fields
        cost_columns = [c for c in TOURIST_FLOAT_COLUMNS if c in df.columns]
        df[cost_columns] = df[cost_columns].fillna(0.0)
        for col in ['age', 'group_size', 'previous_visits', 'num_attractions_visited']:
            if col in df.columns:
                df[col] = df[col].fillna(0).astype(int)
        df['tourist_id'] = df['tourist_id'].astype(int)
        df['duration_days'] = df['duration_days'].astype(int)
        if 'departure_date' in df.columns:
            missing_departure = df['departure_date'].isna()
            df.loc[missing_departure, 'departure_date'] = (
                df.loc[missing_departure, 'arrival_date']
                + pd.to_timedelta(df.loc[missing_departure, 'duration_days'], unit='D')
            )
        for col in TOURIST_BOOL_COLUMNS:
            if col in df.columns:
                df[col] = self._convert_bool(df[col])
        if 'cities_visited' in df.columns:
            df['cities_visited'] = df['cities_visited'].apply(self._split_cities)
        if 'hotel_id' in df.columns:
            df['hotel_id'] = pd.Series(
                [None if pd.isna(v) else int(v) for v in df['hotel_id']],
                index=df.index, dtype=object
            )
        
        df['arrival_date'] = df['arrival_date'].dt.date
        if 'departure_date' in df.columns:
            df['departure_date'] = pd.to_datetime(df['departure_date']).dt.date
        
        self._report('tourists', original_rows, len(df))
        return self._to_records(df, Tourist)
    
    def clean_attractions(self, df: pd.DataFrame) -> List[Attraction]:
        original_rows = len(df)
        df = df.rename(columns=self.config.attraction_renames).copy()
        df = self._convert_numeric(df, [
            'attraction_id', 'entry_fee_foreigner', 'entry_fee_saarc',
            'avg_duration_min', 'popularity_score'
        ])
        df = df.dropna(subset=['attraction_id'])
        df['attraction_id'] = df['attraction_id'].astype(int)
        df = df.fillna({'entry_fee_foreigner': 0.0, 'entry_fee_saarc': 0.0,
                        'avg_duration_min': 0.0, 'popularity_score': 0.0})
        
        self._report('attractions', original_rows, len(df))
        return self._to_records(df, Attraction)
    
    def clean_accommodations(self, df: pd.DataFrame) -> List[Accommodation]:
        original_rows = len(df)
        df = df.rename(columns=self.config.accommodation_renames).copy()
        df = self._convert_numeric(df, ['hotel_id', 'price_per_night', 'rating'])
        df = df.dropna(subset=['hotel_id'])
        df['hotel_id'] = df['hotel_id'].astype(int)
        df = df.fillna({'price_per_night': 0.0, 'rating': 0.0})
        for col in ['has_wifi', 'has_breakfast']:
            if col in df.columns:
                df[col] = self._convert_bool(df[col])
        
        self._report('accommodations', original_rows, len(df))
        return self._to_records(df, Accommodation)
    
    def clean_visits(self, df: pd.DataFrame) -> List[Visit]:
        original_rows = len(df)
        df = self._convert_numeric(df.copy(), [
            'tourist_id', 'attraction_id', 'entry_fee_paid', 'visit_rating'
        ])
        # A visit whose tourist id does not parse is dropped
        df = df.dropna(subset=['tourist_id', 'attraction_id'])
        df['tourist_id'] = df['tourist_id'].astype(int)
        df['attraction_id'] = df['attraction_id'].astype(int)
        df = df.fillna({'entry_fee_paid': 0.0, 'visit_rating': 0.0})
        
        self._report('visits', original_rows, len(df))
        return self._to_records(df, Visit)
    
    def _convert_numeric(self, df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
        for col in columns:
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors='coerce')
        return df
    
    def _convert_dates(self, df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
        for col in columns:
            if col in df.columns:
                df[col] = pd.to_datetime(df[col], errors='coerce')
        return df
    
    @staticmethod
    def _convert_bool(series: pd.Series) -> pd.Series:
        return series.astype(str).str.strip().str.lower() == 'true'
    
    @staticmethod
    def _split_cities(value) -> tuple:
        if pd.isna(value) or not str(value).strip():
            return ()
        return tuple(city.strip() for city in str(value).split(','))
    
    def _to_records(self, df: pd.DataFrame, record_type: Type) -> list:
        """Build frozen records from the columns the record type declares."""
        names = [f.name for f in dataclasses.fields(record_type)]
        text_columns = [
            f.name for f in dataclasses.fields(record_type)
            if f.type is str and f.name in df.columns
        ]
        df = df.copy()
        df[text_columns] = df[text_columns].fillna("Unknown").astype(str)
        present = [name for name in names if name in df.columns]
        return [record_type(**row) for row in df[present].to_dict('records')]
    
    def _report(self, name: str, original_rows: int, final_rows: int) -> None:
        removed = original_rows - final_rows
        if removed > 0:
            logger.warning(f"Removed {removed} invalid {name} rows")
        self.cleaning_report[name] = {
            'original_rows': original_rows,
            'final_rows': final_rows,
            'rows_removed': removed,
        }
    
    def get_cleaning_report(self) -> Dict[str, Any]:
        return self.cleaning_report


def load_dataset(data_dir: Optional[Path] = None) -> Dataset:
    # Convenience function to load and clean data in one step.
    return DataLoader(data_dir=data_dir).load_all()
