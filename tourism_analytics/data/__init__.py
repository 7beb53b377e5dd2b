"""
Data Package Initialization.
"""

from .models import Tourist, Attraction, Accommodation, Visit, Dataset, SEASONS
from .data_loader import DataLoader, DataCleaner, load_dataset
from .provider import DataProvider

__all__ = [
    'Tourist', 'Attraction', 'Accommodation', 'Visit', 'Dataset', 'SEASONS',
    'DataLoader', 'DataCleaner', 'load_dataset', 'DataProvider'
]
