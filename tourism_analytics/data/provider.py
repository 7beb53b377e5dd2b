"""
Process-wide dataset provider.

The first caller loads the four collections; every later caller reuses the
same read-only Dataset. Initialisation happens under a lock so concurrent
first requests trigger exactly one load.
"""

import threading
from pathlib import Path
from typing import Callable, Optional

from tourism_analytics.data.data_loader import DataLoader
from tourism_analytics.data.models import Dataset
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)


class DataProvider:
    """Memoized, thread-safe loader of the tourism Dataset."""
    
    def __init__(self, loader: Optional[Callable[[], Dataset]] = None,
                 data_dir: Optional[Path] = None):
        self._loader = loader or DataLoader(data_dir=data_dir).load_all
        self._dataset: Optional[Dataset] = None
        self._lock = threading.Lock()
        self.load_count = 0
    
    @classmethod
    def from_dataset(cls, dataset: Dataset) -> 'DataProvider':
        """Provider that serves an already-built dataset (used by tests)."""
        return cls(loader=lambda: dataset)
    
    @property
    def is_loaded(self) -> bool:
        return self._dataset is not None
    
    def get(self) -> Dataset:
        dataset = self._dataset
        if dataset is not None:
            return dataset
        
        with self._lock:
            if self._dataset is None:
                logger.info("Dataset cache empty, loading...")
                # Assign only once fully built so readers never see a partial cache
                loaded = self._loader()
                self.load_count += 1
                self._dataset = loaded
                logger.info(f"Dataset cached: {loaded.counts()}")
            return self._dataset
    
    def reload(self) -> Dataset:
        """Replace the cached dataset with a fresh load."""
        with self._lock:
            logger.info("Reloading dataset")
            loaded = self._loader()
            self.load_count += 1
            self._dataset = loaded
            return loaded
