# Configuration Management Module for the Tourism Analytics Project.

import os
from dataclasses import dataclass, field
from typing import List, Dict, Tuple
from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent.absolute()

# Directory paths
DATA_DIR = Path(os.environ.get("TOURISM_DATA_DIR", PROJECT_ROOT / "data"))
OUTPUTS_DIR = PROJECT_ROOT / "outputs"
PLOTS_DIR = OUTPUTS_DIR / "plots"
REPORTS_DIR = OUTPUTS_DIR / "reports"
LOGS_DIR = PROJECT_ROOT / "logs"

# Create directories if they don't exist
for dir_path in [PLOTS_DIR, REPORTS_DIR, LOGS_DIR]:
    dir_path.mkdir(parents=True, exist_ok=True)


@dataclass
class DataConfig:
    """Data-related configuration parameters."""
    
    data_dir: Path = DATA_DIR
    
    # Dataset file names
    tourists_file: str = "kathmandu_valley_tourists.csv"
    attractions_file: str = "attractions_catalog.csv"
    accommodations_file: str = "accommodations_catalog.csv"
    visits_file: str = "tourist_attraction_visits.csv"
    
    # Tourist columns that must parse as numbers or the row is dropped
    required_tourist_numeric: List[str] = field(default_factory=lambda: [
        "tourist_id", "duration_days", "total_spent_npr", "satisfaction_score"
    ])
    
    # Raw CSV column -> record attribute renames
    tourist_renames: Dict[str, str] = field(default_factory=lambda: {
        "previous_visits_to_nepal": "previous_visits",
    })
    attraction_renames: Dict[str, str] = field(default_factory=lambda: {
        "entry_fee_foreigner_npr": "entry_fee_foreigner",
        "entry_fee_saarc_npr": "entry_fee_saarc",
        "avg_visit_duration_min": "avg_duration_min",
    })
    accommodation_renames: Dict[str, str] = field(default_factory=lambda: {
        "price_per_night_npr": "price_per_night",
    })


@dataclass
class AnalyticsConfig:
    """Analytics thresholds and model parameters."""
    
    # Reproducibility
    random_state: int = 42
    
    # K-means segmentation
    n_clusters: int = 4
    max_iterations: int = 100
    n_init: int = 10
    spending_scale: float = 1000.0  # total_spent_npr is divided by this
    
    # Predictive insight cohorts
    high_value_threshold: float = 80000.0
    low_satisfaction_threshold: float = 6.0
    
    # Top-N list sizes
    top_nationalities: int = 10
    top_attractions: int = 15
    top_performance_attractions: int = 20
    
    # Diagnostics
    satisfaction_gap: float = 0.3
    
    # Seasonal buckets by calendar month
    season_months: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: {
        "Spring": ("03", "04", "05"),
        "Monsoon": ("06", "07", "08"),
        "Autumn": ("09", "10", "11"),
        "Winter": ("12", "01", "02"),
    })


@dataclass
class VisualizationConfig:
    """Visualization configuration parameters."""
    
    # Plot style
    style: str = "seaborn-v0_8-whitegrid"
    
    # Figure sizes
    default_figsize: tuple = (10, 6)
    large_figsize: tuple = (14, 8)
    
    # Color palette
    color_palette: str = "husl"
    
    # DPI for saved figures
    save_dpi: int = 150
    
    # Plot format
    save_format: str = "png"


@dataclass
class LoggingConfig:
    """Logging configuration parameters."""
    
    # Logging level
    level: str = "INFO"
    
    # Log format
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    
    # Date format
    date_format: str = "%Y-%m-%d %H:%M:%S"
    
    # Log file name
    log_file: str = "tourism_analytics.log"


# Create default config instances
data_config = DataConfig()
analytics_config = AnalyticsConfig()
viz_config = VisualizationConfig()
logging_config = LoggingConfig()
