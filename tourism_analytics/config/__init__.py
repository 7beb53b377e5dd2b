"""
Config Package Initialization.
"""

from .config import (
    PROJECT_ROOT,
    DATA_DIR,
    OUTPUTS_DIR,
    PLOTS_DIR,
    REPORTS_DIR,
    LOGS_DIR,
    data_config,
    analytics_config,
    viz_config,
    logging_config,
    DataConfig,
    AnalyticsConfig,
    VisualizationConfig,
    LoggingConfig
)

__all__ = [
    'PROJECT_ROOT',
    'DATA_DIR',
    'OUTPUTS_DIR',
    'PLOTS_DIR',
    'REPORTS_DIR',
    'LOGS_DIR',
    'data_config',
    'analytics_config',
    'viz_config',
    'logging_config',
    'DataConfig',
    'AnalyticsConfig',
    'VisualizationConfig',
    'LoggingConfig'
]
