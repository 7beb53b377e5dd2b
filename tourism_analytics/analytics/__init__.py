"""
Analytics Package Initialization.

One pure function per analytic; each takes record collections and returns a
JSON-serializable structure.
"""

from .overview import (
    compute_overview,
    compute_spending_breakdown,
    list_nationalities,
    nationality_detail,
    compute_time_series
)
from .factors import perform_regression_analysis
from .cohort import perform_cohort_analysis
from .segmentation import perform_customer_segmentation
from .vendor import (
    accommodation_insights,
    attraction_insights,
    food_insights,
    shopping_insights,
    transport_insights,
    vendor_insights,
    VENDOR_VIEWS
)
from .diagnostics import run_diagnostics

__all__ = [
    # Overview
    'compute_overview',
    'compute_spending_breakdown',
    'list_nationalities',
    'nationality_detail',
    'compute_time_series',
    # Statistical analyses
    'perform_regression_analysis',
    'perform_cohort_analysis',
    'perform_customer_segmentation',
    # Vendor views
    'accommodation_insights',
    'attraction_insights',
    'food_insights',
    'shopping_insights',
    'transport_insights',
    'vendor_insights',
    'VENDOR_VIEWS',
    # Diagnostics
    'run_diagnostics'
]
