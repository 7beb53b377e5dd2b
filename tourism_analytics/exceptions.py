"""Exception hierarchy for the tourism analytics package."""


class TourismAnalyticsError(Exception):
    """Base class for all package errors."""


class DataUnavailableError(TourismAnalyticsError, FileNotFoundError):
    """The loader could not produce one or more datasets."""


class InsufficientDataError(TourismAnalyticsError, ValueError):
    """A statistic was requested over too few points or zero variance."""


class NationalityNotFoundError(TourismAnalyticsError, LookupError):
    """No tourist record matches the requested nationality."""


class UnknownVendorCategoryError(TourismAnalyticsError, LookupError):
    """The requested vendor view does not exist."""
