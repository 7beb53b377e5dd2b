"""
Aggregation Utilities.

Generic helpers shared by every analytics module: frequency counts, group-by,
percentage-of-total, numeric summaries and fixed-bucket histogramming.
Statistics raise InsufficientDataError instead of returning NaN so that
callers can omit degenerate groups explicitly.
"""

from collections import Counter, OrderedDict
from typing import (
    Any, Callable, Dict, Hashable, Iterable, List, NamedTuple, Sequence,
    Tuple, TypeVar, Union
)

import numpy as np
from scipy import stats

from tourism_analytics.exceptions import InsufficientDataError

T = TypeVar('T')
FieldSelector = Union[str, Callable[[Any], Hashable]]


class Bucket(NamedTuple):
    label: str
    min: float
    max: float


class RegressionResult(NamedTuple):
    slope: float
    intercept: float


def top_n(values: Iterable[Hashable], n: int = 5) -> List[Dict[str, Any]]:
    """
    Frequency-count labels and return the n most frequent.
    
    Ties keep first-encountered order.
    """
    values = list(values)
    counts = Counter(values)
    return [
        {'item': item, 'count': count, 'percentage': round(count / len(values) * 100, 1)}
        for item, count in counts.most_common(n)
    ]


def most_frequent(values: Iterable[Hashable]) -> Hashable:
    counts = Counter(values)
    if not counts:
        raise InsufficientDataError("Cannot find the most frequent value of an empty group")
    return counts.most_common(1)[0][0]


def _selector(field: FieldSelector) -> Tuple[str, Callable[[Any], Hashable]]:
    if callable(field):
        return 'value', field
    return field, lambda record: getattr(record, field)


def distribution(records: Sequence[Any], field: FieldSelector) -> List[Dict[str, Any]]:
    """One entry per distinct field value with its count and share, count descending."""
    key_name, key_fn = _selector(field)
    counts = Counter(key_fn(record) for record in records)
    total = len(records)
    return [
        {key_name: key, 'count': count, 'percentage': round(count / total * 100, 1)}
        for key, count in counts.most_common()
    ]


def group_by(records: Iterable[T], key_fn: FieldSelector) -> 'OrderedDict[Hashable, List[T]]':
    """Map each key to its records, keeping original relative order."""
    _, key_fn = _selector(key_fn)
    groups: 'OrderedDict[Hashable, List[T]]' = OrderedDict()
    for record in records:
        groups.setdefault(key_fn(record), []).append(record)
    return groups


def percentage(part: float, whole: float) -> float:
    if whole == 0:
        raise InsufficientDataError("Percentage of an empty total is undefined")
    return part / whole * 100


def rate(records: Sequence[T], predicate: Callable[[T], bool]) -> float:
    """Percentage of records satisfying predicate."""
    return percentage(sum(1 for record in records if predicate(record)), len(records))


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        raise InsufficientDataError("Cannot average an empty group")
    return float(np.mean(values))


def _paired(x: Iterable[float], y: Iterable[float]) -> Tuple[np.ndarray, np.ndarray]:
    x = np.asarray(list(x), dtype=float)
    y = np.asarray(list(y), dtype=float)
    if len(x) != len(y):
        raise ValueError(f"Sequences differ in length: {len(x)} != {len(y)}")
    if len(x) < 2:
        raise InsufficientDataError(f"Need at least 2 data points, got {len(x)}")
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        raise InsufficientDataError("Zero variance in at least one dimension")
    return x, y


def correlation(x: Iterable[float], y: Iterable[float]) -> float:
    """Pearson sample correlation."""
    x, y = _paired(x, y)
    r, _ = stats.pearsonr(x, y)
    return float(r)


def simple_linear_regression(x: Iterable[float], y: Iterable[float]) -> RegressionResult:
    """Ordinary least squares fit of y on x."""
    x, y = _paired(x, y)
    fit = stats.linregress(x, y)
    return RegressionResult(slope=float(fit.slope), intercept=float(fit.intercept))


def bucketize(
    records: Iterable[T],
    value_fn: Callable[[T], float],
    buckets: Sequence[Bucket]
) -> 'OrderedDict[str, List[T]]':
    """
    Assign each record to the first bucket whose inclusive bounds contain it.
    
    Records matching no bucket are left out of every bucket.
    """
    assigned: 'OrderedDict[str, List[T]]' = OrderedDict((b.label, []) for b in buckets)
    for record in records:
        value = value_fn(record)
        for bucket in buckets:
            if bucket.min <= value <= bucket.max:
                assigned[bucket.label].append(record)
                break
    return assigned


def or_none(fn: Callable[..., Any], *args, **kwargs) -> Any:
    """Evaluate a statistic, returning None when the group is too small."""
    try:
        return fn(*args, **kwargs)
    except InsufficientDataError:
        return None


def rounded(value: Any, ndigits: int = None) -> Any:
    """round() that passes None through; ndigits=None rounds to an int."""
    if value is None:
        return None
    return round(value) if ndigits is None else round(value, ndigits)


def falls_below(value: float, benchmark: float, gap: float, tolerance: float = 1e-9) -> bool:
    """True when value is strictly more than gap below benchmark."""
    return benchmark - value - gap > tolerance
