"""
Per-night price outlier detection.

Baseline is the arithmetic mean of price-per-night over every booking with a
positive stay and a positive price (the outliers themselves included). A
booking is an outlier when its per-night price exceeds multiplier x mean.
"""
import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class OutlierResult(Generic[T]):
    """Mean price-per-night of the qualifying set and the items above the threshold."""

    average: Optional[float]
    threshold: Optional[float]
    outliers: List[Tuple[T, float]] = field(default_factory=list)


def price_per_night(total_price: Optional[float], stay_days: Optional[float]) -> Optional[float]:
    """
    Args:
        total_price: Booking total
        stay_days: Stay length in fractional days

    Returns:
        total_price / stay_days, or None if either is missing, not finite or not positive
    """
    if total_price is None or stay_days is None:
        return None
    if not math.isfinite(total_price) or stay_days <= 0 or total_price <= 0:
        return None
    return float(total_price) / stay_days


def find_price_outliers(samples: Sequence[Tuple[T, float]], multiplier: float) -> OutlierResult:
    """
    Flag samples whose per-night price is above multiplier times the mean.

    Args:
        samples: (item, price_per_night) pairs, all already qualifying
        multiplier: e.g. 5.0 for "more than 5x the average"

    Returns:
        OutlierResult; average and threshold are None for an empty sample set
    """
    if not samples:
        return OutlierResult(average=None, threshold=None)

    average = sum(value for _, value in samples) / len(samples)
    threshold = average * multiplier
    outliers = [(item, value) for item, value in samples if value > threshold]
    return OutlierResult(average=average, threshold=threshold, outliers=outliers)
