"""
Pricing sanity checks.

- missing, non-finite or non-positive total price (high)
- total price above the absolute ceiling (medium)
- price per night above multiplier x the scope's average (medium)
"""

import math
from decimal import Decimal
from typing import List, Optional

from database.audit.issues import Issue, PRICING_CONSISTENCY, ERROR, WARNING, HIGH, MEDIUM
from database.audit.rules.base import RuleContext, booking_issue, consistency_rule
from database.calculators.price_outliers import find_price_outliers, price_per_night
from models.booking import BookingRecord


def _numeric_price(booking: BookingRecord) -> Optional[float]:
    """
    Raises:
        TypeError: If the stored price is not a number
    """
    value = booking.total_price
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise TypeError(f"booking {booking.booking_id} has non-numeric total_price {value!r}")
    return float(value)


def _is_valid_price(price: Optional[float]) -> bool:
    return price is not None and math.isfinite(price) and price > 0


@consistency_rule(PRICING_CONSISTENCY, "pricing consistency")
def check_pricing_consistency(ctx: RuleContext) -> List[Issue]:
    issues = []
    bookings = ctx.bookings()
    prices = {booking.booking_id: _numeric_price(booking) for booking in bookings}

    for booking in bookings:
        price = prices[booking.booking_id]
        if not _is_valid_price(price):
            issues.append(booking_issue(
                booking,
                type=ERROR,
                severity=HIGH,
                category=PRICING_CONSISTENCY,
                description="Booking has invalid total price",
                data={"total_price": booking.total_price},
                suggested_fix="Set valid total price for booking",
            ))

    ceiling = ctx.thresholds["price_ceiling"]
    for booking in bookings:
        price = prices[booking.booking_id]
        if _is_valid_price(price) and price > ceiling:
            issues.append(booking_issue(
                booking,
                type=WARNING,
                severity=MEDIUM,
                category=PRICING_CONSISTENCY,
                description="Booking has unusually high price",
                data={"total_price": booking.total_price, "price_ceiling": ceiling},
                suggested_fix="Verify booking price is correct",
            ))

    samples = []
    for booking in bookings:
        nightly = price_per_night(prices[booking.booking_id], booking.stay_days)
        if nightly is not None:
            samples.append((booking, nightly))

    # No qualifying booking: nothing to average against
    if not samples:
        return issues

    result = find_price_outliers(samples, ctx.thresholds["outlier_multiplier"])
    for booking, nightly in result.outliers:
        issues.append(booking_issue(
            booking,
            type=WARNING,
            severity=MEDIUM,
            category=PRICING_CONSISTENCY,
            description="Price per night significantly higher than average",
            data={
                "price_per_night": round(nightly, 2),
                "average_price_per_night": round(result.average, 2),
            },
            suggested_fix="Verify nightly rate and stay dates",
        ))

    return issues
