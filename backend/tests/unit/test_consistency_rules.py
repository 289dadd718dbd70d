"""
Booking Audit - Consistency Rule Unit Tests

One test class per rule module. Every test builds an in-memory store from
booking documents that are clean by default (see conftest.make_booking) and
changes only the fields under test.

Reference time: 2024-06-15 12:00 (naive UTC)
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from database.audit.issues import CRITICAL, HIGH, MEDIUM, LOW, ERROR, WARNING, INFO
from database.audit.rules import CONSISTENCY_RULES
from database.audit.rules.base import shift_years
from database.audit.rules.date_checks import check_date_consistency
from database.audit.rules.pricing_checks import check_pricing_consistency
from database.audit.rules.status_checks import check_status_consistency
from database.audit.rules.payment_checks import check_payment_consistency
from database.audit.rules.room_allocation_checks import check_room_allocation_consistency
from database.audit.rules.guest_data_checks import check_guest_data_consistency
from database.audit.rules.orphaned_record_checks import check_orphaned_records
from database.audit.rules.duplicate_checks import check_duplicate_bookings
from database.audit.rules.business_rule_checks import check_business_rule_violations
from database.audit.rules.data_integrity_checks import check_data_integrity


@pytest.fixture
def run_check(make_store, make_context):
    """Run one check function over the given documents."""
    def _run(check, documents, **threshold_overrides):
        return check(make_context(make_store(documents), **threshold_overrides))
    return _run


def stay(start, nights=3):
    return {"date_from": start, "date_to": start + timedelta(days=nights)}


# ============================================================================
# Registry
# ============================================================================

class TestRuleRegistry:
    """Test the ordered rule registry."""

    def test_all_rules_registered_in_order(self):
        assert list(CONSISTENCY_RULES) == [
            "date_consistency",
            "pricing_consistency",
            "status_consistency",
            "payment_consistency",
            "room_allocation",
            "guest_data",
            "orphaned_records",
            "duplicate_bookings",
            "business_rules",
            "data_integrity",
        ]

    def test_failing_check_becomes_high_issue(self, make_store, make_context):
        rule = CONSISTENCY_RULES["pricing_consistency"]
        context = make_context(make_store([{"booking_id": "b1", "total_price": "abc"}]))

        issues = rule.run(context)

        assert len(issues) == 1
        assert issues[0].severity == HIGH
        assert issues[0].type == ERROR
        assert issues[0].category == "pricing_consistency"
        assert issues[0].description.startswith("Failed to check pricing consistency: ")

    def test_clean_booking_passes_every_rule(self, make_booking, make_store, make_context):
        context = make_context(make_store([make_booking("b1"), make_booking("b2")]))

        for rule in CONSISTENCY_RULES.values():
            assert rule.run(context) == [], rule.category


class TestShiftYears:
    """Test shift_years()."""

    def test_returns_midnight_of_same_date(self, now):
        assert shift_years(now, -2) == datetime(2022, 6, 15)
        assert shift_years(now, 5) == datetime(2029, 6, 15)

    def test_leap_day_rolls_forward(self):
        assert shift_years(datetime(2024, 2, 29, 9, 30), 1) == datetime(2025, 3, 1)
        assert shift_years(datetime(2024, 2, 29), 4) == datetime(2028, 2, 29)


# ============================================================================
# Date Consistency
# ============================================================================

class TestDateConsistency:
    """Test check_date_consistency()."""

    def test_check_out_before_check_in_is_critical(self, run_check, make_booking, now):
        start = now + timedelta(days=10)
        doc = make_booking("b1", date_from=start, date_to=start - timedelta(days=1))

        issues = run_check(check_date_consistency, [doc])

        assert len(issues) == 1
        assert issues[0].severity == CRITICAL
        assert issues[0].description == "Check-out date is not after check-in date"
        assert issues[0].booking_id == "b1"
        assert issues[0].property_id == "p1"

    def test_equal_dates_are_inverted_and_same_day(self, run_check, make_booking, now):
        start = now + timedelta(days=10)
        doc = make_booking("b1", date_from=start, date_to=start)

        issues = run_check(check_date_consistency, [doc])

        assert [issue.severity for issue in issues] == [CRITICAL, LOW]

    def test_far_past_is_suspicious(self, run_check, make_booking):
        doc = make_booking("b1", **stay(datetime(2020, 1, 1, 14)))

        issues = run_check(check_date_consistency, [doc])

        assert len(issues) == 1
        assert issues[0].severity == MEDIUM
        assert issues[0].type == WARNING
        assert "suspicious dates" in issues[0].description

    def test_far_future_check_out_is_suspicious(self, run_check, make_booking):
        doc = make_booking("b1", date_from=datetime(2029, 6, 10), date_to=datetime(2029, 6, 20))

        issues = run_check(check_date_consistency, [doc])

        assert [issue.severity for issue in issues] == [MEDIUM]

    def test_horizon_boundary_is_not_suspicious(self, run_check, make_booking):
        doc = make_booking("b1", **stay(datetime(2022, 6, 15)))

        assert run_check(check_date_consistency, [doc]) == []

    def test_same_day_booking_is_informational(self, run_check, make_booking):
        doc = make_booking("b1", date_from=datetime(2024, 6, 25, 10), date_to=datetime(2024, 6, 25, 18))

        issues = run_check(check_date_consistency, [doc])

        assert len(issues) == 1
        assert issues[0].severity == LOW
        assert issues[0].type == INFO
        assert issues[0].description == "Same-day booking detected"

    def test_missing_dates_are_skipped(self, run_check, make_booking):
        docs = [make_booking("b1", date_from=None), make_booking("b2", drop=("date_to",))]

        assert run_check(check_date_consistency, docs) == []

    def test_configurable_horizon(self, run_check, make_booking):
        doc = make_booking("b1", **stay(datetime(2023, 1, 1)))

        issues = run_check(check_date_consistency, [doc], past_horizon_years=1)

        assert [issue.severity for issue in issues] == [MEDIUM]


# ============================================================================
# Pricing Consistency
# ============================================================================

class TestPricingConsistency:
    """Test check_pricing_consistency()."""

    @pytest.mark.parametrize("price", [None, 0, -10.0])
    def test_invalid_price_is_high(self, run_check, make_booking, price):
        issues = run_check(check_pricing_consistency, [make_booking("b1", total_price=price)])

        assert len(issues) == 1
        assert issues[0].severity == HIGH
        assert issues[0].description == "Booking has invalid total price"
        assert issues[0].data == {"total_price": price}

    def test_absent_price_is_invalid(self, run_check, make_booking):
        issues = run_check(check_pricing_consistency, [make_booking("b1", drop=("total_price",))])

        assert [issue.severity for issue in issues] == [HIGH]

    def test_price_above_ceiling(self, run_check, make_booking):
        issues = run_check(check_pricing_consistency, [make_booking("b1", total_price=150000)])

        assert len(issues) == 1
        assert issues[0].severity == MEDIUM
        assert issues[0].description == "Booking has unusually high price"

    def test_price_at_ceiling_is_allowed(self, run_check, make_booking):
        assert run_check(check_pricing_consistency, [make_booking("b1", total_price=100000)]) == []

    def test_nightly_outlier_flagged(self, run_check, make_booking):
        docs = [make_booking(f"b{i}", total_price=300.0) for i in range(9)]
        docs.append(make_booking("bx", total_price=3300.0))

        issues = run_check(check_pricing_consistency, docs)

        assert len(issues) == 1
        assert issues[0].booking_id == "bx"
        assert issues[0].description == "Price per night significantly higher than average"
        assert issues[0].data == {"price_per_night": 1100.0, "average_price_per_night": 200.0}

    def test_outlier_included_in_mean(self, run_check, make_booking):
        docs = [make_booking(f"b{i}", total_price=300.0) for i in range(4)]
        docs.append(make_booking("bx", total_price=1800.0))

        assert run_check(check_pricing_consistency, docs) == []

    def test_zero_length_stays_excluded_from_mean(self, run_check, make_booking, now):
        start = now + timedelta(days=10)
        docs = [make_booking("b1", total_price=300.0)]
        docs.append(make_booking("b2", total_price=300.0, date_from=start, date_to=start))

        assert run_check(check_pricing_consistency, docs) == []

    @pytest.mark.parametrize("price", [float("nan"), float("inf"), Decimal("NaN")])
    def test_non_finite_price_is_invalid(self, run_check, make_booking, price):
        issues = run_check(check_pricing_consistency, [make_booking("b1", total_price=price)])

        assert [(issue.severity, issue.description) for issue in issues] == [
            (HIGH, "Booking has invalid total price"),
        ]

    def test_nan_price_does_not_hide_outliers(self, run_check, make_booking):
        docs = [make_booking(f"b{i}", total_price=300.0) for i in range(9)]
        docs.append(make_booking("bx", total_price=3300.0))
        docs.append(make_booking("bnan", total_price=float("nan")))

        issues = run_check(check_pricing_consistency, docs)

        assert [(issue.booking_id, issue.description) for issue in issues] == [
            ("bnan", "Booking has invalid total price"),
            ("bx", "Price per night significantly higher than average"),
        ]
        assert issues[1].data == {"price_per_night": 1100.0, "average_price_per_night": 200.0}

    def test_non_numeric_price_raises(self, make_store, make_context, make_booking):
        context = make_context(make_store([make_booking("b1", total_price="abc")]))

        with pytest.raises(TypeError):
            check_pricing_consistency(context)


# ============================================================================
# Status Consistency
# ============================================================================

class TestStatusConsistency:
    """Test check_status_consistency()."""

    @pytest.mark.parametrize("status", ["archived", None, "CONFIRMED"])
    def test_invalid_status_is_high(self, run_check, make_booking, status):
        issues = run_check(check_status_consistency, [make_booking("b1", status=status)])

        assert len(issues) == 1
        assert issues[0].severity == HIGH
        assert issues[0].data == {"status": status}

    def test_completed_with_future_check_in(self, run_check, make_booking):
        issues = run_check(check_status_consistency, [make_booking("b1", status="completed")])

        assert len(issues) == 1
        assert issues[0].severity == MEDIUM
        assert issues[0].description == "Booking marked as completed but check-in is in the future"

    def test_stale_pending(self, run_check, make_booking, now):
        doc = make_booking("b1", status="pending", **stay(now - timedelta(days=7)))

        issues = run_check(check_status_consistency, [doc])

        assert len(issues) == 1
        assert issues[0].description == "Booking still pending but check-out date has passed"

    def test_recently_ended_pending_not_stale(self, run_check, make_booking, now):
        doc = make_booking("b1", status="pending", date_from=now - timedelta(days=5), date_to=now - timedelta(days=2))

        assert run_check(check_status_consistency, [doc]) == []


# ============================================================================
# Payment Consistency
# ============================================================================

class TestPaymentConsistency:
    """Test check_payment_consistency()."""

    @pytest.mark.parametrize("payment_status", ["unknown", None])
    def test_invalid_payment_status(self, run_check, make_booking, payment_status):
        issues = run_check(check_payment_consistency, [make_booking("b1", payment_status=payment_status)])

        assert len(issues) == 1
        assert issues[0].severity == HIGH
        assert issues[0].description == "Booking has invalid payment status"

    def test_completed_without_payment(self, run_check, make_booking):
        doc = make_booking("b1", status="completed", payment_status="pending")

        issues = run_check(check_payment_consistency, [doc])

        assert len(issues) == 1
        assert issues[0].severity == HIGH
        assert issues[0].type == WARNING
        assert issues[0].description == "Completed booking without payment confirmation"

    @pytest.mark.parametrize("payment_status", ["paid", "refunded"])
    def test_completed_and_settled(self, run_check, make_booking, payment_status):
        doc = make_booking("b1", status="completed", payment_status=payment_status)

        assert run_check(check_payment_consistency, [doc]) == []

    def test_cancelled_but_paid(self, run_check, make_booking):
        issues = run_check(check_payment_consistency, [make_booking("b1", status="cancelled")])

        assert len(issues) == 1
        assert issues[0].severity == MEDIUM
        assert issues[0].type == INFO


# ============================================================================
# Room Allocation
# ============================================================================

class TestRoomAllocation:
    """Test check_room_allocation_consistency()."""

    @staticmethod
    def _room(make_booking, booking_id, start, end, room="101", **overrides):
        return make_booking(
            booking_id,
            date_from=start,
            date_to=end,
            allocated_room={"room_number": room},
            **overrides,
        )

    def test_overlap_reported_once(self, run_check, make_booking):
        docs = [
            self._room(make_booking, "b1", datetime(2024, 7, 1), datetime(2024, 7, 4)),
            self._room(make_booking, "b2", datetime(2024, 7, 3), datetime(2024, 7, 6)),
        ]

        issues = run_check(check_room_allocation_consistency, docs)

        assert len(issues) == 1
        issue = issues[0]
        assert issue.severity == CRITICAL
        assert issue.booking_id == "b1"
        assert issue.data["conflicting_booking_id"] == "b2"
        assert issue.data["room_number"] == "101"
        assert issue.data["dates"]["booking2"] == {"from": datetime(2024, 7, 3), "to": datetime(2024, 7, 6)}

    def test_overlap_symmetric_in_input_order(self, run_check, make_booking):
        first = self._room(make_booking, "b1", datetime(2024, 7, 1), datetime(2024, 7, 4))
        second = self._room(make_booking, "b2", datetime(2024, 7, 3), datetime(2024, 7, 6))

        forward = run_check(check_room_allocation_consistency, [first, second])
        backward = run_check(check_room_allocation_consistency, [second, first])

        assert forward == backward

    def test_back_to_back_is_not_a_conflict(self, run_check, make_booking):
        docs = [
            self._room(make_booking, "b1", datetime(2024, 7, 1, 12), datetime(2024, 7, 4, 11)),
            self._room(make_booking, "b2", datetime(2024, 7, 4, 11), datetime(2024, 7, 6, 11)),
        ]

        assert run_check(check_room_allocation_consistency, docs) == []

    def test_three_way_overlap_gives_three_pairs(self, run_check, make_booking):
        docs = [
            self._room(make_booking, "b1", datetime(2024, 7, 1), datetime(2024, 7, 10)),
            self._room(make_booking, "b2", datetime(2024, 7, 2), datetime(2024, 7, 5)),
            self._room(make_booking, "b3", datetime(2024, 7, 3), datetime(2024, 7, 4)),
        ]

        issues = run_check(check_room_allocation_consistency, docs)

        assert [(i.booking_id, i.data["conflicting_booking_id"]) for i in issues] == [
            ("b1", "b2"), ("b1", "b3"), ("b2", "b3"),
        ]

    @pytest.mark.parametrize("overrides", [
        {"room": "102"},
        {"property_id": "p2"},
        {"status": "cancelled"},
    ])
    def test_no_conflict_when_not_sharing_an_active_room(self, run_check, make_booking, overrides):
        docs = [
            self._room(make_booking, "b1", datetime(2024, 7, 1), datetime(2024, 7, 4)),
            self._room(make_booking, "b2", datetime(2024, 7, 2), datetime(2024, 7, 5), **overrides),
        ]

        assert run_check(check_room_allocation_consistency, docs) == []

    def test_empty_room_numbers_are_not_one_room(self, run_check, make_booking):
        docs = [
            self._room(make_booking, "b1", datetime(2024, 7, 1), datetime(2024, 7, 4), room=""),
            self._room(make_booking, "b2", datetime(2024, 7, 2), datetime(2024, 7, 5), room=""),
        ]

        assert run_check(check_room_allocation_consistency, docs) == []

    def test_unallocated_and_undated_bookings_ignored(self, run_check, make_booking):
        docs = [
            self._room(make_booking, "b1", datetime(2024, 7, 1), datetime(2024, 7, 4)),
            make_booking("b2", date_from=datetime(2024, 7, 2), date_to=datetime(2024, 7, 5)),
            self._room(make_booking, "b3", None, datetime(2024, 7, 5)),
        ]

        assert run_check(check_room_allocation_consistency, docs) == []


# ============================================================================
# Guest Data
# ============================================================================

class TestGuestData:
    """Test check_guest_data_consistency()."""

    @pytest.mark.parametrize("contact", [
        {"name": "Asha Rao"},
        {"email": "guest@example.com"},
        {"name": "", "email": "guest@example.com"},
        {},
    ])
    def test_missing_contact_details(self, run_check, make_booking, contact):
        issues = run_check(check_guest_data_consistency, [make_booking("b1", contact_details=contact)])

        assert len(issues) == 1
        assert issues[0].severity == MEDIUM
        assert issues[0].description == "Booking missing essential contact details"

    @pytest.mark.parametrize("email", ["not-an-email", "a@b", "a b@example.com", "guest@example.com\n"])
    def test_invalid_email(self, run_check, make_booking, email):
        doc = make_booking("b1", contact_details={"name": "Asha Rao", "email": email})

        issues = run_check(check_guest_data_consistency, [doc])

        assert len(issues) == 1
        assert issues[0].severity == LOW
        assert issues[0].data == {"email": email}

    @pytest.mark.parametrize("guests", [0, -1, 51])
    def test_unrealistic_guest_count(self, run_check, make_booking, guests):
        issues = run_check(check_guest_data_consistency, [make_booking("b1", guests=guests)])

        assert len(issues) == 1
        assert issues[0].description == "Unrealistic guest count"

    @pytest.mark.parametrize("guests", [1, 50, None])
    def test_plausible_guest_count(self, run_check, make_booking, guests):
        assert run_check(check_guest_data_consistency, [make_booking("b1", guests=guests)]) == []


# ============================================================================
# Orphaned Records
# ============================================================================

class TestOrphanedRecords:
    """Test check_orphaned_records()."""

    @pytest.mark.parametrize("property_id", ["p9", None])
    def test_unknown_property(self, run_check, make_booking, property_id):
        issues = run_check(check_orphaned_records, [make_booking("b1", property_id=property_id)])

        assert len(issues) == 1
        assert issues[0].severity == HIGH
        assert issues[0].description == "Booking references non-existent property"

    def test_unknown_user(self, run_check, make_booking):
        issues = run_check(check_orphaned_records, [make_booking("b1", user_id="u9")])

        assert len(issues) == 1
        assert issues[0].severity == MEDIUM
        assert issues[0].data == {"user_id": "u9"}

    @pytest.mark.parametrize("user_id", [None, ""])
    def test_bookings_without_user_are_not_orphaned(self, run_check, make_booking, user_id):
        assert run_check(check_orphaned_records, [make_booking("b1", user_id=user_id)]) == []


# ============================================================================
# Duplicate Bookings
# ============================================================================

class TestDuplicateBookings:
    """Test check_duplicate_bookings()."""

    def test_cluster_of_three(self, run_check, make_booking):
        contact = {"name": "Asha Rao", "email": "same@example.com"}
        docs = [make_booking(booking_id, contact_details=contact) for booking_id in ("b3", "b1", "b2")]

        issues = run_check(check_duplicate_bookings, docs)

        assert [issue.booking_id for issue in issues] == ["b2", "b3"]
        for issue in issues:
            assert issue.severity == MEDIUM
            assert issue.property_id == "p1"
            assert issue.data == {"original_booking_id": "b1", "duplicate_count": 3}

    def test_different_dates_are_not_duplicates(self, run_check, make_booking, now):
        contact = {"name": "Asha Rao", "email": "same@example.com"}
        docs = [
            make_booking("b1", contact_details=contact),
            make_booking("b2", contact_details=contact, **stay(now + timedelta(days=40))),
        ]

        assert run_check(check_duplicate_bookings, docs) == []


# ============================================================================
# Business Rules
# ============================================================================

class TestBusinessRules:
    """Test check_business_rule_violations()."""

    def test_short_stay(self, run_check, make_booking):
        doc = make_booking("b1", date_from=datetime(2024, 7, 1, 12), date_to=datetime(2024, 7, 1, 18))

        issues = run_check(check_business_rule_violations, [doc])

        assert len(issues) == 1
        assert issues[0].severity == MEDIUM
        assert issues[0].data == {"stay_duration": 0.25, "minimum_stay": 1.0}

    def test_exactly_minimum_stay_is_allowed(self, run_check, make_booking):
        doc = make_booking("b1", date_from=datetime(2024, 7, 1, 12), date_to=datetime(2024, 7, 2, 12))

        assert run_check(check_business_rule_violations, [doc]) == []

    def test_booked_too_far_in_advance(self, run_check, make_booking):
        doc = make_booking("b1", **stay(datetime(2026, 7, 1)))

        issues = run_check(check_business_rule_violations, [doc])

        assert len(issues) == 1
        assert issues[0].severity == LOW
        assert issues[0].description == "Booking made too far in advance"


# ============================================================================
# Data Integrity
# ============================================================================

class TestDataIntegrity:
    """Test check_data_integrity()."""

    def test_absent_field_is_one_critical_issue(self, run_check, make_booking):
        issues = run_check(check_data_integrity, [make_booking("b1", drop=("status",))])

        assert len(issues) == 1
        assert issues[0].severity == CRITICAL
        assert issues[0].description == "Missing required field: status"
        assert issues[0].data == {"missing_field": "status"}

    def test_one_issue_per_absent_field(self, run_check, make_booking):
        issues = run_check(check_data_integrity, [make_booking("b1", drop=("status", "property_id"))])

        assert [issue.description for issue in issues] == [
            "Missing required field: property_id",
            "Missing required field: status",
        ]

    def test_null_fields_grouped_per_booking(self, run_check, make_booking):
        issues = run_check(check_data_integrity, [make_booking("b1", date_from=None, status=None)])

        assert len(issues) == 1
        assert issues[0].description == "Critical field has null value"
        assert issues[0].data == {"null_fields": ["date_from", "status"]}

    def test_absent_and_null_reported_separately(self, run_check, make_booking):
        issues = run_check(check_data_integrity, [make_booking("b1", drop=("status",), property_id=None)])

        assert [issue.description for issue in issues] == [
            "Missing required field: status",
            "Critical field has null value",
        ]
        assert issues[1].data == {"null_fields": ["property_id"]}
