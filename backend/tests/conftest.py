import pytest
from decimal import Decimal

from tripsettle.models import LineItem, Receipt, Split, TripData, TripMember


@pytest.fixture
def sample_members():
    """Three trip members."""
    return [
        TripMember(trip_id=1, user_id=1, role="owner", username="alice"),
        TripMember(trip_id=1, user_id=2, username="bob"),
        TripMember(trip_id=1, user_id=3, username="carol"),
    ]


@pytest.fixture
def sample_receipt():
    """Single dinner receipt paid by Alice for $90."""
    return Receipt(id=10, trip_id=1, user_id=1, title="Dinner", total_amount=Decimal("90.00"))


@pytest.fixture
def sample_line_items():
    """Two line items totaling $90."""
    return [
        LineItem(id=100, receipt_id=10, description="Pasta", amount=Decimal("30.00"), quantity=2),
        LineItem(id=101, receipt_id=10, description="Wine", amount=Decimal("30.00")),
    ]


@pytest.fixture
def sample_splits():
    """Pasta split three ways, wine split between Bob and Carol."""
    return [
        Split(id=1000, line_item_id=100, user_id=1, amount=Decimal("20.00")),
        Split(id=1001, line_item_id=100, user_id=2, amount=Decimal("20.00")),
        Split(id=1002, line_item_id=100, user_id=3, amount=Decimal("20.00")),
        Split(id=1003, line_item_id=101, user_id=2, amount=Decimal("15.00")),
        Split(id=1004, line_item_id=101, user_id=3, amount=Decimal("15.00")),
    ]


@pytest.fixture
def dinner_trip_data(sample_members, sample_receipt, sample_line_items, sample_splits):
    """Complete trip data matching fetch_trip_data() return format."""
    return TripData(
        members=sample_members,
        receipts=[sample_receipt],
        line_items=sample_line_items,
        splits=sample_splits,
    )
