import logging
from decimal import Decimal, ROUND_HALF_UP

from ..models import Balance, TripData
from .trip_data import fetch_trip_data

logger = logging.getLogger(__name__)


def calculate_balances(data: TripData) -> list[Balance]:
    """
    Calculate the balance for each member of a trip.

    Positive balance = member is owed money (paid more than their share)
    Negative balance = member owes money (was split more than they paid)

    Args:
        data: The trip's members, receipts, line items and splits

    Returns:
        One Balance per member, in member order
    """
    paid: dict[int, Decimal] = {m.user_id: Decimal("0") for m in data.members}
    owed: dict[int, Decimal] = {m.user_id: Decimal("0") for m in data.members}

    # Payers get credit for the full receipt
    for receipt in data.receipts:
        if receipt.user_id in paid:
            paid[receipt.user_id] += receipt.total_amount

    # Splits only count against line items belonging to this trip's receipts
    receipt_ids = {r.id for r in data.receipts}
    line_item_ids = {li.id for li in data.line_items if li.receipt_id in receipt_ids}

    for split in data.splits:
        if split.line_item_id not in line_item_ids:
            continue
        if split.user_id in owed:
            owed[split.user_id] += split.amount

    skipped = sum(1 for r in data.receipts if r.user_id not in paid)
    if skipped:
        logger.debug("Ignored %d receipts paid by non-members", skipped)

    return [
        Balance(
            user_id=m.user_id,
            username=m.username,
            amount=(paid[m.user_id] - owed[m.user_id]).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
        )
        for m in data.members
    ]


async def get_trip_balances(trip_id: int) -> list[Balance]:
    """
    Get balances for all members of a trip.

    Args:
        trip_id: The trip ID

    Returns:
        List of Balance objects
    """
    data = await fetch_trip_data(trip_id)
    return calculate_balances(data)
