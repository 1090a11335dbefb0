from decimal import Decimal, ROUND_FLOOR
from typing import Sequence, Union

from ..models import EvenSplitRequest, LineItem, SplitAllocation
from .settlement import EPSILON


class SplitTotalMismatch(ValueError):
    """Raised when split amounts do not add up to the line item total."""


def line_item_total(line_item: Union[LineItem, EvenSplitRequest]) -> Decimal:
    """Total cost of a line item (unit amount times quantity)."""
    return line_item.amount * line_item.quantity


def split_evenly(total: Decimal, participant_count: int) -> list[Decimal]:
    """
    Split a total into equal shares rounded down to the cent.

    The first share absorbs whatever the rounding leaves over, so the
    shares always sum to exactly the total.

    Args:
        total: Amount to split
        participant_count: Number of shares

    Returns:
        List of participant_count shares, empty when there is no one to split with
    """
    if participant_count < 0:
        raise ValueError(f"participant_count must not be negative, got {participant_count}")
    if participant_count == 0:
        return []

    total = Decimal(str(total))
    share = (total / participant_count).quantize(Decimal("0.01"), rounding=ROUND_FLOOR)
    remainder = total - share * participant_count

    return [share + remainder] + [share] * (participant_count - 1)


def allocate_evenly(total: Decimal, user_ids: Sequence[int]) -> list[SplitAllocation]:
    """Pair even shares with members; the first member takes the remainder."""
    shares = split_evenly(total, len(user_ids))
    return [SplitAllocation(user_id=uid, amount=amount) for uid, amount in zip(user_ids, shares)]


def validate_split_total(total: Decimal, amounts: Sequence[Decimal]) -> Decimal:
    """
    Check that split amounts cover a line item total.

    Returns:
        The unallocated remainder, within EPSILON of zero

    Raises:
        SplitTotalMismatch: if the amounts miss the total by more than EPSILON
    """
    allocated = sum(amounts, Decimal("0"))
    remaining = total - allocated
    if abs(remaining) > EPSILON:
        raise SplitTotalMismatch(
            f"Split amounts must equal the total amount of {total} (allocated {allocated})"
        )
    return remaining
