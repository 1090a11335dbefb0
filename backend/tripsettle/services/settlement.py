import logging
from collections import Counter
from decimal import Decimal
from typing import Optional, Sequence

from ..config import get_settings
from ..models import Balance, Settlement
from .balances import calculate_balances
from .trip_data import fetch_trip_data

logger = logging.getLogger(__name__)

# One currency minor unit. Anything smaller counts as settled.
EPSILON = Decimal("0.01")


class InvalidBalanceSet(ValueError):
    """Raised by strict validation when a balance set cannot be settled."""


def validate_balances(balances: Sequence[Balance]) -> None:
    """
    Check that a balance set is safe to settle.

    Raises:
        InvalidBalanceSet: if a user appears more than once, or if the
            amounts do not sum to zero within EPSILON.
    """
    counts = Counter(b.user_id for b in balances)
    duplicates = sorted(uid for uid, n in counts.items() if n > 1)
    if duplicates:
        raise InvalidBalanceSet(f"Duplicate user ids in balances: {duplicates}")

    total = sum((b.amount for b in balances), Decimal("0"))
    if abs(total) > EPSILON:
        raise InvalidBalanceSet(f"Balances sum to {total}, expected 0")


def compute_settlements(balances: Sequence[Balance], strict: bool = False) -> list[Settlement]:
    """
    Calculate settlements using a greedy largest-first algorithm.

    Debtors are sorted largest debt first and creditors largest credit
    first. Each step moves the smaller of the current debt and credit,
    then advances past whichever side is settled. Balances smaller than
    EPSILON take no part.

    The caller's balances are never modified.

    Args:
        balances: One balance per trip member
        strict: Validate the balance set first and raise on bad input

    Returns:
        List of Settlement objects in generation order
    """
    if strict:
        validate_balances(balances)

    # Working copies: [user_id, username, remaining]
    debtors = [[b.user_id, b.username, b.amount] for b in balances if b.amount <= -EPSILON]
    creditors = [[b.user_id, b.username, b.amount] for b in balances if b.amount >= EPSILON]

    debtors.sort(key=lambda d: d[2])
    creditors.sort(key=lambda c: c[2], reverse=True)

    settlements: list[Settlement] = []
    i = j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        transfer = min(abs(debtor[2]), creditor[2])
        settlements.append(Settlement(
            from_user_id=debtor[0],
            from_username=debtor[1],
            to_user_id=creditor[0],
            to_username=creditor[1],
            amount=transfer,
        ))

        debtor[2] += transfer
        creditor[2] -= transfer

        # Both sides may settle in the same step
        if abs(debtor[2]) < EPSILON:
            i += 1
        if creditor[2] < EPSILON:
            j += 1

    leftover = [d for d in debtors[i:] if abs(d[2]) >= EPSILON]
    leftover += [c for c in creditors[j:] if c[2] >= EPSILON]
    if leftover:
        logger.warning(
            "Balances left unsettled after netting: %s",
            ", ".join(f"{row[1]} ({row[0]}): {row[2]}" for row in leftover),
        )

    logger.debug(
        "Netted %d debtors and %d creditors into %d settlements",
        len(debtors), len(creditors), len(settlements),
    )
    return settlements


def settlements_for_user(settlements: Sequence[Settlement], user_id: int) -> list[Settlement]:
    """Settlements where the given user pays or gets paid."""
    return [s for s in settlements if s.from_user_id == user_id or s.to_user_id == user_id]


async def get_trip_settlements(trip_id: int, user_id: Optional[int] = None) -> list[Settlement]:
    """
    Get settlements for a trip.

    Args:
        trip_id: The trip ID
        user_id: If given, only settlements involving this user

    Returns:
        List of Settlement objects
    """
    settings = get_settings()
    data = await fetch_trip_data(trip_id)
    balances = calculate_balances(data)
    settlements = compute_settlements(balances, strict=settings.strict_balance_validation)

    if user_id is not None:
        return settlements_for_user(settlements, user_id)
    return settlements
