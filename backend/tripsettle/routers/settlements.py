import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from ..models import Balance, Settlement, SettlementRequest
from ..services.balances import get_trip_balances
from ..services.settlement import InvalidBalanceSet, compute_settlements, get_trip_settlements
from ..services.trip_data import TripDataUnavailable

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Settlements"])


@router.get("/trips/{trip_id}/balances", response_model=list[Balance])
async def get_balances(trip_id: int) -> list[Balance]:
    """
    Get the balance for each member of a trip.

    Positive balance = member is owed money (paid more than their share)
    Negative balance = member owes money (was split more than they paid)
    """
    try:
        return await get_trip_balances(trip_id)
    except TripDataUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Balance calculation failed for trip %s", trip_id)
        raise HTTPException(status_code=500, detail=f"Failed to calculate balances: {str(e)}")


@router.get("/trips/{trip_id}/settlements", response_model=list[Settlement])
async def get_settlements(
    trip_id: int,
    user_id: Optional[int] = Query(None, description="Only settlements this user pays or receives"),
) -> list[Settlement]:
    """
    Get the list of payments that settles all balances in a trip.

    Uses a greedy algorithm that pairs the largest debts with the largest
    credits to keep the number of transactions small.
    """
    try:
        return await get_trip_settlements(trip_id, user_id=user_id)
    except InvalidBalanceSet as e:
        raise HTTPException(status_code=422, detail=str(e))
    except TripDataUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Settlement calculation failed for trip %s", trip_id)
        raise HTTPException(status_code=500, detail=f"Failed to calculate settlements: {str(e)}")


@router.post("/settlements/compute", response_model=list[Settlement])
async def compute(request: SettlementRequest) -> list[Settlement]:
    """
    Compute settlements for an explicit set of balances.

    With strict=true the balances must have unique user ids and sum to zero.
    """
    try:
        return compute_settlements(request.balances, strict=request.strict)
    except InvalidBalanceSet as e:
        raise HTTPException(status_code=422, detail=str(e))
