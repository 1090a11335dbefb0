from fastapi import APIRouter, HTTPException

from ..models import EvenSplitRequest, SplitAllocation, SplitCheckRequest, SplitCheckResponse
from ..services.splitting import SplitTotalMismatch, allocate_evenly, line_item_total, validate_split_total

router = APIRouter(prefix="/splits", tags=["Splits"])


@router.post("/even", response_model=list[SplitAllocation])
async def split_even(request: EvenSplitRequest) -> list[SplitAllocation]:
    """
    Split a line item evenly among members.

    Shares are rounded down to the cent; the first member listed takes
    the leftover cents.
    """
    return allocate_evenly(line_item_total(request), request.user_ids)


@router.post("/check", response_model=SplitCheckResponse)
async def check_split(request: SplitCheckRequest) -> SplitCheckResponse:
    """Check that split amounts add up to the line item total."""
    try:
        remaining = validate_split_total(request.total, request.amounts)
    except SplitTotalMismatch as e:
        raise HTTPException(status_code=422, detail=str(e))

    return SplitCheckResponse(
        total=request.total,
        allocated=request.total - remaining,
        remaining=remaining,
    )
