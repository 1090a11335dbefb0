from pydantic import BaseModel, Field
from typing import Annotated, Literal, Optional
from decimal import Decimal

# Money fits the default 28-digit decimal context with room for cent rounding
Money = Annotated[Decimal, Field(max_digits=18)]


class Balance(BaseModel):
    """A trip member's net balance."""
    user_id: int
    username: str
    amount: Money  # Positive = owed money, Negative = owes money


class Settlement(BaseModel):
    """A payment from one trip member to another."""
    from_user_id: int
    from_username: str
    to_user_id: int
    to_username: str
    amount: Decimal = Field(gt=0)


class TripMember(BaseModel):
    """A member of a trip, joined with the user's name."""
    trip_id: int
    user_id: int
    role: Literal["owner", "member"] = "member"
    username: str


class Receipt(BaseModel):
    """A purchase paid for by one trip member."""
    id: int
    trip_id: int
    user_id: int
    title: str = ""
    total_amount: Money
    merchant: Optional[str] = None


class LineItem(BaseModel):
    """A splittable portion of a receipt."""
    id: int
    receipt_id: int
    description: str = ""
    amount: Money
    quantity: int = 1


class Split(BaseModel):
    """The share of a line item assigned to one member."""
    id: int
    line_item_id: int
    user_id: int
    amount: Money
    percentage: Optional[Decimal] = None


class TripData(BaseModel):
    """All records needed to compute a trip's balances."""
    members: list[TripMember] = []
    receipts: list[Receipt] = []
    line_items: list[LineItem] = []
    splits: list[Split] = []


class SettlementRequest(BaseModel):
    """Request body for computing settlements from explicit balances."""
    balances: list[Balance]
    strict: bool = False


class EvenSplitRequest(BaseModel):
    """Request body for splitting a line item evenly among members."""
    amount: Money
    quantity: int = Field(default=1, ge=1, le=10_000)
    user_ids: list[int]


class SplitAllocation(BaseModel):
    """One member's share of a line item."""
    user_id: int
    amount: Decimal


class SplitCheckRequest(BaseModel):
    """Request body for checking split amounts against a line item total."""
    total: Money
    amounts: list[Money]


class SplitCheckResponse(BaseModel):
    """Result of a successful split check."""
    total: Decimal
    allocated: Decimal
    remaining: Decimal
