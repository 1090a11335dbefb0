import logging
import httpx

from ..config import get_settings
from ..models import LineItem, Receipt, Split, TripData, TripMember

logger = logging.getLogger(__name__)


class TripDataUnavailable(RuntimeError):
    """Raised when the hosted database is not configured."""


async def get_supabase_headers() -> dict[str, str]:
    """Get headers for Supabase REST API calls."""
    settings = get_settings()
    return {
        "apikey": settings.supabase_service_key,
        "Authorization": f"Bearer {settings.supabase_service_key}",
        "Content-Type": "application/json",
    }


def _in_filter(ids) -> str:
    return f"in.({','.join(str(i) for i in ids)})"


async def _get_rows(client: httpx.AsyncClient, table: str, params: dict[str, str]) -> list[dict]:
    settings = get_settings()
    response = await client.get(
        f"{settings.supabase_url}/rest/v1/{table}",
        headers=await get_supabase_headers(),
        params=params,
    )
    response.raise_for_status()
    rows = response.json()
    logger.debug("Fetched %d rows from %s", len(rows), table)
    return rows


async def fetch_trip_data(trip_id: int) -> TripData:
    """
    Fetch all records needed for a trip's balances from Supabase.

    Reads trip_member (joined with user for usernames), receipt,
    receipt_line_item and receipt_split. Every row is validated into
    its model before it is returned.

    Raises:
        TripDataUnavailable: if Supabase is not configured
        httpx.HTTPStatusError: if any request fails
    """
    settings = get_settings()
    if not settings.database_configured:
        raise TripDataUnavailable("Supabase is not configured")

    async with httpx.AsyncClient() as client:
        member_rows = await _get_rows(
            client,
            "trip_member",
            {"trip_id": f"eq.{trip_id}", "select": "trip_id,user_id,role"},
        )

        usernames: dict[int, str] = {}
        if member_rows:
            user_rows = await _get_rows(
                client,
                "user",
                {"id": _in_filter(m["user_id"] for m in member_rows), "select": "id,username"},
            )
            usernames = {u["id"]: u["username"] for u in user_rows}

        members = [
            TripMember(**row, username=usernames.get(row["user_id"], f"user-{row['user_id']}"))
            for row in member_rows
        ]

        receipts = [
            Receipt(**row)
            for row in await _get_rows(
                client,
                "receipt",
                {"trip_id": f"eq.{trip_id}", "select": "id,trip_id,user_id,title,total_amount,merchant"},
            )
        ]

        line_items: list[LineItem] = []
        splits: list[Split] = []

        if receipts:
            line_items = [
                LineItem(**row)
                for row in await _get_rows(
                    client,
                    "receipt_line_item",
                    {
                        "receipt_id": _in_filter(r.id for r in receipts),
                        "select": "id,receipt_id,description,amount,quantity",
                    },
                )
            ]

        if line_items:
            splits = [
                Split(**row)
                for row in await _get_rows(
                    client,
                    "receipt_split",
                    {
                        "line_item_id": _in_filter(li.id for li in line_items),
                        "select": "id,line_item_id,user_id,amount,percentage",
                    },
                )
            ]

    return TripData(members=members, receipts=receipts, line_items=line_items, splits=splits)
