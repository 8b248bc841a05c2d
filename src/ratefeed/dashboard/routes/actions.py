"""POST endpoints for selection changes.

Each action restores the selection from the request's query string, applies
one mutator, and returns the new quote together with the rewritten location.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ratefeed.dashboard.routes.api import board_from_request, quote_payload
from ratefeed.exceptions import UnknownAssetError

log = structlog.get_logger(__name__)

router = APIRouter()


class SelectRequest(BaseModel):
    """Fields to change; omitted fields keep their current value."""

    model_config = ConfigDict(populate_by_name=True)

    from_asset: str | None = Field(default=None, alias="from")
    to_asset: str | None = Field(default=None, alias="to")
    receive_asset: str | None = Field(default=None, alias="receive")
    amount: str | float | None = None


@router.post("/swap")
async def swap_assets(request: Request) -> JSONResponse:
    """Exchange the from and to assets."""
    board, location = board_from_request(request)
    board.swap_assets()
    log.debug("selection_swapped", query=location.query)
    return JSONResponse(content=quote_payload(board, location))


@router.post("/select")
async def select(request: Request, body: SelectRequest) -> JSONResponse:
    """Apply dropdown and amount changes in field order: from, to, receive, amount."""
    board, location = board_from_request(request)
    try:
        if body.from_asset is not None:
            board.set_from_asset(body.from_asset)
        if body.to_asset is not None:
            board.set_to_asset(body.to_asset)
        if body.receive_asset is not None:
            board.set_receive_asset(body.receive_asset)
    except UnknownAssetError as e:
        log.info("selection_rejected", code=str(e.code))
        return JSONResponse(
            status_code=400,
            content={"error": str(e), "allowed": list(e.allowed)},
        )

    if body.amount is not None:
        board.set_send_amount_usd(body.amount)

    return JSONResponse(content=quote_payload(board, location))
