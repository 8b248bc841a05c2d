"""JSON API endpoints: prices, quote, and poller status."""

from __future__ import annotations

import time
from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ratefeed.board import SwapBoard
from ratefeed.dashboard.formatting import (
    decimal_to_str,
    format_crypto,
    format_rate,
    format_usd,
    timestamp_to_iso,
)
from ratefeed.market_data.price_source import PriceSource
from ratefeed.selection.location import QueryStringLocation
from ratefeed.selection.state import SelectionState

log = structlog.get_logger(__name__)

router = APIRouter()


def prices_payload(price_source: PriceSource, stale_after: float) -> dict[str, Any]:
    """Serialize the current snapshot. Shared with the WebSocket update loop."""
    snapshot = price_source.snapshot
    return {
        "prices": decimal_to_str({asset.value: price for asset, price in snapshot.prices.items()}),
        "source": snapshot.source.value,
        "sequence": snapshot.sequence,
        "last_updated": timestamp_to_iso(snapshot.captured_at),
        "age_seconds": round(price_source.age(), 3),
        "stale": price_source.is_stale(stale_after),
    }


def board_from_request(request: Request) -> tuple[SwapBoard, QueryStringLocation]:
    """Build a per-request board whose selection is restored from the query string.

    The query string is the session: each request restores it once and any
    mutator rewrites it, so the returned query is what the client should
    put back into its own URL (replacing, not pushing, the history entry).
    """
    location = QueryStringLocation(f"?{request.url.query}")
    selection = SelectionState(location)
    selection.restore()

    amount = request.query_params.get("amount")
    if amount is not None:
        selection.set_send_amount_usd(amount)

    board = SwapBoard(
        request.app.state.price_source,
        selection,
        request.app.state.calculator,
    )
    return board, location


def quote_payload(board: SwapBoard, location: QueryStringLocation) -> dict[str, Any]:
    quote = board.quote()
    payload = {
        "from": quote.from_asset.value,
        "to": quote.to_asset.value,
        "receive": quote.receive_asset.value,
        "live_rate": quote.live_rate,
        "send_amount_usd": quote.send_amount_usd,
        "swap_fee_usd": quote.swap_fee_usd,
        "network_fee_usd": quote.network_fee_usd,
        "usd_after_fees": quote.usd_after_fees,
        "estimated_receive": quote.estimated_receive,
        "source": quote.snapshot_source.value,
        "last_updated": timestamp_to_iso(quote.captured_at),
        "query": location.query,
        "display": {
            "live_rate": (
                f"1 {quote.from_asset.value} = {format_rate(quote.live_rate)} "
                f"{quote.to_asset.value}"
            ),
            "swap_fee": f"- {format_usd(quote.swap_fee_usd)}",
            "network_fee": f"~ {format_usd(quote.network_fee_usd)}",
            "estimated_receive": (
                f"{format_crypto(quote.estimated_receive)} {quote.receive_asset.value}"
            ),
        },
    }
    return decimal_to_str(payload)


@router.get("/prices")
async def get_prices(request: Request) -> JSONResponse:
    """Current price snapshot with its source and staleness."""
    stale_after = request.app.state.settings.feed.stale_after
    return JSONResponse(content=prices_payload(request.app.state.price_source, stale_after))


@router.get("/quote")
async def get_quote(request: Request) -> JSONResponse:
    """Live rate and receive estimate for the selection in the query string."""
    board, location = board_from_request(request)
    return JSONResponse(content=quote_payload(board, location))


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Poller state and counters."""
    poller = request.app.state.poller
    price_source: PriceSource = request.app.state.price_source
    status = poller.get_status()
    status["snapshot_source"] = price_source.snapshot.source.value
    status["last_updated"] = timestamp_to_iso(price_source.last_updated)
    status["server_time"] = timestamp_to_iso(time.time())
    return JSONResponse(content=status)
