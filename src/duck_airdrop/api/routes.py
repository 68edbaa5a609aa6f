"""FastAPI router for the airdrop endpoint.

One handler serves every HTTP method on every path and delegates to
:class:`~duck_airdrop.airdrop.handler.AirdropHandler`.  It is mounted twice
on the same catch-all path: ``POST`` carries the OpenAPI metadata, and the
remaining methods are registered outside the schema.

- ``OPTIONS *``: CORS preflight, 200 with no body
- ``POST *``   : claim the airdrop for ``{"walletAddress": ...}``
- anything else: 405

Every response carries the permissive CORS headers in :data:`CORS_HEADERS`.

The handler performs blocking RPC calls, so it runs in Starlette's thread
pool rather than on the event loop.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from duck_airdrop.airdrop.handler import AirdropHandler
from duck_airdrop.api.models import (
    ClaimRequest,
    ClaimResponse,
    DownstreamErrorResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

#: Headers attached to every response, preflight included.
CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}

#: Methods answered by the undocumented catch-all (preflight and 405s).
_OTHER_METHODS: list[str] = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


# ---------------------------------------------------------------------------
# Dependency accessor helpers
# ---------------------------------------------------------------------------


def _get_handler(request: Request) -> AirdropHandler:
    """Extract the :class:`AirdropHandler` from application state."""
    return request.app.state.handler  # type: ignore[no-any-return]


# ---------------------------------------------------------------------------
# Claim endpoint
# ---------------------------------------------------------------------------


@router.api_route(
    "/{path:path}",
    methods=["POST"],
    summary="Claim the airdrop for a wallet address",
    tags=["airdrop"],
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {"schema": ClaimRequest.model_json_schema()}
            }
        }
    },
    responses={
        200: {"model": ClaimResponse},
        400: {"model": ErrorResponse},
        500: {"model": DownstreamErrorResponse},
    },
)
async def claim_airdrop(
    request: Request,
    handler: Annotated[AirdropHandler, Depends(_get_handler)],
) -> Response:
    """Validate the request, send the airdrop, and report the outcome.

    Parameters
    ----------
    request:
        The incoming request; its body is decoded as JSON if possible.
    handler:
        Injected application-scoped :class:`AirdropHandler`.

    Returns
    -------
    Response
        Empty 200 for preflight, otherwise a JSON body with CORS headers.
    """
    body = await _read_json_body(request)
    status_code, payload = await run_in_threadpool(
        handler.handle, request.method, request.headers, body
    )
    if payload is None:
        return Response(status_code=status_code, headers=CORS_HEADERS)
    return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)


router.add_api_route(
    "/{path:path}",
    claim_airdrop,
    methods=_OTHER_METHODS,
    include_in_schema=False,
)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


async def _read_json_body(request: Request) -> Any:
    """Return the decoded JSON body, or ``None`` if absent or not valid JSON."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.debug("Ignoring non-JSON request body (%d bytes)", len(raw))
        return None
