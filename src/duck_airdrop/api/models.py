"""Pydantic models for the airdrop HTTP API.

The claim route decodes its body leniently (a missing or malformed
``walletAddress`` is a 400, not a 422), so :class:`ClaimRequest` documents
the request shape rather than gating it.  Response models describe every
body the endpoint returns and are used in the OpenAPI schema.

Models
------
- :class:`ClaimRequest`: ``POST`` request body
- :class:`ClaimResponse`: 200 success body
- :class:`ErrorResponse`: 400 / 405 body
- :class:`DownstreamErrorResponse`: 500 body
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ClaimRequest(BaseModel):
    """Request body for a claim.

    Attributes
    ----------
    walletAddress:
        Base58 Solana public key of the recipient.
    """

    walletAddress: str = Field(min_length=1)


class ClaimResponse(BaseModel):
    """Body returned when the airdrop was sent and confirmed.

    Attributes
    ----------
    success:
        Always ``True``.
    signature:
        Base58 signature of the confirmed transaction.
    message:
        Human-readable confirmation (e.g. ``"25000 DUCK tokens sent successfully!"``).
    """

    success: bool = True
    signature: str = Field(min_length=1)
    message: str


class ErrorResponse(BaseModel):
    """Body for rejected requests (missing, invalid or duplicate address; wrong method)."""

    error: str


class DownstreamErrorResponse(ErrorResponse):
    """Body returned when the ledger failed; ``details`` carries the raw failure message."""

    details: str
