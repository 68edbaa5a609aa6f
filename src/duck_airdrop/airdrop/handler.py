"""Airdrop request handler: claim admission control and transfer assembly.

This module implements :class:`AirdropHandler`, the single business
component of the service.  Each call to :meth:`AirdropHandler.handle`
follows a strictly linear flow::

    validate -> reserve -> build transaction -> sign -> submit -> confirm
             -> commit -> respond

Design notes
------------
- The handler is transport-agnostic: it receives an HTTP method, headers and
  an already-decoded JSON body and returns ``(status_code, json_body)``.  The
  FastAPI route in :mod:`duck_airdrop.api.routes` is a thin adapter.
- Eligibility uses :meth:`~duck_airdrop.registry.claims.ClaimRegistry.reserve`,
  which inserts a pending marker *before* any network call.  Concurrent
  requests for the same address therefore cannot both pay out.  A failed
  transfer releases the reservation so the caller can retry.
- If the recipient token account lookup fails (network error), the handler
  proceeds as if the account did not exist and includes the creation
  instruction.  Should the account in fact exist, the creation instruction
  fails at preflight and the whole claim returns 500 without paying out.
- Exactly one submission attempt is made per request.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from duck_airdrop.config import AppConfig
from duck_airdrop.errors import ClientInputError, DownstreamError, MethodNotAllowedError
from duck_airdrop.ledger.client import LedgerClient
from duck_airdrop.registry.claims import ClaimRegistry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: JSON body key carrying the recipient's wallet address.
WALLET_ADDRESS_FIELD: str = "walletAddress"

ADDRESS_REQUIRED_MSG: str = "Wallet address is required"
INVALID_ADDRESS_MSG: str = "Invalid wallet address"
ALREADY_CLAIMED_MSG: str = "Airdrop already claimed for this wallet"
DOWNSTREAM_FAILURE_MSG: str = "Failed to process airdrop"


def transfer_amount(config: AppConfig) -> int:
    """Return the per-claim amount in the token's smallest unit.

    With the defaults (25 000 tokens, 6 decimals) this is ``25_000_000_000``.
    """
    return config.airdrop_amount * 10**config.token_decimals


class AirdropHandler:
    """Validates claim requests and sends the airdrop transfer.

    Parameters
    ----------
    config:
        Process configuration; supplies the mint, amount and token symbol.
    ledger:
        Ledger client used for derivation, lookup, signing and submission.
    registry:
        Shared claim registry.  Must be the same instance for every request
        of the process.
    """

    def __init__(
        self,
        config: AppConfig,
        ledger: LedgerClient,
        registry: ClaimRegistry,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._mint = ledger.parse_address(config.token_mint_address)
        self._amount = transfer_amount(config)
        self._success_message = (
            f"{config.airdrop_amount} {config.token_symbol} tokens sent successfully!"
        )

    @property
    def amount(self) -> int:
        """Per-claim transfer amount in smallest units."""
        return self._amount

    def handle(
        self,
        method: str,
        headers: Mapping[str, str],
        body: Any,
    ) -> tuple[int, dict[str, Any] | None]:
        """Process one claim request.

        Parameters
        ----------
        method:
            HTTP method of the request.
        headers:
            Request headers.  Only used for logging.
        body:
            Decoded JSON body, or ``None`` if the request had none.

        Returns
        -------
        tuple[int, dict | None]
            HTTP status code and JSON response body.  The body is ``None``
            for a CORS preflight.
        """
        method = method.upper()
        if method == "OPTIONS":
            return 200, None

        try:
            address, recipient = self._admit(method, body)
        except ClientInputError as exc:
            return exc.status_code, {"error": exc.message}

        committed = False
        try:
            signature = self._send_airdrop(recipient)
        except DownstreamError as exc:
            return 500, {"error": DOWNSTREAM_FAILURE_MSG, "details": exc.details}
        else:
            self._registry.commit(address)
            committed = True
        finally:
            # Anything short of a commit, interrupts included, frees the address.
            if not committed:
                self._registry.release(address)

        logger.info(
            "Airdrop sent to %s (signature=%s, user_agent=%s)",
            address,
            signature,
            headers.get("user-agent", "-"),
        )
        return 200, {
            "success": True,
            "signature": signature,
            "message": self._success_message,
        }

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def _admit(self, method: str, body: Any) -> tuple[str, Any]:
        """Run the fail-fast validation sequence and reserve the address.

        Returns the raw address string and its parsed public key.

        Raises
        ------
        ClientInputError
            On wrong method, missing or malformed address, or duplicate claim.
        """
        if method != "POST":
            raise MethodNotAllowedError()

        address = body.get(WALLET_ADDRESS_FIELD) if isinstance(body, dict) else None
        if not address:
            raise ClientInputError(ADDRESS_REQUIRED_MSG)
        if not isinstance(address, str):
            raise ClientInputError(INVALID_ADDRESS_MSG)

        try:
            recipient = self._ledger.parse_address(address)
        except ValueError:
            raise ClientInputError(INVALID_ADDRESS_MSG) from None

        if not self._registry.reserve(address):
            logger.warning("Rejected duplicate claim for %s", address)
            raise ClientInputError(ALREADY_CLAIMED_MSG)
        return address, recipient

    # ------------------------------------------------------------------
    # Transfer
    # ------------------------------------------------------------------

    def build_instructions(self, recipient: Any) -> list[Any]:
        """Return the instructions paying the airdrop to *recipient*.

        The list is ``[create_account, transfer]`` when the recipient's token
        account was not found (or the lookup failed), otherwise
        ``[transfer]``.
        """
        ledger = self._ledger
        source = ledger.associated_token_address(ledger.distributor_address, self._mint)
        destination = ledger.associated_token_address(recipient, self._mint)

        try:
            exists = ledger.account_exists(destination)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Error checking token account %s: %s", destination, exc)
            exists = False

        instructions: list[Any] = []
        if not exists:
            instructions.append(
                ledger.create_associated_account_instruction(recipient, self._mint)
            )
        instructions.append(
            ledger.transfer_instruction(source, destination, self._amount)
        )
        return instructions

    def _send_airdrop(self, recipient: Any) -> str:
        """Build, sign, submit and confirm the transfer; return its signature.

        Raises
        ------
        DownstreamError
            Wrapping any failure raised by the ledger client.
        """
        try:
            instructions = self.build_instructions(recipient)
            blockhash = self._ledger.latest_blockhash()
            transaction = self._ledger.sign_transaction(instructions, blockhash)
            signature = self._ledger.send_transaction(transaction)
            self._ledger.confirm_transaction(signature)
        except Exception as exc:
            logger.exception("Airdrop error for %s", recipient)
            raise DownstreamError(str(exc)) from exc
        return str(signature)
