"""Ledger client interface and its Solana implementation.

The airdrop handler never talks to the chain directly.  Everything it
needs (address parsing, associated token account derivation, account lookup,
instruction construction, signing, submission and confirmation) goes
through the :class:`LedgerClient` interface defined here.

:class:`SolanaLedgerClient` implements the interface on top of the Solana
Python SDK (``solana`` for JSON-RPC, ``solders`` for keys, messages and
transactions, ``spl.token`` for the token program instructions).  Values it
returns (public keys, instructions, transactions, signatures) are opaque to
the handler; tests substitute an in-memory double.

Usage::

    keypair = load_keypair(config.wallet_private_key)
    ledger = SolanaLedgerClient(
        rpc_url=config.rpc_url,
        signer=keypair,
        timeout_sec=config.rpc_timeout_sec,
    )
"""

from __future__ import annotations

import abc
import json
import logging
from typing import Any

from pydantic import SecretStr
from solana.rpc.api import Client
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    TransferParams,
    create_associated_token_account,
    get_associated_token_address,
    transfer,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Custom exceptions
# ---------------------------------------------------------------------------


class LedgerTransactionError(RuntimeError):
    """Raised when a submitted transaction is confirmed with an execution error."""


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


class LedgerClient(abc.ABC):
    """Operations the airdrop handler consumes from the ledger.

    Public keys, instructions, blockhashes, transactions and signatures are
    ledger-native objects; callers treat them as opaque and only convert
    signatures to text with ``str()``.
    """

    @property
    @abc.abstractmethod
    def distributor_address(self) -> Any:
        """Public key of the distributing wallet (the fee payer and signer)."""

    @abc.abstractmethod
    def parse_address(self, address: str) -> Any:
        """Parse *address* into a public key.

        Raises
        ------
        ValueError
            If *address* is not a well-formed public key.
        """

    @abc.abstractmethod
    def associated_token_address(self, owner: Any, mint: Any) -> Any:
        """Derive the token-holding account of *owner* for *mint*."""

    @abc.abstractmethod
    def account_exists(self, address: Any) -> bool:
        """Return ``True`` if an account is present on-chain at *address*."""

    @abc.abstractmethod
    def create_associated_account_instruction(self, owner: Any, mint: Any) -> Any:
        """Build an instruction creating *owner*'s token account for *mint*.

        The distributor pays the rent.
        """

    @abc.abstractmethod
    def transfer_instruction(self, source: Any, destination: Any, amount: int) -> Any:
        """Build a token transfer of *amount* smallest units, signed by the distributor."""

    @abc.abstractmethod
    def latest_blockhash(self) -> Any:
        """Return a recent blockhash to anchor a new transaction."""

    @abc.abstractmethod
    def sign_transaction(self, instructions: list[Any], recent_blockhash: Any) -> Any:
        """Assemble *instructions* into a transaction paid and signed by the distributor."""

    @abc.abstractmethod
    def send_transaction(self, transaction: Any) -> Any:
        """Submit a signed transaction once and return its signature."""

    @abc.abstractmethod
    def confirm_transaction(self, signature: Any) -> None:
        """Block until *signature* reaches ``confirmed`` commitment.

        Raises
        ------
        LedgerTransactionError
            If the transaction landed but failed to execute.
        """


# ---------------------------------------------------------------------------
# Solana implementation
# ---------------------------------------------------------------------------


class SolanaLedgerClient(LedgerClient):
    """:class:`LedgerClient` backed by a Solana JSON-RPC endpoint.

    Parameters
    ----------
    rpc_url:
        HTTP(S) JSON-RPC endpoint.
    signer:
        Keypair of the distributing wallet.  Never logged.
    timeout_sec:
        Per-request timeout enforced by the underlying HTTP client.
    client:
        Pre-built :class:`solana.rpc.api.Client`; mainly for tests.
    """

    def __init__(
        self,
        rpc_url: str,
        signer: Keypair,
        timeout_sec: float = 30.0,
        client: Client | None = None,
    ) -> None:
        self._signer = signer
        self._client = (
            client
            if client is not None
            else Client(rpc_url, commitment=Confirmed, timeout=timeout_sec)
        )
        logger.info(
            "Solana ledger client ready (rpc=%s, distributor=%s)",
            rpc_url,
            signer.pubkey(),
        )

    @property
    def distributor_address(self) -> Pubkey:
        return self._signer.pubkey()

    def parse_address(self, address: str) -> Pubkey:
        return Pubkey.from_string(address)

    def associated_token_address(self, owner: Pubkey, mint: Pubkey) -> Pubkey:
        return get_associated_token_address(owner, mint)

    def account_exists(self, address: Pubkey) -> bool:
        resp = self._client.get_account_info(address, commitment=Confirmed)
        return resp.value is not None

    def create_associated_account_instruction(
        self, owner: Pubkey, mint: Pubkey
    ) -> Instruction:
        return create_associated_token_account(
            payer=self.distributor_address, owner=owner, mint=mint
        )

    def transfer_instruction(
        self, source: Pubkey, destination: Pubkey, amount: int
    ) -> Instruction:
        return transfer(
            TransferParams(
                program_id=TOKEN_PROGRAM_ID,
                source=source,
                dest=destination,
                owner=self.distributor_address,
                amount=amount,
            )
        )

    def latest_blockhash(self) -> Hash:
        return self._client.get_latest_blockhash(commitment=Confirmed).value.blockhash

    def sign_transaction(
        self, instructions: list[Instruction], recent_blockhash: Hash
    ) -> Transaction:
        return Transaction.new_signed_with_payer(
            instructions,
            self.distributor_address,
            [self._signer],
            recent_blockhash,
        )

    def send_transaction(self, transaction: Transaction) -> Signature:
        resp = self._client.send_raw_transaction(
            bytes(transaction),
            opts=TxOpts(skip_preflight=False, preflight_commitment=Confirmed),
        )
        return resp.value

    def confirm_transaction(self, signature: Signature) -> None:
        resp = self._client.confirm_transaction(signature, commitment=Confirmed)
        status = resp.value[0] if resp.value else None
        if status is not None and status.err is not None:
            raise LedgerTransactionError(
                f"Transaction {signature} failed: {status.err}"
            )


# ---------------------------------------------------------------------------
# Credential loading
# ---------------------------------------------------------------------------


def load_keypair(secret: SecretStr) -> Keypair:
    """Build the distributor :class:`~solders.keypair.Keypair` from configuration.

    The value is the JSON array of 64 byte values written by
    ``solana-keygen`` (secret key followed by public key).

    Parameters
    ----------
    secret:
        The ``WALLET_PRIVATE_KEY`` setting.

    Returns
    -------
    Keypair
        The distributing wallet's keypair.

    Raises
    ------
    ValueError
        If the value cannot be decoded.  The message never contains the key.
    """
    raw = secret.get_secret_value().strip()
    try:
        values = json.loads(raw)
        if not isinstance(values, list):
            raise TypeError("expected a JSON array")
        return Keypair.from_bytes(bytes(values))
    except (ValueError, TypeError):
        raise ValueError("WALLET_PRIVATE_KEY is not a valid Solana secret key") from None
