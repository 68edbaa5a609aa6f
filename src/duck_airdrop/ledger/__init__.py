"""Ledger access subpackage.

Defines the :class:`LedgerClient` interface consumed by the airdrop handler
and its Solana implementation.
"""

from duck_airdrop.ledger.client import (
    LedgerClient,
    LedgerTransactionError,
    SolanaLedgerClient,
    load_keypair,
)

__all__: list[str] = [
    "LedgerClient",
    "LedgerTransactionError",
    "SolanaLedgerClient",
    "load_keypair",
]
