"""Claim registry subpackage.

Tracks which wallet addresses have claimed the airdrop for the lifetime of
the process.
"""

from duck_airdrop.registry.claims import ClaimRegistry, ClaimState

__all__: list[str] = [
    "ClaimRegistry",
    "ClaimState",
]
