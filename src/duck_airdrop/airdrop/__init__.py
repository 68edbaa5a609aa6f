"""Airdrop subpackage.

Holds the request handler that admits claims and assembles the token
transfer.
"""

from duck_airdrop.airdrop.handler import AirdropHandler, transfer_amount

__all__: list[str] = [
    "AirdropHandler",
    "transfer_amount",
]
