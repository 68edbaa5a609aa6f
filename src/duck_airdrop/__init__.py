"""DUCK Airdrop: one-time SPL token distribution over HTTP.

This package provides a single claim endpoint: it validates a wallet
address, admits each address at most once, and sends a fixed amount of the
configured SPL token to the wallet's associated token account.
"""

__version__ = "0.1.0"
__all__: list[str] = []
