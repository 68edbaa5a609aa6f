"""FastAPI application factory for the DUCK airdrop service.

Exposes a :func:`create_app` factory function that instantiates the
:class:`fastapi.FastAPI` application, wires up the dependency-injected
components (:class:`~duck_airdrop.ledger.client.LedgerClient`,
:class:`~duck_airdrop.registry.claims.ClaimRegistry`,
:class:`~duck_airdrop.airdrop.handler.AirdropHandler`), and registers the
router defined in :mod:`duck_airdrop.api.routes`.

Usage::

    # Production startup (uvicorn)
    uvicorn duck_airdrop.api.main:create_app --factory --host 0.0.0.0 --port 8000

    # Testing: pass a config and a ledger double
    from duck_airdrop.api.main import create_app
    app = create_app(config=cfg, ledger=fake_ledger)

Configuration is read once, here, and passed explicitly to every
component.  Components are attached to ``app.state`` so that route handlers
can retrieve them via ``request.app.state``.
"""

from __future__ import annotations

import importlib.metadata
import logging

from fastapi import FastAPI

from duck_airdrop.airdrop.handler import AirdropHandler
from duck_airdrop.api.routes import router
from duck_airdrop.config import AppConfig, get_config
from duck_airdrop.ledger.client import LedgerClient, SolanaLedgerClient, load_keypair
from duck_airdrop.registry.claims import ClaimRegistry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    config: AppConfig | None = None,
    ledger: LedgerClient | None = None,
    registry: ClaimRegistry | None = None,
    handler: AirdropHandler | None = None,
) -> FastAPI:
    """Create and configure the airdrop FastAPI application.

    Parameters
    ----------
    config:
        Pre-built :class:`~duck_airdrop.config.AppConfig`.  If ``None`` it is
        read from the environment via :func:`~duck_airdrop.config.get_config`.
    ledger:
        Pre-built ledger client.  If ``None``, a
        :class:`~duck_airdrop.ledger.client.SolanaLedgerClient` is connected
        to ``config.rpc_url`` and signs with ``config.wallet_private_key``.
    registry:
        Claim registry shared by all requests.  If ``None``, a fresh empty
        registry is created.
    handler:
        Pre-built handler.  If provided, *ledger* and *registry* are ignored.

    Returns
    -------
    FastAPI
        A fully-configured application instance with the claim route
        registered and dependencies attached to ``app.state``.
    """
    if config is None:
        config = get_config()
    logging.getLogger("duck_airdrop").setLevel(config.log_level)

    docs_enabled = config.enable_docs
    app = FastAPI(
        title="DUCK Airdrop API",
        description=(
            f"Sends {config.airdrop_amount} {config.token_symbol} to each "
            "Solana wallet address, once per address."
        ),
        version=_get_version(),
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    if handler is None:
        if ledger is None:
            ledger = _build_ledger(config)
        if registry is None:
            registry = ClaimRegistry()
        handler = AirdropHandler(config=config, ledger=ledger, registry=registry)
        logger.info(
            "AirdropHandler initialised (mint=%s, amount=%d)",
            config.token_mint_address,
            handler.amount,
        )

    app.state.config = config
    app.state.handler = handler

    app.include_router(router)

    return app


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _get_version() -> str:
    """Return the installed package version, or ``"unknown"`` if not installed."""
    try:
        return importlib.metadata.version("duck-airdrop")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def _build_ledger(config: AppConfig) -> SolanaLedgerClient:
    """Build the default :class:`~duck_airdrop.ledger.client.SolanaLedgerClient`.

    Parameters
    ----------
    config:
        Application configuration supplying the RPC URL, signing key and
        timeout.

    Returns
    -------
    SolanaLedgerClient
        A client connected to ``config.rpc_url``.
    """
    return SolanaLedgerClient(
        rpc_url=config.rpc_url,
        signer=load_keypair(config.wallet_private_key),
        timeout_sec=config.rpc_timeout_sec,
    )
