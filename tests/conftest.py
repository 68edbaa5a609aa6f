"""Shared fixtures built on the doubles in :mod:`fakes`."""

from __future__ import annotations

import pytest
from fakes import FakeLedgerClient, make_config

from duck_airdrop.config import AppConfig
from duck_airdrop.registry.claims import ClaimRegistry


@pytest.fixture
def config() -> AppConfig:
    return make_config()


@pytest.fixture
def ledger() -> FakeLedgerClient:
    return FakeLedgerClient()


@pytest.fixture
def registry() -> ClaimRegistry:
    return ClaimRegistry()
