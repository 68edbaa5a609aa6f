"""Unit tests for AppConfig environment loading and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from duck_airdrop.config import DEFAULT_RPC_URL, MAX_TRANSFER_UNITS, AppConfig

_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
_ENV_VARS = (
    "WALLET_PRIVATE_KEY",
    "TOKEN_MINT_ADDRESS",
    "RPC_URL",
    "TOKEN_DECIMALS",
    "AIRDROP_AMOUNT",
    "TOKEN_SYMBOL",
    "RPC_TIMEOUT_SEC",
    "LOG_LEVEL",
    "ENABLE_DOCS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WALLET_PRIVATE_KEY", "[1,2,3]")
    monkeypatch.setenv("TOKEN_MINT_ADDRESS", _MINT)


class TestDefaults:
    def test_defaults(self, required_env: None) -> None:
        cfg = AppConfig()
        assert cfg.rpc_url == DEFAULT_RPC_URL
        assert cfg.token_decimals == 6
        assert cfg.airdrop_amount == 25000
        assert cfg.token_symbol == "DUCK"
        assert cfg.log_level == "INFO"
        assert cfg.token_mint_address == _MINT

    def test_blank_rpc_url_falls_back_to_mainnet(
        self, required_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RPC_URL", "  ")
        assert AppConfig().rpc_url == DEFAULT_RPC_URL

    def test_env_overrides(self, required_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RPC_URL", "https://api.devnet.solana.com")
        monkeypatch.setenv("TOKEN_DECIMALS", "9")
        monkeypatch.setenv("log_level", "debug")
        cfg = AppConfig()
        assert cfg.rpc_url == "https://api.devnet.solana.com"
        assert cfg.token_decimals == 9
        assert cfg.log_level == "DEBUG"


class TestValidation:
    def test_missing_private_key_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKEN_MINT_ADDRESS", _MINT)
        with pytest.raises(ValidationError):
            AppConfig()

    def test_missing_mint_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "[1,2,3]")
        with pytest.raises(ValidationError):
            AppConfig()

    def test_invalid_log_level_fails(
        self, required_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")
        with pytest.raises(ValidationError):
            AppConfig()

    @pytest.mark.parametrize("decimals", ["-1", "19"])
    def test_decimals_out_of_range_fails(
        self, decimals: str, required_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TOKEN_DECIMALS", decimals)
        with pytest.raises(ValidationError):
            AppConfig()

    def test_transfer_overflowing_u64_fails_at_startup(
        self, required_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # 25000 * 10**15 = 2.5e19 > 2**64 - 1
        monkeypatch.setenv("TOKEN_DECIMALS", "15")
        with pytest.raises(ValidationError, match="u64"):
            AppConfig()

    def test_transfer_at_u64_boundary_is_accepted(self, required_env: None) -> None:
        cfg = AppConfig(airdrop_amount=MAX_TRANSFER_UNITS, token_decimals=0)
        assert cfg.airdrop_amount * 10**cfg.token_decimals == MAX_TRANSFER_UNITS

    def test_transfer_one_past_u64_boundary_fails(self, required_env: None) -> None:
        with pytest.raises(ValidationError):
            AppConfig(airdrop_amount=MAX_TRANSFER_UNITS + 1, token_decimals=0)

    def test_docs_disabled_by_default(self, required_env: None) -> None:
        assert AppConfig().enable_docs is False


class TestImmutabilityAndSecrecy:
    def test_config_is_frozen(self, required_env: None) -> None:
        cfg = AppConfig()
        with pytest.raises(ValidationError):
            cfg.rpc_url = "https://example.invalid"  # type: ignore[misc]

    def test_private_key_hidden_from_repr(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "super-secret-key-material")
        monkeypatch.setenv("TOKEN_MINT_ADDRESS", _MINT)
        cfg = AppConfig()
        assert "super-secret-key-material" not in repr(cfg)
        assert "super-secret-key-material" not in str(cfg.model_dump())
        assert cfg.wallet_private_key.get_secret_value() == "super-secret-key-material"
