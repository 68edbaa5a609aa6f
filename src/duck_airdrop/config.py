"""Application configuration for the DUCK airdrop service.

Reads runtime settings from environment variables with sensible defaults.
All configuration is centralised here; no other module reads os.environ directly.
"""

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings

#: Public Solana mainnet RPC endpoint used when ``RPC_URL`` is unset.
DEFAULT_RPC_URL: str = "https://api.mainnet-beta.solana.com"

#: Largest amount an SPL token transfer instruction can carry (u64).
MAX_TRANSFER_UNITS: int = 2**64 - 1


class AppConfig(BaseSettings):
    """Process-wide configuration loaded once at startup.

    Instances are frozen: nothing may mutate the configuration after the
    application has been built.

    Attributes:
        wallet_private_key: Signing credential of the distributing wallet,
            a JSON array of 64 integers (solana-keygen format).
        token_mint_address: Mint address of the SPL token being distributed.
        rpc_url: Solana JSON-RPC endpoint.
        token_decimals: Smallest-unit exponent of the token.
        airdrop_amount: Whole tokens sent per successful claim.
        token_symbol: Ticker used in the success message.
        rpc_timeout_sec: Timeout applied by the RPC client to each request.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        enable_docs: Serve the OpenAPI schema and docs pages. Those routes
            are answered outside the claim endpoint's method and CORS
            handling.
    """

    wallet_private_key: SecretStr
    token_mint_address: str = Field(min_length=1)
    rpc_url: str = DEFAULT_RPC_URL
    token_decimals: int = Field(default=6, ge=0, le=18)
    airdrop_amount: int = Field(default=25000, gt=0)
    token_symbol: str = "DUCK"
    rpc_timeout_sec: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"
    enable_docs: bool = False

    model_config = {"env_prefix": "", "case_sensitive": False, "frozen": True}

    @field_validator("rpc_url")
    @classmethod
    def validate_rpc_url(cls, v: str) -> str:
        """Fall back to the public mainnet endpoint when ``RPC_URL`` is blank."""
        return v.strip() or DEFAULT_RPC_URL

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is one of the accepted Python logging levels.

        Args:
            v: The raw log level string from the environment.

        Returns:
            The uppercased log level string if valid.

        Raises:
            ValueError: If the value is not a recognised logging level.
        """
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}; got {v!r}")
        return upper

    @model_validator(mode="after")
    def validate_transfer_fits_u64(self) -> "AppConfig":
        """Reject amount/decimals pairs whose smallest-unit total overflows u64.

        Raises:
            ValueError: If ``airdrop_amount * 10**token_decimals`` exceeds
                :data:`MAX_TRANSFER_UNITS`.
        """
        units = self.airdrop_amount * 10**self.token_decimals
        if units > MAX_TRANSFER_UNITS:
            raise ValueError(
                f"airdrop_amount={self.airdrop_amount} with token_decimals="
                f"{self.token_decimals} is {units} smallest units, above the "
                f"u64 maximum {MAX_TRANSFER_UNITS}"
            )
        return self


def get_config() -> AppConfig:
    """Return the application configuration, resolved from environment variables.

    Environment variables read (case-insensitive):
        WALLET_PRIVATE_KEY: Distributor signing key (required).
        TOKEN_MINT_ADDRESS: SPL token mint (required).
        RPC_URL: Solana RPC endpoint (default: public mainnet).
        TOKEN_DECIMALS: Token decimals (default: ``6``).
        AIRDROP_AMOUNT: Whole tokens per claim (default: ``25000``).
        TOKEN_SYMBOL: Token ticker (default: ``DUCK``).
        RPC_TIMEOUT_SEC: RPC request timeout (default: ``30``).
        LOG_LEVEL: Logging verbosity level (default: ``INFO``).
        ENABLE_DOCS: Serve ``/docs``, ``/redoc`` and ``/openapi.json``
            (default: ``false``).

    Returns:
        An :class:`AppConfig` instance populated from the environment.

    Raises:
        pydantic.ValidationError: If a required variable is missing or a
            value fails validation.
    """
    return AppConfig(
        _env_file=".env",
        _env_file_encoding="utf-8",
    )
