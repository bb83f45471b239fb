"""Configuration management for the faucet using Pydantic Settings."""

from pydantic import AnyHttpUrl, Field, SecretStr, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

WEI_PER_GWEI = 10**9
MAX_UINT256 = 2**256 - 1

_http_url = TypeAdapter(AnyHttpUrl)


class FaucetConfig(BaseSettings):
    """Faucet service configuration loaded from environment variables.

    Command-line flags are passed as init kwargs (by alias) and take
    precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # Network
    rpc_url: str = Field(default="http://localhost:8545", alias="FAUCET_RPC_URL")

    # Wallet
    private_key: SecretStr | None = Field(default=None, alias="FAUCET_PRIVATE_KEY")
    private_key_file: str | None = Field(default=None, alias="FAUCET_PRIVATE_KEY_FILE")

    # Dispense parameters
    tokens_per_request: int = Field(
        default=10**18, alias="FAUCET_TOKENS_PER_REQUEST", ge=0, le=MAX_UINT256
    )
    gas_price_gwei: int = Field(default=1, alias="FAUCET_GAS_PRICE_GWEI", ge=0)
    gas_limit: int = Field(default=21000, alias="FAUCET_GAS_LIMIT", gt=0)

    # Server
    host: str = Field(default="127.0.0.1", alias="FAUCET_HOST")
    port: int = Field(default=5556, alias="FAUCET_PORT", ge=1, le=65535)

    # Observability
    log_level: str = Field(default="INFO", alias="FAUCET_LOG_LEVEL")
    log_format: str = Field(default="json", alias="FAUCET_LOG_FORMAT")

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, value: str) -> str:
        try:
            _http_url.validate_python(value)
        except ValidationError:
            raise ValueError(f"Invalid RPC URL: {value!r}") from None
        return value

    @property
    def gas_price_wei(self) -> int:
        """Gas price converted from gwei to wei."""
        return self.gas_price_gwei * WEI_PER_GWEI


def load_config(**overrides) -> FaucetConfig:
    """Build the config, letting non-None overrides win over the environment.

    Parameters
    ----------
    **overrides
        Field names mapped to values, typically parsed command-line flags.

    Returns
    -------
    FaucetConfig
        The validated configuration.

    Raises
    ------
    pydantic.ValidationError
        If any value fails validation.
    """
    kwargs = {
        FaucetConfig.model_fields[name].alias: value
        for name, value in overrides.items()
        if value is not None
    }
    return FaucetConfig(**kwargs)
