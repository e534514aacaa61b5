"""Application settings using Pydantic for environment-based configuration."""
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopify_payment_sync.exceptions import ConfigurationError


class SyncConfig(BaseModel):
    """
    Immutable configuration handed to the reconciliation entry point.

    Built from Settings once per trigger so the algorithm never reads
    ambient configuration while it runs.
    """

    model_config = ConfigDict(frozen=True)

    shop_name: str = ""
    api_version: str = ""
    access_token: str = ""
    paypal_mop_id: int = 0
    enable_debug_log: bool = False

    def missing_shop_option(self) -> str | None:
        """Return the first missing Shopify option name, if any."""
        if not self.shop_name.strip():
            return "shop_name"
        if not self.api_version.strip():
            return "api_version"
        if not self.access_token.strip():
            return "access_token"
        return None

    def validate_complete(self) -> None:
        """
        Check that every option needed for a reconciliation run is present.

        Raises:
            ConfigurationError: If shop credentials or the PayPal mop id are missing
        """
        missing = self.missing_shop_option()
        if missing is not None:
            raise ConfigurationError(f"Missing required option: {missing}", key=missing)

        if self.paypal_mop_id <= 0:
            raise ConfigurationError(
                "PayPal method of payment id must be a positive integer",
                key="paypal_mop_id",
            )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Shopify Configuration
    shop_name: str = Field(default="", description="Shopify shop name (<shop>.myshopify.com)")
    api_version: str = Field(default="2025-01", description="Shopify Admin API version")
    access_token: str = Field(default="", description="Shopify Admin API access token")

    # plentymarkets Configuration
    plenty_base_url: str = Field(default="", description="plentymarkets system URL")
    plenty_api_token: str = Field(default="", description="plentymarkets REST bearer token")
    paypal_mop_id: int = Field(default=0, description="Method of payment id used for PayPal")

    # HTTP Configuration
    http_timeout: float = Field(default=20.0, description="Outbound HTTP timeout (seconds)")

    # Application Configuration
    app_name: str = Field(default="shopify-payment-sync", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Render logs as JSON")
    enable_debug_log: bool = Field(
        default=False, description="Log skipped orders at info level"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    model_config = SettingsConfigDict(
        env_prefix="SHOPIFY_PAYMENT_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("shop_name", "api_version", "access_token", "plenty_base_url")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Trim surrounding whitespace from string options."""
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        """Timeouts must be bounded and positive."""
        if v <= 0:
            raise ValueError("http_timeout must be positive")
        return v

    def sync_config(self) -> SyncConfig:
        """Snapshot the options the reconciliation run depends on."""
        return SyncConfig(
            shop_name=self.shop_name,
            api_version=self.api_version,
            access_token=self.access_token,
            paypal_mop_id=self.paypal_mop_id,
            enable_debug_log=self.enable_debug_log,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
