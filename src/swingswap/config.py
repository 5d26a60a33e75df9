"""Application configuration using pydantic-settings.

Holds one signing key per chain family plus the network endpoints used
to finalize swap transactions.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(
        default=3002,
        validation_alias=AliasChoices("PORT", "API_PORT"),
        description="API server port",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Signing keys
    # ======================
    evm_private_key: Optional[str] = Field(
        default=None, description="Hex private key used for EVM transactions"
    )
    sol_private_key: Optional[str] = Field(
        default=None, description="Base58 64-byte Solana keypair secret"
    )

    # ======================
    # Chain RPC Endpoints
    # ======================
    evm_rpc_url: str = Field(
        default="https://eth.llamarpc.com",
        validation_alias=AliasChoices("EVM_RPC_URL", "INFURA_EMV_RPC"),
        description="EVM JSON-RPC URL",
    )
    sol_rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com", description="Solana RPC URL"
    )
    evm_confirmation_timeout: int = Field(
        default=120, description="Seconds to wait for an EVM receipt"
    )
    sol_commitment: str = Field(
        default="confirmed", description="Commitment level for Solana confirmation"
    )

    # ======================
    # Aggregator
    # ======================
    swing_api_url: str = Field(
        default="https://swap.prod.swing.xyz/v0/transfer",
        description="Swing transfer API base URL",
    )
    aggregator_timeout: float = Field(
        default=30.0, description="Timeout in seconds for aggregator requests"
    )

    # ======================
    # Routing
    # ======================
    strict_chain_routing: bool = Field(
        default=False,
        description="Reject chain identifiers that are not explicitly known",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def has_evm_key(self) -> bool:
        return bool(self.evm_private_key)

    @property
    def has_sol_key(self) -> bool:
        return bool(self.sol_private_key)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "keys": {
                "evm": "***" if self.has_evm_key else "(not set)",
                "solana": "***" if self.has_sol_key else "(not set)",
            },
            "chains": {
                "evm": {"rpc": self.evm_rpc_url, "confirmation_timeout": self.evm_confirmation_timeout},
                "solana": {"rpc": self.sol_rpc_url, "commitment": self.sol_commitment},
            },
            "aggregator": {
                "url": self.swing_api_url,
                "timeout": self.aggregator_timeout,
            },
            "strict_chain_routing": self.strict_chain_routing,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
