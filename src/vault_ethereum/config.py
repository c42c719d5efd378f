"""
Vault Ethereum signer configuration
Centralized defaults for the Vault endpoint and plugin mount paths
"""

import os

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from vault_ethereum.exceptions import ConfigurationError

DEFAULT_ENDPOINT = "http://localhost:8200"
DEFAULT_PLUGIN_PATH = "vault-ethereum"
DEFAULT_KUBE_AUTH_PATH = "kubernetes"
DEFAULT_TIMEOUT = 30.0

# Projected service account token mounted into every pod
KUBERNETES_JWT_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"


class SignerConfig(BaseModel):
    """Connection settings for one Vault Ethereum account"""

    account_id: str = Field(alias="accountId")
    endpoint: str = DEFAULT_ENDPOINT
    plugin_path: str = Field(DEFAULT_PLUGIN_PATH, alias="pluginPath")
    kube_auth_path: str = Field(DEFAULT_KUBE_AUTH_PATH, alias="kubeAuthPath")
    timeout: float = DEFAULT_TIMEOUT

    class Config:
        populate_by_name = True
        frozen = True

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid signer configuration: {e}") from e

    @field_validator("account_id")
    @classmethod
    def _require_account_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("account_id must not be empty")
        return value

    @field_validator("endpoint", mode="before")
    @classmethod
    def _normalize_endpoint(cls, value: str | None) -> str:
        if not value:
            return DEFAULT_ENDPOINT
        return str(value).rstrip("/")

    @field_validator("plugin_path", "kube_auth_path", mode="before")
    @classmethod
    def _normalize_mount(cls, value: str | None, info: ValidationInfo) -> str:
        if not value:
            if info.field_name == "plugin_path":
                return DEFAULT_PLUGIN_PATH
            return DEFAULT_KUBE_AUTH_PATH
        return str(value).strip("/")

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than 0")
        return value

    @property
    def plugin_url(self) -> str:
        """Base URL of the secrets plugin mount"""
        return f"{self.endpoint}/v1/{self.plugin_path}"

    @property
    def account_url(self) -> str:
        """URL of the configured account"""
        return f"{self.plugin_url}/accounts/{self.account_id}"

    @classmethod
    def from_env(cls, account_id: str | None = None) -> "SignerConfig":
        """Build configuration from environment variables.

        Reads VAULT_ADDR, VAULT_ETHEREUM_PLUGIN_PATH, VAULT_KUBERNETES_AUTH_PATH,
        VAULT_ETHEREUM_ACCOUNT and VAULT_TIMEOUT.

        Args:
            account_id: Account name, overrides VAULT_ETHEREUM_ACCOUNT

        Raises:
            ConfigurationError: If the account is missing or a value is invalid
        """
        account = account_id or os.getenv("VAULT_ETHEREUM_ACCOUNT", "")
        if not account.strip():
            raise ConfigurationError("VAULT_ETHEREUM_ACCOUNT environment variable not set")

        raw_timeout = os.getenv("VAULT_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"VAULT_TIMEOUT must be a number, got {raw_timeout!r}")

        return cls(
            account_id=account,
            endpoint=os.getenv("VAULT_ADDR", DEFAULT_ENDPOINT),
            plugin_path=os.getenv("VAULT_ETHEREUM_PLUGIN_PATH", DEFAULT_PLUGIN_PATH),
            kube_auth_path=os.getenv("VAULT_KUBERNETES_AUTH_PATH", DEFAULT_KUBE_AUTH_PATH),
            timeout=timeout,
        )
