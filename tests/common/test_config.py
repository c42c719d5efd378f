"""
SignerConfig tests
"""

import pytest
from pydantic import ValidationError

from vault_ethereum import ConfigurationError, SignerConfig
from vault_ethereum.config import DEFAULT_ENDPOINT, DEFAULT_KUBE_AUTH_PATH, DEFAULT_PLUGIN_PATH


def test_defaults_applied():
    """Only account_id is required"""
    config = SignerConfig(account_id="test")

    assert config.endpoint == DEFAULT_ENDPOINT
    assert config.plugin_path == DEFAULT_PLUGIN_PATH
    assert config.kube_auth_path == DEFAULT_KUBE_AUTH_PATH
    assert config.account_url == "http://localhost:8200/v1/vault-ethereum/accounts/test"


def test_camel_case_aliases():
    config = SignerConfig(
        accountId="ops",
        endpoint="https://vault.example.com:8200/",
        pluginPath="/ethereum/",
        kubeAuthPath="k8s",
    )

    assert config.account_id == "ops"
    assert config.endpoint == "https://vault.example.com:8200"
    assert config.plugin_path == "ethereum"
    assert config.kube_auth_path == "k8s"


def test_empty_values_fall_back_to_defaults():
    config = SignerConfig(account_id="test", endpoint="", plugin_path=None)

    assert config.endpoint == DEFAULT_ENDPOINT
    assert config.plugin_path == DEFAULT_PLUGIN_PATH


@pytest.mark.parametrize("account_id", ["", "   "])
def test_empty_account_rejected(account_id):
    with pytest.raises(ConfigurationError):
        SignerConfig(account_id=account_id)


def test_missing_account_rejected():
    with pytest.raises(ConfigurationError):
        SignerConfig(endpoint="http://vault:8200")


def test_non_positive_timeout_rejected():
    with pytest.raises(ConfigurationError):
        SignerConfig(account_id="test", timeout=0)


def test_config_is_immutable():
    config = SignerConfig(account_id="test")

    with pytest.raises(ValidationError):
        config.account_id = "other"


def test_from_env(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "https://vault.internal:8200")
    monkeypatch.setenv("VAULT_ETHEREUM_PLUGIN_PATH", "eth")
    monkeypatch.setenv("VAULT_KUBERNETES_AUTH_PATH", "kubernetes-prod")
    monkeypatch.setenv("VAULT_ETHEREUM_ACCOUNT", "treasury")
    monkeypatch.setenv("VAULT_TIMEOUT", "5")

    config = SignerConfig.from_env()

    assert config.endpoint == "https://vault.internal:8200"
    assert config.plugin_path == "eth"
    assert config.kube_auth_path == "kubernetes-prod"
    assert config.account_id == "treasury"
    assert config.timeout == 5.0


def test_from_env_account_argument_overrides(monkeypatch):
    monkeypatch.setenv("VAULT_ETHEREUM_ACCOUNT", "treasury")

    assert SignerConfig.from_env("hot-wallet").account_id == "hot-wallet"


def test_from_env_requires_account(monkeypatch):
    monkeypatch.delenv("VAULT_ETHEREUM_ACCOUNT", raising=False)

    with pytest.raises(ConfigurationError):
        SignerConfig.from_env()


def test_from_env_rejects_bad_timeout(monkeypatch):
    monkeypatch.setenv("VAULT_ETHEREUM_ACCOUNT", "treasury")
    monkeypatch.setenv("VAULT_TIMEOUT", "soon")

    with pytest.raises(ConfigurationError):
        SignerConfig.from_env()
