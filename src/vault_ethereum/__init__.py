"""
vault-ethereum - Ethereum signer backed by HashiCorp Vault

Keeps private keys inside the vault-ethereum secrets plugin and signs
transactions and messages through Vault's HTTP API.
"""

__version__ = "0.1.0"

from vault_ethereum.auth import AuthenticationManager
from vault_ethereum.client import VaultClient
from vault_ethereum.config import SignerConfig
from vault_ethereum.exceptions import (
    AccountLookupError,
    AuthenticationError,
    AuthError,
    AuthMethodUnknownError,
    ConfigurationError,
    FromAddressMismatchError,
    IdentityDocumentUnavailableError,
    NotAuthenticatedError,
    NotConnectedError,
    RemoteSignError,
    SignatureError,
    SignatureVerificationError,
    SigningNotImplementedError,
    VaultEthereumError,
    VaultRequestError,
)
from vault_ethereum.provider import ChainProvider, Web3ChainProvider
from vault_ethereum.signer import VaultEthereumSigner
from vault_ethereum.types import (
    AuthSession,
    KubernetesAuth,
    TokenAuth,
    TransactionType,
    UnsignedTransaction,
    parse_credential,
)
from vault_ethereum.verify import verify_message, verify_typed_data

__all__ = [
    "__version__",
    # Signer
    "VaultEthereumSigner",
    "AuthenticationManager",
    "VaultClient",
    "SignerConfig",
    # Chain provider
    "ChainProvider",
    "Web3ChainProvider",
    # Types
    "AuthSession",
    "TokenAuth",
    "KubernetesAuth",
    "TransactionType",
    "UnsignedTransaction",
    "parse_credential",
    # Verification
    "verify_message",
    "verify_typed_data",
    # Exceptions
    "VaultEthereumError",
    "ConfigurationError",
    "NotConnectedError",
    "VaultRequestError",
    "AuthError",
    "AuthMethodUnknownError",
    "IdentityDocumentUnavailableError",
    "AuthenticationError",
    "AccountLookupError",
    "NotAuthenticatedError",
    "SignatureError",
    "FromAddressMismatchError",
    "RemoteSignError",
    "SigningNotImplementedError",
    "SignatureVerificationError",
]
