"""
AuthenticationManager - Vault login and account address resolution
"""

import logging
from pathlib import Path
from typing import Any, Union

from eth_utils import is_address, to_checksum_address
from pydantic import ValidationError

from vault_ethereum.client import VaultClient
from vault_ethereum.exceptions import (
    AccountLookupError,
    AuthenticationError,
    AuthMethodUnknownError,
    IdentityDocumentUnavailableError,
    VaultRequestError,
)
from vault_ethereum.types import (
    AccountData,
    AuthResponse,
    AuthSession,
    KubernetesAuth,
    TokenAuth,
    parse_credential,
)

logger = logging.getLogger(__name__)


class AuthenticationManager:
    """
    Turns a credential into a Vault token and resolves the account address.

    Authentication is two sequential calls: login (skipped for token auth),
    then an account read with the obtained token. Nothing is cached between
    calls or shared between managers.
    """

    def __init__(self, client: VaultClient) -> None:
        self._client = client

    async def authenticate(self, credential: Union[TokenAuth, KubernetesAuth, dict]) -> AuthSession:
        """
        Log in and resolve the configured account's address.

        Args:
            credential: TokenAuth, KubernetesAuth or an equivalent mapping

        Returns:
            AuthSession with both token and address populated

        Raises:
            AuthMethodUnknownError: Unsupported credential method
            IdentityDocumentUnavailableError: Service account token unreadable
            AuthenticationError: Login produced no token
            AccountLookupError: Account read produced no address
        """
        credential = parse_credential(credential)
        token = await self.get_token(credential)
        address = await self.resolve_address(token)
        logger.info(
            f"Vault authentication succeeded: method={credential.method}, "
            f"account={self._client.config.account_id}, address={address}"
        )
        return AuthSession(method=credential.method, token=token, address=address)

    async def get_token(self, credential: Union[TokenAuth, KubernetesAuth, dict]) -> str:
        """Obtain a Vault token for the credential without touching any account."""
        credential = parse_credential(credential)

        if isinstance(credential, TokenAuth):
            token = credential.token
        elif isinstance(credential, KubernetesAuth):
            token = await self._login_kubernetes(credential)
        else:
            raise AuthMethodUnknownError(getattr(credential, "method", None))

        if not token:
            raise AuthenticationError(f"Vault authentication method {credential.method} failed")
        return token

    async def _login_kubernetes(self, credential: KubernetesAuth) -> str | None:
        jwt = read_identity_document(credential.jwt_path)
        auth_path = credential.auth_plugin_path or self._client.config.kube_auth_path

        logger.info(f"Logging in to Vault via auth/{auth_path}: role={credential.role}")
        try:
            body = await self._client.login_kubernetes(auth_path, jwt, credential.role)
        except VaultRequestError as e:
            raise AuthenticationError(f"Vault kubernetes login failed: {e}") from e

        return _parse_auth(body).client_token

    async def resolve_address(self, token: str) -> str:
        """Read the configured account with the token and return its checksum address."""
        account_id = self._client.config.account_id
        try:
            body = await self._client.read_account(token, account_id)
        except VaultRequestError as e:
            raise AccountLookupError(account_id, str(e)) from e

        try:
            address = AccountData.model_validate(body.get("data") or {}).address
        except ValidationError:
            raise AccountLookupError(account_id, "response carries no address")

        if not is_address(address):
            raise AccountLookupError(account_id, f"invalid address {address!r}")
        return to_checksum_address(address)


def read_identity_document(path: str) -> str:
    """Read the mounted Kubernetes service account JWT."""
    try:
        jwt = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise IdentityDocumentUnavailableError(path, e.strerror or str(e)) from e
    if not jwt.strip():
        raise IdentityDocumentUnavailableError(path, "file is empty")
    return jwt


def _parse_auth(body: dict[str, Any]) -> AuthResponse:
    auth = body.get("auth")
    if not isinstance(auth, dict):
        raise AuthenticationError("Vault login response carries no auth block")
    try:
        return AuthResponse.model_validate(auth)
    except ValidationError as e:
        raise AuthenticationError(f"Vault login response is malformed: {e}") from e
