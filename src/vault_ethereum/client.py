"""
VaultClient - Client for the Vault HTTP API and the vault-ethereum plugin
"""

import logging
from typing import Any

import httpx

from vault_ethereum.config import SignerConfig
from vault_ethereum.exceptions import VaultRequestError

logger = logging.getLogger(__name__)


class VaultClient:
    """
    Client for communicating with Vault.

    Handles login, account read/list/create and the plugin's sign endpoints.
    Every non-2xx answer is raised as VaultRequestError; no retries are made.
    """

    def __init__(
        self,
        config: SignerConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize Vault client.

        Args:
            config: Signer configuration (endpoint, mount paths, timeout)
            http_client: Externally owned httpx.AsyncClient (optional)
        """
        self._config = config
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def config(self) -> SignerConfig:
        return self._config

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self._config.endpoint,
                headers={"Accept": "application/json"},
                timeout=self._config.timeout,
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client if this instance created it"""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send one request to Vault and decode the JSON body.

        Args:
            method: HTTP verb, including Vault's LIST
            path: Path below the endpoint, starting with /v1/
            token: Vault token sent as a bearer credential
            payload: JSON body

        Returns:
            Decoded response body ({} for an empty body)

        Raises:
            VaultRequestError: On transport failure, non-2xx status or invalid JSON
        """
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {token}"} if token else None
        url = f"{self._config.endpoint}{path}"

        logger.debug(f"Vault request: {method} {path}")
        try:
            response = await client.request(method, url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise VaultRequestError(method, path, None, str(e)) from e

        if response.is_error:
            raise VaultRequestError(
                method, path, response.status_code, self._error_detail(response)
            )

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise VaultRequestError(method, path, response.status_code, "invalid JSON body") from e
        if not isinstance(body, dict):
            raise VaultRequestError(method, path, response.status_code, "unexpected JSON body")
        return body

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            errors = response.json().get("errors")
        except (ValueError, AttributeError):
            return response.text[:500]
        if errors:
            return "; ".join(str(e) for e in errors)
        return ""

    def _account_path(self, account_id: str, action: str | None = None) -> str:
        path = f"/v1/{self._config.plugin_path}/accounts/{account_id}"
        if action:
            path = f"{path}/{action}"
        return path

    async def login_kubernetes(self, auth_path: str, jwt: str, role: str) -> dict[str, Any]:
        """POST /v1/auth/{auth_path}/login"""
        return await self.request(
            "POST", f"/v1/auth/{auth_path.strip('/')}/login", payload={"jwt": jwt, "role": role}
        )

    async def read_account(self, token: str, account_id: str) -> dict[str, Any]:
        """GET /v1/{plugin}/accounts/{account_id}"""
        return await self.request("GET", self._account_path(account_id), token=token)

    async def create_account(
        self, token: str, account_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """POST /v1/{plugin}/accounts/{account_id}"""
        return await self.request(
            "POST", self._account_path(account_id), token=token, payload=payload
        )

    async def list_accounts(self, token: str, path_prefix: str = "") -> dict[str, Any]:
        """LIST /v1/{plugin}/accounts/{path_prefix}"""
        return await self.request("LIST", self._account_path(path_prefix.strip("/")), token=token)

    async def sign(
        self, token: str, account_id: str, endpoint: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """POST /v1/{plugin}/accounts/{account_id}/{endpoint}"""
        return await self.request(
            "POST", self._account_path(account_id, endpoint), token=token, payload=payload
        )
