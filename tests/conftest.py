"""
Pytest configuration and shared fixtures
"""

import json
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from vault_ethereum import SignerConfig, VaultEthereumSigner

TEST_PRIVATE_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_ADDRESS = "0xFCAd0B19bB29D4674531d6f115237E16AfCE377c"
TEST_ACCOUNT = "test"
TEST_TOKEN = "root"
ACCOUNT_PATH = f"/v1/vault-ethereum/accounts/{TEST_ACCOUNT}"

Route = Callable[[httpx.Request], httpx.Response]


class FakeVault:
    """In-memory stand-in for the Vault HTTP API, served through httpx.MockTransport"""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Route] = {}

    def route(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        status_code: int = 200,
        handler: Route | None = None,
    ) -> None:
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status_code, json=json_body)

        self._routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"errors": []})
        return handler(request)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]

    @staticmethod
    def body(request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content)


@pytest.fixture
def mock_evm_private_key():
    """Key whose address the fake Vault account resolves to"""
    return TEST_PRIVATE_KEY


@pytest.fixture
def vault():
    """Fake Vault with the test account readable"""
    fake = FakeVault()
    fake.route("GET", ACCOUNT_PATH, {"data": {"address": TEST_ADDRESS.lower()}})
    return fake


@pytest.fixture
def http_client(vault):
    return httpx.AsyncClient(transport=httpx.MockTransport(vault.handle))


@pytest.fixture
def config():
    return SignerConfig(account_id=TEST_ACCOUNT)


@pytest.fixture
def mock_provider():
    provider = MagicMock()
    provider.get_chain_id = AsyncMock(return_value=1337)
    provider.get_gas_price = AsyncMock(return_value=20_000_000_000)
    provider.get_transaction_count = AsyncMock(return_value=7)
    provider.send_raw_transaction = AsyncMock(return_value="0x" + "ab" * 32)
    return provider


@pytest.fixture
def signer(config, mock_provider, http_client):
    return VaultEthereumSigner(config, mock_provider, http_client=http_client)


@pytest.fixture
async def authenticated_signer(signer, anyio_backend):
    await signer.authenticate({"method": "token", "token": TEST_TOKEN})
    return signer
