"""
Chain RPC collaborator used by the Vault signer
"""

import logging
from typing import Any, Protocol, Union, runtime_checkable

from hexbytes import HexBytes

logger = logging.getLogger(__name__)


@runtime_checkable
class ChainProvider(Protocol):
    """Subset of node RPC the signer relies on"""

    async def get_chain_id(self) -> int: ...

    async def get_gas_price(self) -> int: ...

    async def get_transaction_count(
        self, address: str, block_identifier: str = "latest"
    ) -> int: ...

    async def send_raw_transaction(self, raw_transaction: Union[str, bytes]) -> str: ...


class Web3ChainProvider:
    """ChainProvider backed by web3.py's AsyncWeb3"""

    def __init__(self, web3_or_url: Any) -> None:
        """
        Args:
            web3_or_url: An AsyncWeb3 instance or an HTTP(S) RPC URL
        """
        if isinstance(web3_or_url, str):
            web3_or_url = self._create_web3(web3_or_url)
        self._w3 = web3_or_url

    @staticmethod
    def _create_web3(rpc_url: str) -> Any:
        from web3 import AsyncHTTPProvider, AsyncWeb3
        from web3.middleware import ExtraDataToPOAMiddleware

        if not rpc_url.startswith(("http://", "https://")):
            raise ValueError(f"Unsupported RPC URL: {rpc_url}")

        w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        logger.info(f"Created AsyncWeb3 provider for {rpc_url}")
        return w3

    @property
    def web3(self) -> Any:
        return self._w3

    async def get_chain_id(self) -> int:
        return int(await self._w3.eth.chain_id)

    async def get_gas_price(self) -> int:
        return int(await self._w3.eth.gas_price)

    async def get_transaction_count(self, address: str, block_identifier: str = "latest") -> int:
        return int(await self._w3.eth.get_transaction_count(address, block_identifier))

    async def send_raw_transaction(self, raw_transaction: Union[str, bytes]) -> str:
        tx_hash = await self._w3.eth.send_raw_transaction(HexBytes(raw_transaction))
        return HexBytes(tx_hash).to_0x_hex()
