"""
VaultEthereumSigner - Ethereum signer backed by the vault-ethereum plugin
"""

import logging
from typing import Any, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from vault_ethereum.auth import AuthenticationManager
from vault_ethereum.client import VaultClient
from vault_ethereum.config import SignerConfig
from vault_ethereum.exceptions import (
    FromAddressMismatchError,
    NotAuthenticatedError,
    NotConnectedError,
    RemoteSignError,
    SigningNotImplementedError,
    VaultRequestError,
)
from vault_ethereum.provider import ChainProvider
from vault_ethereum.transaction import (
    SIGN_MESSAGE_ENDPOINT,
    as_unsigned_transaction,
    build_sign_request,
    is_fee_market,
)
from vault_ethereum.types import (
    AccountData,
    AccountList,
    AuthSession,
    CreateAccountRequest,
    KubernetesAuth,
    MessageSignature,
    SignedTransaction,
    SignMessageRequest,
    TokenAuth,
    UnsignedTransaction,
    parse_credential,
)

logger = logging.getLogger(__name__)

CredentialLike = Union[TokenAuth, KubernetesAuth, dict]


class VaultEthereumSigner:
    """
    Ethereum signer whose private key never leaves Vault.

    A signer starts unauthenticated. ``authenticate`` logs in and resolves the
    account address; only then can transactions and messages be signed. The
    session belongs to this instance; ``connect_account`` builds a separate,
    separately authenticated signer.
    """

    def __init__(
        self,
        config: SignerConfig,
        provider: Optional[ChainProvider] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Args:
            config: Vault endpoint, mount paths and account name
            provider: Chain RPC collaborator (chain id, gas price, broadcast)
            http_client: Externally owned httpx.AsyncClient (optional)
        """
        self._config = config
        self._provider = provider
        self._http_client = http_client
        self._client = VaultClient(config, http_client)
        self._auth = AuthenticationManager(self._client)
        self._credential: Optional[Union[TokenAuth, KubernetesAuth]] = None
        self._session: Optional[AuthSession] = None
        logger.debug(
            f"VaultEthereumSigner initialized: endpoint={config.endpoint}, "
            f"plugin={config.plugin_path}, account={config.account_id}"
        )

    async def __aenter__(self) -> "VaultEthereumSigner":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    @property
    def config(self) -> SignerConfig:
        return self._config

    @property
    def provider(self) -> Optional[ChainProvider]:
        return self._provider

    @property
    def account_id(self) -> str:
        return self._config.account_id

    @property
    def address(self) -> Optional[str]:
        """Resolved address, or None before authentication"""
        return self._session.address if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    async def authenticate(self, credential: CredentialLike) -> AuthSession:
        """
        Log in to Vault and resolve the account address.

        Calling again replaces the current session. On failure the previous
        session, if any, is kept untouched.

        Args:
            credential: TokenAuth, KubernetesAuth or an equivalent mapping

        Returns:
            The new AuthSession
        """
        credential = parse_credential(credential)
        session = await self._auth.authenticate(credential)
        self._credential = credential
        self._session = session
        return session

    def _require_session(self) -> AuthSession:
        if self._session is None:
            raise NotAuthenticatedError()
        return self._session

    def _require_provider(self) -> ChainProvider:
        if self._provider is None:
            raise NotConnectedError("No chain provider connected to the Vault signer")
        return self._provider

    async def get_address(self) -> str:
        return self._require_session().address

    def connect(self, provider: ChainProvider) -> "VaultEthereumSigner":
        """Bind a different chain provider; authentication is kept."""
        self._provider = provider
        return self

    async def connect_account(self, account_id: str) -> "VaultEthereumSigner":
        """
        Create a signer for another account under the same plugin mount.

        The new signer authenticates from scratch with this signer's credential
        and owns its own session. This signer is not modified.
        """
        self._require_session()
        config = SignerConfig(**{**self._config.model_dump(), "account_id": account_id})
        signer = VaultEthereumSigner(config, self._provider, self._http_client)
        await signer.authenticate(self._credential)
        return signer

    async def sign_transaction(
        self, transaction: Union[UnsignedTransaction, Mapping[str, Any]]
    ) -> str:
        """
        Sign a transaction with the Vault-held key.

        Args:
            transaction: UnsignedTransaction or web3-style transaction dict

        Returns:
            RLP-encoded signed transaction as returned by Vault, ready to broadcast

        Raises:
            NotAuthenticatedError: Before authenticate()
            FromAddressMismatchError: ``from`` is not the authenticated address
            NotConnectedError: No chain provider bound
            RemoteSignError: Vault rejected the request or answered without rlpSignature
            pydantic.ValidationError: Transaction has no nonce
        """
        session = self._require_session()
        tx = as_unsigned_transaction(transaction)

        if tx.from_ is not None:
            if tx.from_.lower() != session.address.lower():
                raise FromAddressMismatchError(session.address, tx.from_)
            tx = tx.model_copy(update={"from_": None})

        provider = self._require_provider()
        chain_id = await provider.get_chain_id()

        gas_price = None
        if not is_fee_market(tx) and tx.gas_price is None:
            gas_price = await provider.get_gas_price()

        endpoint, request = build_sign_request(tx, chain_id, gas_price)
        logger.info(
            f"Signing transaction via {endpoint}: account={self.account_id}, "
            f"chain_id={chain_id}, nonce={request.nonce}"
        )

        data = await self._sign(session, endpoint, request.model_dump())
        try:
            return SignedTransaction.model_validate(data).rlp_signature
        except ValidationError:
            raise RemoteSignError(endpoint, reason="response carries no rlpSignature")

    async def sign_message(self, message: Union[str, bytes]) -> str:
        """
        Sign a message with EIP-191 personal_sign semantics.

        The plugin hashes the message text, so bytes must be valid UTF-8.

        Returns:
            Signature hex string as returned by Vault
        """
        session = self._require_session()
        if isinstance(message, (bytes, bytearray)):
            try:
                message = bytes(message).decode("utf-8")
            except UnicodeDecodeError as e:
                raise ValueError("Vault signs text messages; bytes must be valid UTF-8") from e

        data = await self._sign(
            session, SIGN_MESSAGE_ENDPOINT, SignMessageRequest(message=message).model_dump()
        )
        try:
            return MessageSignature.model_validate(data).signature
        except ValidationError:
            raise RemoteSignError(SIGN_MESSAGE_ENDPOINT, reason="response carries no signature")

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        value: dict[str, Any],
    ) -> str:
        """EIP-712 signing is not offered by the vault-ethereum plugin."""
        raise SigningNotImplementedError("sign_typed_data is not implemented by the Vault signer")

    async def _sign(self, session: AuthSession, endpoint: str, payload: dict[str, Any]) -> dict:
        try:
            body = await self._client.sign(session.token, self.account_id, endpoint, payload)
        except VaultRequestError as e:
            raise RemoteSignError(endpoint, e.status_code, e.detail) from e

        data = body.get("data")
        if not isinstance(data, dict):
            raise RemoteSignError(endpoint, reason="response carries no data")
        return data

    async def send_transaction(
        self, transaction: Union[UnsignedTransaction, Mapping[str, Any]]
    ) -> str:
        """
        Sign a transaction in Vault and broadcast it through the chain provider.

        A missing nonce is filled with the account's pending transaction count.

        Returns:
            Transaction hash as 0x-hex
        """
        session = self._require_session()
        provider = self._require_provider()
        tx = as_unsigned_transaction(transaction)

        if tx.nonce is None:
            nonce = await provider.get_transaction_count(session.address, "pending")
            tx = tx.model_copy(update={"nonce": nonce})

        raw_transaction = await self.sign_transaction(tx)
        tx_hash = await provider.send_raw_transaction(raw_transaction)
        logger.info(f"Transaction broadcast: account={self.account_id}, tx_hash={tx_hash}")
        return tx_hash

    async def create_account(self, mnemonic: Optional[str] = None, index: int = 0) -> str:
        """
        Create (or overwrite) the configured account in Vault.

        Args:
            mnemonic: BIP-39 mnemonic; Vault generates one when omitted
            index: BIP-44 address index

        Returns:
            Address of the created account
        """
        session = self._require_session()
        payload = CreateAccountRequest(mnemonic=mnemonic, index=index).model_dump(exclude_none=True)
        body = await self._client.create_account(session.token, self.account_id, payload)
        return AccountData.model_validate(body.get("data") or {}).address

    @classmethod
    async def list_accounts(
        cls,
        config: SignerConfig,
        credential: CredentialLike,
        path_prefix: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> list[str]:
        """
        List account names stored under a path of the plugin mount.

        Args:
            config: Signer configuration; its account_id is not used
            credential: Credential used to obtain a Vault token
            path_prefix: Sub-path below accounts/ to list

        Returns:
            Account names (empty if nothing is stored under the path)
        """
        client = VaultClient(config, http_client)
        try:
            token = await AuthenticationManager(client).get_token(credential)
            try:
                body = await client.list_accounts(token, path_prefix)
            except VaultRequestError as e:
                # Vault answers LIST on an empty path with 404
                if e.status_code == 404:
                    return []
                raise
            return AccountList.model_validate(body.get("data") or {}).keys
        finally:
            await client.close()
