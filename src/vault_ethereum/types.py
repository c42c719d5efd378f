"""
Type definitions for the Vault Ethereum signer
"""

from enum import IntEnum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from vault_ethereum.config import KUBERNETES_JWT_PATH
from vault_ethereum.exceptions import AuthMethodUnknownError

TOKEN_AUTH = "token"
KUBERNETES_AUTH = "kubernetes"

AuthMethod = Literal["token", "kubernetes"]


class TokenAuth(BaseModel):
    """Authenticate with an existing Vault token"""

    method: Literal["token"] = TOKEN_AUTH
    token: str = Field(repr=False)


class KubernetesAuth(BaseModel):
    """Authenticate with the pod's service account through Vault's kubernetes auth method"""

    method: Literal["kubernetes"] = KUBERNETES_AUTH
    role: str
    auth_plugin_path: Optional[str] = Field(None, alias="kubeAuthPluginPath")
    jwt_path: str = Field(KUBERNETES_JWT_PATH, alias="jwtPath")

    class Config:
        populate_by_name = True


def parse_credential(raw: Any) -> Union[TokenAuth, KubernetesAuth]:
    """Build a credential from untrusted input such as a deserialized config file.

    Args:
        raw: A credential model or a mapping with a ``method`` tag

    Returns:
        TokenAuth or KubernetesAuth

    Raises:
        AuthMethodUnknownError: If the method tag is missing or unsupported
    """
    if isinstance(raw, (TokenAuth, KubernetesAuth)):
        return raw
    if not isinstance(raw, dict):
        raise AuthMethodUnknownError(type(raw).__name__)

    method = raw.get("method")
    if method == TOKEN_AUTH:
        return TokenAuth.model_validate(raw)
    if method == KUBERNETES_AUTH:
        return KubernetesAuth.model_validate(raw)
    raise AuthMethodUnknownError(method)


class AuthResponse(BaseModel):
    """The ``auth`` block of a Vault login response"""

    client_token: Optional[str] = Field(None, repr=False)
    accessor: Optional[str] = None
    policies: list[str] = Field(default_factory=list)
    metadata: Optional[dict[str, Any]] = None
    lease_duration: int = 0
    renewable: bool = False


class AuthSession(BaseModel):
    """Token and resolved address held by an authenticated signer"""

    method: AuthMethod
    token: str = Field(repr=False)
    address: str

    class Config:
        frozen = True


class TransactionType(IntEnum):
    """EIP-2718 transaction envelope types"""

    LEGACY = 0
    ACCESS_LIST = 1
    FEE_MARKET = 2


def _to_int(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return int(value, 16) if value.lower().startswith("0x") else int(value)
    return value


class UnsignedTransaction(BaseModel):
    """
    Transaction to be signed remotely.

    Accepts web3-style dicts (camelCase keys, hex quantities). ``gas_price`` left
    as None is filled from the chain provider; an explicit 0 is sent as-is.
    """

    to: str
    value: int = 0
    nonce: Optional[int] = None
    gas_limit: int = Field(alias="gasLimit")
    data: Optional[Union[str, bytes]] = None
    type: int = TransactionType.LEGACY
    gas_price: Optional[int] = Field(None, alias="gasPrice")
    max_fee_per_gas: Optional[int] = Field(None, alias="maxFeePerGas")
    max_priority_fee_per_gas: Optional[int] = Field(None, alias="maxPriorityFeePerGas")
    from_: Optional[str] = Field(None, alias="from")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _accept_web3_aliases(cls, data: Any) -> Any:
        if isinstance(data, dict) and "gas_limit" not in data and "gasLimit" not in data:
            if "gas" in data:
                data = {**data, "gasLimit": data["gas"]}
        return data

    @field_validator(
        "value",
        "nonce",
        "gas_limit",
        "gas_price",
        "max_fee_per_gas",
        "max_priority_fee_per_gas",
        mode="before",
    )
    @classmethod
    def _parse_quantity(cls, value: Any) -> Any:
        return _to_int(value)

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> Any:
        if value is None:
            return TransactionType.LEGACY
        return _to_int(value)

    @model_validator(mode="after")
    def _check_fee_fields(self) -> "UnsignedTransaction":
        if self.type == TransactionType.FEE_MARKET:
            if self.max_fee_per_gas is None or self.max_priority_fee_per_gas is None:
                raise ValueError(
                    "fee market transactions require max_fee_per_gas and max_priority_fee_per_gas"
                )
            if self.gas_price is not None:
                raise ValueError("fee market transactions must not set gas_price")
        elif self.max_fee_per_gas is not None or self.max_priority_fee_per_gas is not None:
            raise ValueError(f"type {self.type} transactions must not set fee market fields")
        return self


class SignTxRequest(BaseModel):
    """Body of POST accounts/{name}/sign-tx"""

    chain_id: int
    to: str
    data: str
    value: str
    nonce: int
    gas_limit: str
    gas_price: str


class SignEIP1559TxRequest(BaseModel):
    """Body of POST accounts/{name}/sign-1559-tx"""

    chain_id: int
    to: str
    data: str
    value: str
    nonce: int
    gas_limit: str
    max_priority_fee_per_gas: str
    max_fee_per_gas: str


class SignMessageRequest(BaseModel):
    """Body of POST accounts/{name}/sign"""

    message: str


class CreateAccountRequest(BaseModel):
    """Body of POST accounts/{name}"""

    mnemonic: Optional[str] = Field(None, repr=False)
    index: int = 0


class AccountData(BaseModel):
    """``data`` of an account read/create response"""

    address: str


class SignedTransaction(BaseModel):
    """``data`` of a sign-tx / sign-1559-tx response"""

    rlp_signature: str = Field(alias="rlpSignature")
    chain_id: Optional[int] = Field(None, alias="chainId")
    signed_transaction: Optional[dict[str, Any]] = Field(None, alias="signedTransaction")

    class Config:
        populate_by_name = True


class MessageSignature(BaseModel):
    """``data`` of a sign response"""

    signature: str
    address: Optional[str] = None
    hashed_message: Optional[str] = Field(None, alias="hashedMessage")

    class Config:
        populate_by_name = True


class AccountList(BaseModel):
    """``data`` of a LIST accounts response"""

    keys: list[str] = Field(default_factory=list)
