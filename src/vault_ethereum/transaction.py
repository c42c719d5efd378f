"""
Projection of unsigned transactions into vault-ethereum sign request bodies
"""

from typing import Any, Mapping, Union

from vault_ethereum.types import (
    SignEIP1559TxRequest,
    SignTxRequest,
    TransactionType,
    UnsignedTransaction,
)

SIGN_TX_ENDPOINT = "sign-tx"
SIGN_EIP1559_TX_ENDPOINT = "sign-1559-tx"
SIGN_MESSAGE_ENDPOINT = "sign"

# The plugin decodes ``data`` without a 0x prefix
_EMPTY_DATA = "0x"


def as_unsigned_transaction(
    tx: Union[UnsignedTransaction, Mapping[str, Any]],
) -> UnsignedTransaction:
    """Validate a web3-style transaction dict, passing models through untouched."""
    if isinstance(tx, UnsignedTransaction):
        return tx
    return UnsignedTransaction.model_validate(dict(tx))


def normalize_data(data: Union[str, bytes, None]) -> str:
    """Strip the 0x prefix from calldata; empty or bare "0x" becomes ""."""
    if data is None:
        return ""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).hex()
    if len(data) > len(_EMPTY_DATA) and data[:2].lower() == "0x":
        return data[2:]
    if data.lower() == _EMPTY_DATA:
        return ""
    return data


def is_fee_market(tx: UnsignedTransaction) -> bool:
    return tx.type == TransactionType.FEE_MARKET


def build_sign_request(
    tx: UnsignedTransaction,
    chain_id: int,
    gas_price: int | None = None,
) -> tuple[str, Union[SignTxRequest, SignEIP1559TxRequest]]:
    """
    Select the sign endpoint for a transaction and build its request body.

    Numeric quantities are sent as decimal strings so that wei amounts survive
    JSON transport without precision loss.

    Args:
        tx: Transaction to sign
        chain_id: Chain id reported by the chain provider
        gas_price: Gas price for legacy transactions that leave it unset

    Returns:
        Tuple of (endpoint name, request body)

    Raises:
        ValueError: If a legacy transaction has no gas price from either source
    """
    data = normalize_data(tx.data)

    if is_fee_market(tx):
        return SIGN_EIP1559_TX_ENDPOINT, SignEIP1559TxRequest(
            chain_id=chain_id,
            to=tx.to,
            data=data,
            value=str(tx.value),
            nonce=tx.nonce,
            gas_limit=str(tx.gas_limit),
            max_priority_fee_per_gas=str(tx.max_priority_fee_per_gas),
            max_fee_per_gas=str(tx.max_fee_per_gas),
        )

    price = tx.gas_price if tx.gas_price is not None else gas_price
    if price is None:
        raise ValueError("legacy transaction requires a gas price")

    return SIGN_TX_ENDPOINT, SignTxRequest(
        chain_id=chain_id,
        to=tx.to,
        data=data,
        value=str(tx.value),
        nonce=tx.nonce,
        gas_limit=str(tx.gas_limit),
        gas_price=str(price),
    )
