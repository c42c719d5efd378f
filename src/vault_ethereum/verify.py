"""
Local signature verification for signatures returned by Vault
"""

import logging
from typing import Any, Union

from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data

from vault_ethereum.exceptions import SignatureVerificationError

logger = logging.getLogger(__name__)


def _signature_bytes(signature: Union[str, bytes]) -> bytes:
    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature)
    return bytes.fromhex(signature[2:] if signature.startswith("0x") else signature)


def verify_message(message: Union[str, bytes], signature: Union[str, bytes]) -> str:
    """Recover the address that produced an EIP-191 personal_sign signature.

    Args:
        message: Signed message; str is UTF-8 encoded, bytes are used as-is
        signature: 65-byte signature, hex string or bytes

    Returns:
        Checksum address of the signer

    Raises:
        SignatureVerificationError: If the signature is malformed
    """
    try:
        if isinstance(message, str):
            signable = encode_defunct(text=message)
        else:
            signable = encode_defunct(primitive=bytes(message))
        return Account.recover_message(signable, signature=_signature_bytes(signature))
    except Exception as e:
        raise SignatureVerificationError(f"Failed to recover message signer: {e}") from e


def verify_typed_data(
    domain: dict[str, Any],
    types: dict[str, Any],
    value: dict[str, Any],
    signature: Union[str, bytes],
) -> str:
    """Recover the address that produced an EIP-712 signature.

    ``types`` must not include EIP712Domain; it is derived from ``domain``.
    """
    try:
        signable = encode_typed_data(domain, types, value)
        return Account.recover_message(signable, signature=_signature_bytes(signature))
    except Exception as e:
        raise SignatureVerificationError(f"Failed to recover typed data signer: {e}") from e
