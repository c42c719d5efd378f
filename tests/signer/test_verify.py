"""
Signature verification tests

Vault is stood in for by a fake that signs locally with eth_account, so the
round trip covers request shape, returned payload and recovery.
"""

import json

import httpx
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data

from conftest import ACCOUNT_PATH, TEST_ADDRESS, TEST_PRIVATE_KEY
from vault_ethereum import SignatureVerificationError, verify_message, verify_typed_data

DOMAIN = {
    "name": "PaymentPermit",
    "version": "1",
    "chainId": 1,
    "verifyingContract": "0x0000000000000000000000000000000000000000",
}
TYPES = {"Mail": [{"name": "contents", "type": "string"}, {"name": "amount", "type": "uint256"}]}
VALUE = {"contents": "hello", "amount": 42}


def _local_vault_sign(request: httpx.Request) -> httpx.Response:
    message = json.loads(request.content)["message"]
    signed = Account.sign_message(encode_defunct(text=message), private_key=TEST_PRIVATE_KEY)
    return httpx.Response(
        200, json={"data": {"signature": signed.signature.to_0x_hex(), "address": TEST_ADDRESS}}
    )


def _local_vault_sign_tx(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    tx = {
        "to": body["to"],
        "value": int(body["value"]),
        "nonce": body["nonce"],
        "gas": int(body["gas_limit"]),
        "data": "0x" + body["data"],
        "chainId": body["chain_id"],
    }
    if "max_fee_per_gas" in body:
        tx["type"] = 2
        tx["maxFeePerGas"] = int(body["max_fee_per_gas"])
        tx["maxPriorityFeePerGas"] = int(body["max_priority_fee_per_gas"])
    else:
        tx["gasPrice"] = int(body["gas_price"])
    signed = Account.sign_transaction(tx, private_key=TEST_PRIVATE_KEY)
    return httpx.Response(200, json={"data": {"rlpSignature": signed.raw_transaction.to_0x_hex()}})


def test_verify_message_round_trip():
    signed = Account.sign_message(encode_defunct(text="hello world"), private_key=TEST_PRIVATE_KEY)

    assert verify_message("hello world", signed.signature.to_0x_hex()) == TEST_ADDRESS
    assert verify_message(b"hello world", bytes(signed.signature)) == TEST_ADDRESS


def test_verify_message_accepts_unprefixed_hex():
    signed = Account.sign_message(encode_defunct(text="gm"), private_key=TEST_PRIVATE_KEY)

    assert verify_message("gm", signed.signature.hex().removeprefix("0x")) == TEST_ADDRESS


def test_verify_message_other_message_recovers_other_address():
    signed = Account.sign_message(encode_defunct(text="hello"), private_key=TEST_PRIVATE_KEY)

    assert verify_message("goodbye", signed.signature.to_0x_hex()) != TEST_ADDRESS


def test_verify_typed_data_round_trip():
    signed = Account.sign_message(
        encode_typed_data(DOMAIN, TYPES, VALUE), private_key=TEST_PRIVATE_KEY
    )

    assert verify_typed_data(DOMAIN, TYPES, VALUE, signed.signature.to_0x_hex()) == TEST_ADDRESS


@pytest.mark.parametrize("signature", ["0x" + "00" * 65, "0x1234", "not-hex"])
def test_malformed_signature(signature):
    with pytest.raises(SignatureVerificationError):
        verify_message("hello", signature)


@pytest.mark.anyio
async def test_vault_message_signature_verifies(authenticated_signer, vault):
    vault.route("POST", f"{ACCOUNT_PATH}/sign", handler=_local_vault_sign)

    signature = await authenticated_signer.sign_message("sign in to example.com")

    assert verify_message("sign in to example.com", signature) == TEST_ADDRESS


@pytest.mark.anyio
@pytest.mark.parametrize(
    "fees",
    [
        {"type": 0},
        {"type": 2, "maxFeePerGas": 30_000_000_000, "maxPriorityFeePerGas": 1_000_000_000},
    ],
)
async def test_vault_signed_transaction_recovers_sender(authenticated_signer, vault, fees):
    vault.route("POST", f"{ACCOUNT_PATH}/sign-tx", handler=_local_vault_sign_tx)
    vault.route("POST", f"{ACCOUNT_PATH}/sign-1559-tx", handler=_local_vault_sign_tx)
    tx = {"to": TEST_ADDRESS, "value": 1, "nonce": 3, "gasLimit": 21000, **fees}

    raw = await authenticated_signer.sign_transaction(tx)

    assert Account.recover_transaction(raw) == TEST_ADDRESS
