import asyncio
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from vault_ethereum import (
    SignerConfig,
    TokenAuth,
    VaultEthereumSigner,
    Web3ChainProvider,
    verify_message,
)
from vault_ethereum.logging_config import setup_logging

setup_logging(logging.DEBUG)

load_dotenv(Path(__file__).parent.parent.parent.parent / ".env")

VAULT_TOKEN = os.getenv("VAULT_TOKEN", "")
RPC_URL = os.getenv("ETH_RPC_URL", "http://127.0.0.1:8545")
RECIPIENT = os.getenv("RECIPIENT", "0xe74b28c2eAe8679e3cCc3a94d5d0dE83CCB84705")

if not VAULT_TOKEN:
    print("\nError: VAULT_TOKEN not set in .env file")
    print("\nPlease add a Vault token allowed to use the vault-ethereum mount\n")
    exit(1)


async def main():
    config = SignerConfig.from_env()
    print("Initializing Vault signer...")
    print(f"  Vault: {config.endpoint}")
    print(f"  Account: {config.account_id}")
    print(f"  RPC: {RPC_URL}")

    async with VaultEthereumSigner(config, Web3ChainProvider(RPC_URL)) as signer:
        await signer.authenticate(TokenAuth(token=VAULT_TOKEN))
        address = await signer.get_address()
        print(f"  Address: {address}")

        accounts = await VaultEthereumSigner.list_accounts(config, TokenAuth(token=VAULT_TOKEN))
        print(f"  Accounts on mount: {accounts}")

        signature = await signer.sign_message("hello from vault")
        print(f"\nMessage signature: {signature}")
        print(f"Recovered signer: {verify_message('hello from vault', signature)}")

        tx = {
            "type": 0,
            "to": RECIPIENT,
            "value": 10**18,
            "gasLimit": 21000,
        }
        try:
            tx_hash = await signer.send_transaction(tx)
            print(f"\nLegacy transfer sent: {tx_hash}")
        except Exception as e:
            print(f"\nError: {e}")


if __name__ == "__main__":
    asyncio.run(main())
