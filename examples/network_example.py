#!/usr/bin/env python3
"""
Example of using a wallet with the bundled network configuration.
"""
import os
import logging

from fuel_accounts_sdk import (
    BASE_ASSET_ID,
    InsufficientFundsError,
    NetworkConfig,
    Provider,
    TxPolicies,
    WalletUnlocked,
)

logging.basicConfig(level=logging.INFO)


def main():
    """
    Demonstrate a wallet bound to a configured network.

    This example shows how to:
    1. List the bundled networks
    2. Create a provider from a network name
    3. Inspect balances
    4. Transfer the base asset with a gas price ceiling
    """
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    RECIPIENT = os.environ.get("RECIPIENT")
    NETWORK = os.environ.get("FUEL_NETWORK", "testnet")

    if not PRIVATE_KEY or not RECIPIENT:
        print("ERROR: PRIVATE_KEY and RECIPIENT environment variables are required")
        return

    print("Available networks:")
    for network_name in NetworkConfig.load_networks().keys():
        print(f"  - {network_name}")
    print()

    provider = Provider.from_network(NETWORK)
    wallet = WalletUnlocked.from_private_key(PRIVATE_KEY, provider)
    print(f"Wallet address: {wallet.address}")
    print(f"Connected to network: {NETWORK} (chain id {provider.chain_id()})")

    for asset_id, amount in wallet.get_balances().items():
        print(f"  {asset_id}: {amount}")

    try:
        tx_id, receipts = wallet.transfer(
            RECIPIENT, 1_000, BASE_ASSET_ID, TxPolicies(gas_price=10)
        )
    except InsufficientFundsError as e:
        print(f"Not enough funds: requested {e.requested}, available {e.available}")
        return

    print(f"Transfer committed: {tx_id} ({len(receipts)} receipts)")


if __name__ == "__main__":
    main()
