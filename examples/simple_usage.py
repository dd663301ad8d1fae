#!/usr/bin/env python3
"""
Simple example of the three account workflows against a local node.
"""
import os
import logging

from fuel_accounts_sdk import (
    CheckedExecutionError,
    Provider,
    SubmissionRejectedError,
    WalletUnlocked,
)

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

RPC_URL = os.environ.get("RPC_URL", "http://127.0.0.1:4000/v1/jsonrpc")
PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
CONTRACT_ID = os.environ.get("CONTRACT_ID", "0x" + "00" * 31 + "01")
BASE_LAYER_RECIPIENT = os.environ.get("BASE_LAYER_RECIPIENT", "0x" + "00" * 19 + "02")


def main():
    provider = Provider(RPC_URL)
    if PRIVATE_KEY:
        wallet = WalletUnlocked.from_private_key(PRIVATE_KEY, provider)
    else:
        wallet = WalletUnlocked.generate(provider)
    other = WalletUnlocked.generate(provider)

    try:
        result = wallet.transfer(other.address, 100)
        logger.info(f"transfer: {result.tx_id}")

        result = wallet.force_transfer_to_contract(CONTRACT_ID, 50)
        logger.info(f"force_transfer_to_contract: {result.tx_id}")

        result = wallet.withdraw_to_base_layer(BASE_LAYER_RECIPIENT, 10)
        logger.info(f"withdraw_to_base_layer: {result.tx_id}, message nonce {result.nonce}")
    except SubmissionRejectedError as e:
        logger.error(f"Node rejected the transaction ({e.reject_reason.value}): {e}")
    except CheckedExecutionError as e:
        logger.error(f"Transaction reverted: {e.reason}")
        for receipt in e.receipts:
            logger.error(f"  {receipt}")


if __name__ == "__main__":
    main()
