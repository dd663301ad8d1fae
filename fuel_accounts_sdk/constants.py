"""
Protocol constants shared across the SDK.
"""

#: Asset id of the network's native, fee-paying asset.
BASE_ASSET_ID = "0x" + "00" * 32

#: Zeroed 32-byte value used for contract input/output placeholders.
ZERO_BYTES32 = "0x" + "00" * 32

#: Zeroed UTXO id (32-byte tx id + 2-byte output index).
ZERO_UTXO_ID = "0x" + "00" * 34

#: Size of a secp256k1 recoverable signature as stored in a witness.
SIGNATURE_LENGTH = 65

#: Number of resources requested per page during selection.
DEFAULT_PAGE_SIZE = 100
