"""
Utility functions for web3 interactions
"""
from .abi import load_abi, TIMELOCK_ABI_PATH
from .web3_utils import (
    current_timestamp,
    to_bytes32,
    to_hex_bytes,
)
