"""
Convex SDK for Python.
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    ApiError,
    ApiRequestError,
    ConvexSdkError,
    ErrorCode,
    ErrorKind,
    InvalidAddress,
    KeyPairError,
    Outcome,
    RegistryError,
)

# Addresses
from .address import (  # noqa: F401
    is_address,
    is_checksum_valid,
    to_address,
    to_checksum,
)

# Wallet & accounts
from .wallet.key_pair import KeyPair, Signer  # noqa: F401
from .account import Account  # noqa: F401
from .types import AccountInformation, NodeResult, RegistryEntry  # noqa: F401

# Transport & transactions
from .rpc.http import NodeTransport  # noqa: F401
from .tx.build import Language  # noqa: F401
from .tx.send import TransactionCoordinator  # noqa: F401
from .registry import RegistryCache  # noqa: F401

# High-level client
from .api import ConvexAPI  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "SDKConfig",
    "ApiError", "ApiRequestError", "ConvexSdkError", "ErrorCode", "ErrorKind",
    "InvalidAddress", "KeyPairError", "Outcome", "RegistryError",
    # Address
    "is_address", "is_checksum_valid", "to_address", "to_checksum",
    # Wallet
    "KeyPair", "Signer", "Account",
    "AccountInformation", "NodeResult", "RegistryEntry",
    # Transport / tx
    "NodeTransport", "Language", "TransactionCoordinator", "RegistryCache",
    # Client
    "ConvexAPI",
]
