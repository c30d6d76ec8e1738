"""
convex_sdk.wallet
=================

Key material for signing transactions:

- Signer  : protocol the transaction coordinator signs through
- KeyPair : Ed25519 implementation with encrypted PEM import/export
"""

from .key_pair import KeyPair, Signer

__all__ = ["KeyPair", "Signer"]
