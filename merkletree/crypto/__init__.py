"""
Cryptographic utilities.

Hash providers for tree construction and hex helpers for transport.
"""
from .hashing import (
    HashProvider,
    Blake2b,
    Keccak256,
    Sha3_256,
    Sha3_512,
    DEFAULT_HASH_TYPE,
    get_hash_provider,
    default_hash_provider,
    available_hash_providers,
    to_hex,
    from_hex,
)

__all__ = [
    "HashProvider",
    "Blake2b",
    "Keccak256",
    "Sha3_256",
    "Sha3_512",
    "DEFAULT_HASH_TYPE",
    "get_hash_provider",
    "default_hash_provider",
    "available_hash_providers",
    "to_hex",
    "from_hex",
]
