"""
Crypto - Hash Providers
Pluggable hash functions used for every digest in a tree.

This module provides:
- HashProvider: the capability every tree, proof and multiproof is generic over
- Blake2b, Keccak256, Sha3_256, Sha3_512: interchangeable providers
- A name registry used when importing persisted trees
- Hex encoding/decoding with 0x prefix

Provider Contract:
1. hash(*parts) feeds every part to a single hasher in order, so
   hash(a, b) == hash(a + b)
2. digest_length is fixed for the lifetime of the provider
3. name is stable and is what gets recorded in exported trees
"""
from __future__ import annotations

import hashlib
from typing import Callable, Protocol, runtime_checkable

from eth_hash.auto import keccak

from merkletree.schemas.errors import UnknownHashTypeException


@runtime_checkable
class HashProvider(Protocol):
    """
    Capability supplying digests for a Merkle tree.

    Attributes:
        name: Registry name recorded in exported trees
        digest_length: Length in bytes of every digest returned by hash()
    """

    name: str
    digest_length: int

    def hash(self, *parts: bytes) -> bytes:
        """Hash the ordered concatenation of parts."""
        ...


class Blake2b:
    """BLAKE2b with a 32-byte digest. The default provider."""

    name = "blake2b"
    digest_length = 32

    def hash(self, *parts: bytes) -> bytes:
        hasher = hashlib.blake2b(digest_size=self.digest_length)
        for part in parts:
            hasher.update(part)
        return hasher.digest()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Keccak256:
    """Legacy Keccak-256 as used by Ethereum (not FIPS SHA3-256)."""

    name = "keccak256"
    digest_length = 32

    def hash(self, *parts: bytes) -> bytes:
        return keccak(b"".join(parts))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Sha3_256:
    """FIPS SHA3-256. Registered under the name "sha256"."""

    name = "sha256"
    digest_length = 32

    def hash(self, *parts: bytes) -> bytes:
        hasher = hashlib.sha3_256()
        for part in parts:
            hasher.update(part)
        return hasher.digest()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Sha3_512:
    """FIPS SHA3-512. Registered under the name "sha512"."""

    name = "sha512"
    digest_length = 64

    def hash(self, *parts: bytes) -> bytes:
        hasher = hashlib.sha3_512()
        for part in parts:
            hasher.update(part)
        return hasher.digest()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


DEFAULT_HASH_TYPE = Blake2b.name

_REGISTRY: dict[str, Callable[[], HashProvider]] = {
    Blake2b.name: Blake2b,
    Keccak256.name: Keccak256,
    Sha3_256.name: Sha3_256,
    Sha3_512.name: Sha3_512,
}


def get_hash_provider(name: str) -> HashProvider:
    """
    Look up a hash provider by its registry name.

    Args:
        name: Provider name as recorded by HashProvider.name

    Returns:
        A new provider instance

    Raises:
        UnknownHashTypeException: If no provider is registered under name
    """
    try:
        factory = _REGISTRY[name]
    except KeyError:
        raise UnknownHashTypeException(
            f"cannot parse hash type {name!r}",
            hash_type=name,
        ) from None
    return factory()


def default_hash_provider() -> HashProvider:
    """Return a fresh instance of the default provider (BLAKE2b-256)."""
    return get_hash_provider(DEFAULT_HASH_TYPE)


def available_hash_providers() -> list[str]:
    """Names of every registered provider, sorted."""
    return sorted(_REGISTRY)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


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
