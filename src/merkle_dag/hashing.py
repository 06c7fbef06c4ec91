"""Digest primitives used to commit node content."""

import hashlib
from typing import Literal

HashAlgorithm = Literal["sha256", "sha3_256", "blake2s"]

DIGEST_SIZE = 32


class HashProvider:
    """A 256-bit digest function with a stable hex rendering."""

    def __init__(self, algorithm: HashAlgorithm = "sha256"):
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unknown hash algorithm: {algorithm}")
        if hashlib.new(algorithm).digest_size != DIGEST_SIZE:
            raise ValueError(f"{algorithm} does not produce 256-bit digests")
        self.algorithm = algorithm

    def digest(self, data: bytes) -> bytes:
        """Compute the raw digest of data."""
        return hashlib.new(self.algorithm, data).digest()

    def hexdigest(self, data: bytes) -> str:
        """Compute the digest of data rendered as lowercase hex."""
        return hashlib.new(self.algorithm, data).hexdigest()

    def __repr__(self) -> str:
        return f"HashProvider({self.algorithm!r})"


DEFAULT_HASHER = HashProvider()


def get_hasher(algorithm: HashAlgorithm | None = None) -> HashProvider:
    """Get a hash provider, falling back to SHA-256."""
    if algorithm is None or algorithm == DEFAULT_HASHER.algorithm:
        return DEFAULT_HASHER
    return HashProvider(algorithm)
