"""Merkle reduction of ordered digest sequences."""

from collections.abc import Sequence

from .errors import EmptyInput
from .hashing import DEFAULT_HASHER, HashProvider


def reduce_digests(digests: Sequence[str], hasher: HashProvider | None = None) -> str:
    """
    Reduce an ordered sequence of hex digests to a single root digest.

    Each pass pairs consecutive digests and replaces every pair with the
    hash of their concatenated hex text. An odd-length level is padded by
    repeating its last digest. A single digest is its own root.

    Args:
        digests: Hex digests in committed order
        hasher: Hash provider (defaults to SHA-256)

    Returns:
        The root digest as lowercase hex

    Raises:
        EmptyInput: If digests is empty
    """
    return merkle_levels(digests, hasher)[-1][0]


def merkle_levels(
    digests: Sequence[str], hasher: HashProvider | None = None
) -> list[list[str]]:
    """Compute every level of the reduction, leaves first and root last."""
    if not digests:
        raise EmptyInput()

    hasher = hasher or DEFAULT_HASHER
    level = list(digests)
    levels = [level]
    while len(level) > 1:
        if len(level) % 2:
            level = level + [level[-1]]
        level = [
            hasher.hexdigest((level[i] + level[i + 1]).encode())
            for i in range(0, len(level), 2)
        ]
        levels.append(level)
    return levels
