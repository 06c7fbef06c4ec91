"""Canonical serialization and storage keys for nodes."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import UnknownNodeKind, UnsupportedNodeKind
from .hashing import DEFAULT_HASHER, HashProvider
from .nodes import Directory, File, Node
from .reducer import reduce_digests

FILE_KEY_PREFIX = "file_"
DIR_KEY_PREFIX = "dir_"


@dataclass
class Subtree:
    """Serialized bytes, Merkle digest and storage key of one subtree."""

    key: str
    data: bytes
    digest: str
    is_directory: bool


def serialize(node: Node) -> bytes:
    """Serialize a node: file payloads as-is, directories as their children concatenated."""
    if isinstance(node, File):
        return node.data
    if isinstance(node, Directory):
        return b"".join(serialize(child) for child in node)
    raise UnsupportedNodeKind(type(node).__name__)


def plan_subtree(
    node: Node,
    hasher: HashProvider | None = None,
    entries: list[Subtree] | None = None,
) -> Subtree:
    """
    Compute the bytes, digest and key of a subtree bottom-up.

    A file's digest is the hash of its payload. A directory's digest is the
    reduction of its children's digests, in order; an empty directory
    hashes its (empty) serialization. A directory's key hashes its
    children's keys joined in order, so it is unique to the directory's
    content even where two digests coincide.

    Args:
        node: Root of the subtree
        hasher: Hash provider (defaults to SHA-256)
        entries: If given, every subtree is appended to it, children first

    Raises:
        UnsupportedNodeKind: If the subtree contains a node that is neither
            a File nor a Directory
    """
    hasher = hasher or DEFAULT_HASHER
    if isinstance(node, File):
        subtree = Subtree(
            key=file_key(node.data),
            data=node.data,
            digest=hasher.hexdigest(node.data),
            is_directory=False,
        )
    elif isinstance(node, Directory):
        children = [plan_subtree(child, hasher, entries) for child in node]
        data = b"".join(child.data for child in children)
        if children:
            digest = reduce_digests([child.digest for child in children], hasher)
        else:
            digest = hasher.hexdigest(data)
        subtree = Subtree(
            key=directory_key([child.key for child in children], hasher),
            data=data,
            digest=digest,
            is_directory=True,
        )
    else:
        raise UnsupportedNodeKind(type(node).__name__)

    if entries is not None:
        entries.append(subtree)
    return subtree


def node_digest(node: Node, hasher: HashProvider | None = None) -> str:
    """Compute the Merkle digest of a node."""
    return plan_subtree(node, hasher).digest


def derive_key(node: Node, hasher: HashProvider | None = None) -> str:
    """Derive the storage key for a node from its kind and content."""
    if not isinstance(node, (File, Directory)):
        raise UnknownNodeKind(type(node).__name__)
    return plan_subtree(node, hasher).key


def file_key(data: bytes) -> str:
    return FILE_KEY_PREFIX + data.hex()


def directory_key(child_keys: list[str], hasher: HashProvider | None = None) -> str:
    # Prefixes contain non-hex characters, so the joined keys split back unambiguously
    hasher = hasher or DEFAULT_HASHER
    return DIR_KEY_PREFIX + hasher.hexdigest("".join(child_keys).encode())
