"""DAG construction: store every subtree and derive the committed root digest."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from .hashing import DEFAULT_HASHER, HashProvider
from .nodes import File, Node
from .reducer import reduce_digests
from .serializer import Subtree, plan_subtree
from .store import KVStore


@dataclass
class AddStats:
    """Statistics from adding a tree to a store."""

    files_stored: int = 0
    directories_stored: int = 0
    duplicates_skipped: int = 0  # Subtrees whose key was already written in this add
    bytes_written: int = 0

    @property
    def total_entries(self) -> int:
        return self.files_stored + self.directories_stored


class DagBuilder:
    """Writes node trees into a key-value store as a Merkle DAG."""

    def __init__(
        self,
        store: KVStore,
        hasher: HashProvider | None = None,
        console: Console | None = None,
        verbose: bool = False,
    ):
        self.store = store
        self.hasher = hasher or DEFAULT_HASHER
        self.verbose = verbose
        self.console = console or Console()
        self.stats = AddStats()

    def add(self, node: Node) -> str:
        """
        Store node and all of its descendants, returning the root digest.

        The whole tree is serialized and keyed before the first write, so an
        unsupported node anywhere in it fails without touching the store.
        Distinct subtrees are handed to the store in one batch, children
        before parents. A store failure aborts the remaining writes; entries
        already written stay in place.

        Args:
            node: Root of the tree to commit

        Returns:
            The root digest as lowercase hex

        Raises:
            UnsupportedNodeKind: If the tree contains a node that is neither
                a File nor a Directory
            StoreWriteFailure: If the store rejects a write
        """
        entries: list[Subtree] = []
        root = plan_subtree(node, self.hasher, entries)

        unique: dict[str, Subtree] = {}
        for entry in entries:
            if entry.key in unique:
                self.stats.duplicates_skipped += 1
                continue
            unique[entry.key] = entry

        self.store.put_many((entry.key, entry.data) for entry in unique.values())
        for entry in unique.values():
            self._record(entry)

        if isinstance(node, File):
            # A lone leaf is reduced on its own
            return reduce_digests([root.digest], self.hasher)
        return root.digest

    def _record(self, entry: Subtree) -> None:
        if entry.is_directory:
            self.stats.directories_stored += 1
        else:
            self.stats.files_stored += 1
        self.stats.bytes_written += len(entry.data)

        if self.verbose:
            kind = "dir " if entry.is_directory else "file"
            self.console.print(
                f"  [dim]{kind}[/dim] {_short_key(entry.key)} [dim]({len(entry.data)} bytes)[/dim]"
            )


def add(store: KVStore, node: Node, hasher: HashProvider | None = None) -> str:
    """
    Commit a node tree to store and return its root digest.

    Convenience function for one-off adds without stats.
    """
    return DagBuilder(store, hasher=hasher).add(node)


def _short_key(key: str, width: int = 40) -> str:
    if len(key) <= width:
        return key
    return key[: width - 3] + "..."
