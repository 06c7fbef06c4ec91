"""Node model for the trees committed to a Merkle DAG."""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class NodeType(Enum):
    """The closed set of node kinds."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class File:
    """A leaf node owning an immutable byte payload."""

    data: bytes
    name: str = field(default="", compare=False)  # Display only, never hashed

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @property
    def type(self) -> NodeType:
        return NodeType.FILE

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Directory:
    """An interior node owning an ordered collection of children.

    Children are kept in insertion order; that order is part of the
    committed content. Iterating a directory yields its children and can
    be repeated any number of times.
    """

    children: tuple[Node, ...] = ()
    name: str = field(default="", compare=False)  # Display only, never hashed

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def type(self) -> NodeType:
        return NodeType.DIRECTORY

    @property
    def size(self) -> int:
        """Aggregate byte count of every file below this directory."""
        return sum(child.size for child in self.children)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    @classmethod
    def of(cls, *children: Node, name: str = "") -> Directory:
        """Build a directory from positional children."""
        return cls(children=children, name=name)


Node = File | Directory


def load_path(path: Path, exclude_patterns: Iterable[str] = ()) -> Node:
    """
    Load a file or directory from disk as a Node tree.

    Directory entries are ordered by name so that loading the same tree
    twice always yields the same child order.

    Args:
        path: File or directory to load
        exclude_patterns: fnmatch patterns for entry names to skip

    Returns:
        A File for regular files, a Directory for directories
    """
    patterns = list(exclude_patterns)
    if path.is_file():
        return File(path.read_bytes(), name=path.name)
    if path.is_dir():
        return _load_directory(path, patterns)
    raise FileNotFoundError(f"Not a file or directory: {path}")


def should_exclude(path: Path, exclude_patterns: list[str]) -> bool:
    """Check if path matches any exclusion pattern."""
    name = path.name
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(name, pattern):
            return True
    return False


def _load_directory(path: Path, exclude_patterns: list[str]) -> Directory:
    """Recursively load a directory, skipping symlinks and excluded names."""
    children: list[Node] = []
    for child in sorted(path.iterdir()):
        if child.is_symlink() or should_exclude(child, exclude_patterns):
            continue
        if child.is_file():
            children.append(File(child.read_bytes(), name=child.name))
        elif child.is_dir():
            children.append(_load_directory(child, exclude_patterns))
    return Directory(children=children, name=path.name)
