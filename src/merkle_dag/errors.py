"""Exceptions raised by Merkle DAG."""


class MerkleDagError(Exception):
    """Base exception for Merkle DAG errors."""

    pass


class UnsupportedNodeKind(MerkleDagError):
    """A node that is neither a File nor a Directory was serialized."""

    label = "Unsupported"

    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"{self.label} node kind: {kind!r}")


class UnknownNodeKind(UnsupportedNodeKind):
    """A storage key was requested for a node of unknown kind."""

    label = "Unknown"


class StoreWriteFailure(MerkleDagError):
    """The key-value store rejected a put."""

    def __init__(self, key: str, reason: str = ""):
        self.key = key
        message = f"Failed to store {key!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class BlobNotFound(MerkleDagError, KeyError):
    """No blob is stored under the requested key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"No blob stored under {self.key!r}"


class EmptyInput(MerkleDagError):
    """The Merkle reducer was given no digests."""

    def __init__(self) -> None:
        super().__init__("Cannot reduce an empty digest sequence")
