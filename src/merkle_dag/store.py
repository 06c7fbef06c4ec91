"""Key-value stores that hold serialized nodes."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from pathlib import Path

import lancedb
import pyarrow as pa

from . import LANCEDB_DIR, MDAG_DIR
from .errors import BlobNotFound, StoreWriteFailure


class KVStore(ABC):
    """Content-agnostic blob store keyed by string."""

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Store value under key, replacing any existing value.

        Raises:
            StoreWriteFailure: If the value could not be written
        """

    def put_many(self, items: Iterable[tuple[str, bytes]]) -> None:
        """Store several values in order, stopping at the first failure."""
        for key, value in items:
            self.put(key, value)

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Get the value stored under key.

        Raises:
            BlobNotFound: If nothing is stored under key
        """

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over all stored keys."""

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        try:
            self.get(key)
        except BlobNotFound:
            return False
        return True

    def __len__(self) -> int:
        return sum(1 for _ in self.keys())


class MemoryStore(KVStore):
    """Dict-backed store, mostly useful for tests and one-off digests."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def put(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def get(self, key: str) -> bytes:
        try:
            return self._data[key]
        except KeyError:
            raise BlobNotFound(key) from None

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class LanceStore(KVStore):
    """LanceDB-backed store persisting one row per key."""

    BLOBS_TABLE = "blobs"

    def __init__(self, project_root: Path):
        self.project_root = project_root
        self.db_path = project_root / MDAG_DIR / LANCEDB_DIR
        self._db: lancedb.DBConnection | None = None
        self._table: lancedb.table.Table | None = None

    def connect(self) -> None:
        """Initialize database connection."""
        self.db_path.mkdir(parents=True, exist_ok=True)
        self._db = lancedb.connect(str(self.db_path))

    def close(self) -> None:
        """Close database connection."""
        self._table = None
        self._db = None

    @property
    def db(self) -> lancedb.DBConnection:
        """Get the database connection, connecting if needed."""
        if self._db is None:
            self.connect()
        return self._db  # type: ignore

    def _get_blobs_table(self) -> lancedb.table.Table:
        """Get or create the blobs table."""
        if self._table is not None:
            return self._table

        if self.BLOBS_TABLE in self.db.list_tables().tables:
            self._table = self.db.open_table(self.BLOBS_TABLE)
        else:
            schema = pa.schema([
                pa.field("id", pa.string()),
                pa.field("data", pa.binary()),
            ])
            self._table = self.db.create_table(self.BLOBS_TABLE, schema=schema)
        return self._table

    def put(self, key: str, value: bytes) -> None:
        self.put_many([(key, value)])

    def put_many(self, items: Iterable[tuple[str, bytes]]) -> None:
        """Upsert a batch of values as a single table version."""
        # Last value wins for a key repeated within the batch
        batch = {key: bytes(value) for key, value in items}
        if not batch:
            return

        rows = [{"id": key, "data": value} for key, value in batch.items()]
        try:
            (
                self._get_blobs_table()
                .merge_insert("id")
                .when_matched_update_all()
                .when_not_matched_insert_all()
                .execute(rows)
            )
        except Exception as exc:
            raise StoreWriteFailure(next(iter(batch)), str(exc)) from exc

    def get(self, key: str) -> bytes:
        table = self._get_blobs_table()
        rows = (
            table.search()
            .where(f"id = '{_quote(key)}'", prefilter=True)
            .limit(1)
            .to_list()
        )
        if not rows:
            raise BlobNotFound(key)
        return bytes(rows[0]["data"])

    def keys(self) -> Iterator[str]:
        arrow_table = self._get_blobs_table().to_arrow()
        if arrow_table.num_rows == 0:
            return iter([])
        return iter(arrow_table.column("id").to_pylist())

    def __len__(self) -> int:
        return self._get_blobs_table().count_rows()


def _quote(key: str) -> str:
    """Escape a key for use inside a single-quoted filter literal."""
    return key.replace("'", "''")
