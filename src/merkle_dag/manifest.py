"""Manifest file management for Merkle DAG."""

import json
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from . import MANIFEST_FILE, MDAG_DIR
from .dag import AddStats
from .hashing import HashAlgorithm


class RootRecord(BaseModel):
    """A root digest committed by one add."""

    root: str
    source: str
    hash_algorithm: HashAlgorithm = "sha256"
    added_at: datetime
    files_stored: int = 0
    directories_stored: int = 0
    duplicates_skipped: int = 0
    bytes_written: int = 0


class Manifest(BaseModel):
    """Manifest listing the roots committed to the project's store."""

    version: int = 1
    created_at: datetime
    updated_at: datetime
    roots: list[RootRecord] = Field(default_factory=list)

    def record(
        self,
        root: str,
        source: str,
        hash_algorithm: HashAlgorithm,
        stats: AddStats,
    ) -> RootRecord:
        """Append a root record for a completed add."""
        entry = RootRecord(
            root=root,
            source=source,
            hash_algorithm=hash_algorithm,
            added_at=datetime.now(UTC),
            files_stored=stats.files_stored,
            directories_stored=stats.directories_stored,
            duplicates_skipped=stats.duplicates_skipped,
            bytes_written=stats.bytes_written,
        )
        self.roots.append(entry)
        return entry

    @property
    def latest(self) -> RootRecord | None:
        return self.roots[-1] if self.roots else None


def get_manifest_path(project_root: Path) -> Path:
    """Get the manifest file path."""
    return project_root / MDAG_DIR / MANIFEST_FILE


def load_manifest(project_root: Path) -> Manifest | None:
    """Load manifest from the project's manifest file.

    Returns None if file doesn't exist.
    """
    manifest_path = get_manifest_path(project_root)

    if not manifest_path.exists():
        return None

    with open(manifest_path) as f:
        data = json.load(f)

    return Manifest.model_validate(data)


def save_manifest(manifest: Manifest, project_root: Path) -> None:
    """Save manifest to the project's manifest file."""
    manifest_path = get_manifest_path(project_root)
    manifest_path.parent.mkdir(parents=True, exist_ok=True)

    manifest.updated_at = datetime.now(UTC)

    with open(manifest_path, "w") as f:
        json.dump(manifest.model_dump(mode="json"), f, indent=2, default=str)


def create_empty_manifest() -> Manifest:
    """Create a new empty manifest."""
    now = datetime.now(UTC)
    return Manifest(created_at=now, updated_at=now, roots=[])
