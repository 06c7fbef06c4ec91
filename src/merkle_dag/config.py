"""Configuration management for Merkle DAG."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field

from . import CONFIG_FILE, MDAG_DIR
from .hashing import HashAlgorithm, HashProvider, get_hasher


class MdagConfig(BaseModel):
    """Configuration for Merkle DAG."""

    version: int = 1
    hash_algorithm: HashAlgorithm = "sha256"
    exclude_patterns: list[str] = Field(
        default=[
            ".git",
            "__pycache__",
            "venv",
            ".venv",
            ".merkle-dag",
            "node_modules",
            ".DS_Store",
        ]
    )

    def hasher(self) -> HashProvider:
        """Get the hash provider for the configured algorithm."""
        return get_hasher(self.hash_algorithm)


def get_mdag_dir(project_root: Path) -> Path:
    """Get the .merkle-dag directory path."""
    return project_root / MDAG_DIR


def get_config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return get_mdag_dir(project_root) / CONFIG_FILE


def load_config(project_root: Path) -> MdagConfig:
    """Load configuration from the project's config file.

    Falls back to defaults if file doesn't exist.
    Environment variables can override config values.
    """
    config_path = get_config_path(project_root)

    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)
        config = MdagConfig.model_validate(data)
    else:
        config = MdagConfig()

    return _apply_env_overrides(config)


def save_config(config: MdagConfig, project_root: Path) -> None:
    """Save configuration to the project's config file."""
    config_path = get_config_path(project_root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config.model_dump(), f, indent=2)


def _apply_env_overrides(config: MdagConfig) -> MdagConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    # MDAG_HASH_ALGORITHM
    if algorithm := os.environ.get("MDAG_HASH_ALGORITHM"):
        data["hash_algorithm"] = algorithm

    # MDAG_EXCLUDE_PATTERNS (comma-separated)
    if patterns := os.environ.get("MDAG_EXCLUDE_PATTERNS"):
        data["exclude_patterns"] = [p.strip() for p in patterns.split(",") if p.strip()]

    return MdagConfig.model_validate(data)
