"""Merkle DAG - Content-addressed trees over a pluggable key-value store."""

__version__ = "0.1.0"

# Directory and file constants
MDAG_DIR = ".merkle-dag"
CONFIG_FILE = "config.json"
MANIFEST_FILE = "manifest.json"
LANCEDB_DIR = "lancedb"
