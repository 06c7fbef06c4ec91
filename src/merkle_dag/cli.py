"""CLI for Merkle DAG."""

import shutil
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import MDAG_DIR, __version__
from .config import MdagConfig, get_mdag_dir, load_config, save_config
from .dag import DagBuilder
from .errors import MerkleDagError
from .manifest import create_empty_manifest, load_manifest, save_manifest
from .nodes import load_path
from .store import LanceStore

console = Console()
error_console = Console(stderr=True)


def get_project_root() -> Path:
    """Get the project root directory (current working directory)."""
    return Path.cwd()


def is_initialized(project_root: Path) -> bool:
    """Check if mdag is initialized in the project."""
    return get_mdag_dir(project_root).exists()


def require_initialized(project_root: Path) -> None:
    """Exit with an error if mdag is not initialized."""
    if not is_initialized(project_root):
        error_console.print(
            "[red]Error:[/red] Not initialized. Run [bold]mdag init[/bold] first."
        )
        sys.exit(1)


def fail(exc: Exception) -> NoReturn:
    """Report an error and exit."""
    error_console.print(f"[red]Error:[/red] {escape(str(exc))}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="mdag")
def main() -> None:
    """Merkle DAG - Content-addressed trees with a single root digest."""
    pass


@main.command()
@click.option(
    "--hash",
    "hash_algorithm",
    type=click.Choice(["sha256", "sha3_256", "blake2s"]),
    default="sha256",
    help="Hash algorithm used for digests",
)
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(hash_algorithm: str, force: bool) -> None:
    """Initialize mdag in the current project."""
    project_root = get_project_root()
    mdag_dir = get_mdag_dir(project_root)

    if mdag_dir.exists() and not force:
        error_console.print(
            f"[yellow]Warning:[/yellow] {MDAG_DIR}/ already exists. Use --force to reinitialize."
        )
        sys.exit(1)

    mdag_dir.mkdir(parents=True, exist_ok=True)

    config = MdagConfig(hash_algorithm=hash_algorithm)
    save_config(config, project_root)
    save_manifest(create_empty_manifest(), project_root)

    LanceStore(project_root).connect()

    console.print(
        Panel(
            f"[green]Initialized Merkle DAG[/green]\n\n"
            f"Hash algorithm: [bold]{hash_algorithm}[/bold]\n"
            f"Store directory: [dim]{mdag_dir}[/dim]\n\n"
            f"Next step:\n"
            f"  Run [bold]mdag add PATH[/bold] to commit a file or directory",
            title="mdag init",
        )
    )


@main.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def add(path: Path, verbose: bool) -> None:
    """Store PATH in the DAG and print its root digest."""
    project_root = get_project_root()
    require_initialized(project_root)

    try:
        config = load_config(project_root)
        manifest = load_manifest(project_root) or create_empty_manifest()
        node = load_path(path, config.exclude_patterns)
    except (ValueError, OSError) as exc:
        fail(exc)

    store = LanceStore(project_root)
    builder = DagBuilder(store, hasher=config.hasher(), console=console, verbose=verbose)

    if verbose:
        console.print(f"[bold]Adding {path}...[/bold]")

    try:
        root = builder.add(node)
    except MerkleDagError as exc:
        fail(exc)
    finally:
        store.close()

    manifest.record(root, str(path), config.hash_algorithm, builder.stats)
    save_manifest(manifest, project_root)

    stats = builder.stats
    table = Table(title="Add Complete")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")

    table.add_row("Files stored", str(stats.files_stored))
    table.add_row("Directories stored", str(stats.directories_stored))
    table.add_row("Duplicates skipped", str(stats.duplicates_skipped))
    table.add_row("Bytes written", str(stats.bytes_written))

    console.print(table)
    console.print(f"Root: [bold green]{root}[/bold green]", soft_wrap=True)


@main.command()
@click.argument("key")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the blob to a file instead of stdout",
)
def get(key: str, output: Path | None) -> None:
    """Print the blob stored under KEY."""
    project_root = get_project_root()
    require_initialized(project_root)

    store = LanceStore(project_root)
    try:
        data = store.get(key)
    except MerkleDagError as exc:
        fail(exc)
    finally:
        store.close()

    if output is None:
        click.echo(data, nl=False)
    else:
        output.write_bytes(data)
        console.print(f"[green]Wrote {len(data)} bytes to {output}[/green]")


@main.command()
def status() -> None:
    """Show store status and committed roots."""
    project_root = get_project_root()
    require_initialized(project_root)

    try:
        config = load_config(project_root)
        manifest = load_manifest(project_root)
    except (ValueError, OSError) as exc:
        fail(exc)

    store = LanceStore(project_root)
    entries = len(store)
    store.close()

    table = Table(title="Merkle DAG Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Project root", str(project_root))
    table.add_row("Hash algorithm", config.hash_algorithm)
    table.add_row("Stored entries", str(entries))

    if manifest:
        table.add_row("Committed roots", str(len(manifest.roots)))
        table.add_row("Last updated", manifest.updated_at.isoformat())
    else:
        table.add_row("Committed roots", "[red]No manifest found[/red]")

    console.print(table)

    if manifest and manifest.roots:
        roots = Table(title="Roots")
        roots.add_column("Source", style="cyan")
        roots.add_column("Root", no_wrap=True)
        roots.add_column("Added")
        for record in manifest.roots:
            roots.add_row(record.source, record.root, record.added_at.isoformat())
        console.print(roots)


@main.command()
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
def clean(force: bool) -> None:
    """Remove the .merkle-dag directory."""
    project_root = get_project_root()
    mdag_dir = get_mdag_dir(project_root)

    if not mdag_dir.exists():
        console.print(f"[dim]Nothing to clean - {MDAG_DIR}/ does not exist.[/dim]")
        return

    if not force:
        if not click.confirm(f"Remove {mdag_dir}?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    shutil.rmtree(mdag_dir)
    console.print(f"[green]Removed {MDAG_DIR}/[/green]")


if __name__ == "__main__":
    main()
