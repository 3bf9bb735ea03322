"""CLI for sup."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import SupConfig, load_config
from .download import download as run_download
from .errors import ConfigError, SupError
from .hashing import compute_digest
from .models import UploadOptions
from .storage import Storer, make_storer
from .upload import upload as run_upload
from .utils import humanize_size


app = typer.Typer(help="""\
Content-addressed blob storage. Upload files under their SHA-256 digest,
verified while streaming, and fetch them back by digest.""")

console = Console()

_state = {"config_path": None}


@app.callback()
def main_options(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to sup.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Global options."""
    _state["config_path"] = config
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _load() -> SupConfig:
    try:
        return load_config(_state["config_path"])
    except ConfigError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _open_storer(config: SupConfig) -> Storer:
    try:
        storer = make_storer(config)
    except (ValueError, NotImplementedError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)
    if config.backend == "memory":
        console.print("[yellow]Warning: memory backend does not persist between runs[/yellow]")
    return storer


@app.command()
def upload(
    path: Path = typer.Argument(..., help="File to upload", exists=True, dir_okay=False),
    digest: Optional[str] = typer.Option(None, "--digest", "-d", help="Claimed SHA-256 (default: computed)"),
    accept: Optional[List[str]] = typer.Option(None, "--accept", "-a", help="Accepted MIME type (repeatable)"),
):
    """Upload a file under its digest.

    Examples:
        sup upload photo.gif --accept image/gif
        sup upload data.bin --digest 09ca7e4e...
    """
    config = _load()
    storer = _open_storer(config)

    claimed = digest or compute_digest(path)
    options = UploadOptions(accepted_types=accept or config.accepted_types)

    try:
        file, created = run_upload(
            storer, path.open("rb"), claimed, options, chunk_size=config.chunk_size
        )
    except SupError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if created:
        console.print(f"[green]✓[/green] Uploaded {file.digest}")
    else:
        console.print(f"[blue]=[/blue] Already stored {file.digest}")
    console.print(f"  Size: {humanize_size(file.size)}")
    if file.content_type:
        console.print(f"  Type: {file.content_type}")


@app.command()
def download(
    digest: str = typer.Argument(..., help="Digest of the blob"),
    dest: Path = typer.Argument(..., help="Destination file"),
):
    """Download a blob to a file."""
    config = _load()
    storer = _open_storer(config)

    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        run_download(storer, dest.open("wb"), digest, chunk_size=config.chunk_size)
    except SupError as e:
        dest.unlink(missing_ok=True)
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Wrote {dest}")


@app.command()
def stat(
    digest: str = typer.Argument(..., help="Digest of the blob"),
):
    """Show metadata for a stored blob."""
    config = _load()
    storer = _open_storer(config)

    try:
        file = storer.stat(digest)
    except SupError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Digest", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Content type")
    table.add_row(file.digest, humanize_size(file.size), file.content_type or "[dim]unknown[/dim]")
    console.print(table)


@app.command()
def delete(
    digest: str = typer.Argument(..., help="Digest of the blob"),
):
    """Delete a blob. Deleting a missing blob is not an error."""
    config = _load()
    storer = _open_storer(config)
    storer.delete(digest)
    console.print(f"[green]✓[/green] Deleted {digest}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
