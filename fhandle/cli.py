"""Command-line interface for inspecting files through fhandle backends."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fhandle.common.constants import COPY_CHUNK_SIZE
from fhandle.common.models import HandleInfo, HandleKind
from fhandle.config import HandleSettings, configure_logging, load_settings, parse_size
from fhandle.handle import FileHandle, open_handle

logger = logging.getLogger("fhandle.cli")

app = typer.Typer(
    name="fhandle",
    help="fhandle - inspect files through standard or stream backends",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()

BackendOption = typer.Option(
    None,
    "--backend",
    "-b",
    help="Backend: standard or stream [default: from config]",
)


def _settings() -> HandleSettings:
    settings = load_settings()
    configure_logging(settings)
    return settings


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[bold green]✓[/bold green] {message}")


def print_error(message: str) -> None:
    """Print error message."""
    console.print(f"[bold red]✗[/bold red] {message}")


def _resolve_kind(backend: Optional[str], settings: HandleSettings) -> HandleKind:
    value = backend or settings.default_backend
    try:
        return HandleKind(value)
    except ValueError:
        print_error(f"Unknown backend: {value} (expected standard or stream)")
        raise typer.Exit(2)


def _open_or_exit(path: Path, mode: str, kind: HandleKind) -> FileHandle:
    handle = open_handle(path, mode, kind)
    if handle is None:
        print_error(f"Cannot open {path} ({kind.value} backend)")
        raise typer.Exit(1)
    return handle


def format_size(size: int) -> str:
    """Format size in human-readable format."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024  # type: ignore[assignment]
    return f"{size:.1f} PB"


def hexdump_rows(data: bytes, offset: int = 0, width: int = 16) -> list[str]:
    """Format *data* as hex dump rows starting at *offset*."""
    rows = []
    for i in range(0, len(data), width):
        chunk = data[i : i + width]
        hex_part = " ".join(f"{b:02x}" for b in chunk)
        text = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)
        rows.append(f"{offset + i:08x}  {hex_part:<{width * 3 - 1}}  {text}")
    return rows


@app.command()
def info(
    path: Path = typer.Argument(..., help="File to inspect"),
    backend: Optional[str] = BackendOption,
) -> None:
    """Show size, position and error state of a file."""
    settings = _settings()
    kind = _resolve_kind(backend, settings)

    with _open_or_exit(path, "rb", kind) as handle:
        snapshot = HandleInfo(
            path=str(path),
            kind=handle.kind,
            size=handle.size(),
            position=handle.tell(),
            at_end=handle.at_end(),
            error_flag=handle.check_error(),
            last_error=handle.last_error(),
        )

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Path", snapshot.path)
    table.add_row("Backend", snapshot.kind.value)
    size_text = f"{snapshot.size} ({format_size(snapshot.size)})" if snapshot.size >= 0 else "unknown"
    table.add_row("Size", size_text)
    table.add_row("Position", str(snapshot.position))
    table.add_row("End of stream", "yes" if snapshot.at_end else "no")
    table.add_row("Error flag", "yes" if snapshot.error_flag else "no")
    table.add_row("Last error", snapshot.last_error or "[dim]none[/dim]")
    console.print(Panel(table, title="[bold cyan]File Handle[/bold cyan]", border_style="cyan"))


@app.command()
def dump(
    path: Path = typer.Argument(..., help="File to dump"),
    offset: int = typer.Option(0, "--offset", "-o", help="Start offset in bytes"),
    length: Optional[str] = typer.Option(None, "--length", "-n", help="Bytes to dump (e.g. 256, 4KB)"),
    backend: Optional[str] = BackendOption,
) -> None:
    """Hex dump part of a file."""
    settings = _settings()
    kind = _resolve_kind(backend, settings)
    limit = parse_size(length) if length else settings.max_dump_size

    with _open_or_exit(path, "rb", kind) as handle:
        if handle.seek(offset) != 0:
            print_error(f"Cannot seek to {offset}: {handle.last_error()}")
            raise typer.Exit(1)
        data = bytearray()
        while len(data) < limit:
            chunk = handle.read(1, min(COPY_CHUNK_SIZE, limit - len(data)))
            data += chunk
            if len(chunk) < COPY_CHUNK_SIZE:
                break

    for row in hexdump_rows(bytes(data), offset, settings.dump_width):
        console.print(row, highlight=False, markup=False)


@app.command()
def lines(
    path: Path = typer.Argument(..., help="File to read"),
    length: Optional[int] = typer.Option(None, "--length", "-l", min=2, help="Line buffer length (at least 2)"),
    backend: Optional[str] = BackendOption,
) -> None:
    """Print a file line by line using get_line."""
    settings = _settings()
    kind = _resolve_kind(backend, settings)
    buf_len = length if length is not None else settings.line_length
    buffer = bytearray(buf_len)

    with _open_or_exit(path, "rb", kind) as handle:
        while True:
            line = handle.get_line(buffer, buf_len)
            if line is None:
                break
            console.print(line.decode("utf-8", errors="replace").rstrip("\r\n"), highlight=False, markup=False)


@app.command()
def copy(
    src: Path = typer.Argument(..., help="Source file"),
    dst: Path = typer.Argument(..., help="Destination file (overwritten)"),
    backend: Optional[str] = BackendOption,
) -> None:
    """Copy a file through two handles."""
    settings = _settings()
    kind = _resolve_kind(backend, settings)

    copied = 0
    with _open_or_exit(src, "rb", kind) as reader, _open_or_exit(dst, "wb", kind) as writer:
        while True:
            chunk = reader.read(1, COPY_CHUNK_SIZE)
            if chunk and writer.write(chunk) != len(chunk):
                print_error(f"Write to {dst} failed: {writer.last_error()}")
                raise typer.Exit(1)
            copied += len(chunk)
            if len(chunk) < COPY_CHUNK_SIZE:
                break
        if reader.check_error():
            print_error(f"Read from {src} failed: {reader.last_error()}")
            raise typer.Exit(1)

    print_success(f"Copied {format_size(copied)} to {dst}")


@app.command("config")
def show_config(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output config file path",
    ),
) -> None:
    """Generate a sample configuration file."""
    config_content = """# fhandle configuration
# Save to ./fhandle.yaml or ~/.fhandle/config.yaml

handle:
  backend: standard  # standard (buffered file) or stream (reader-seeker)

logging:
  level: WARNING

cli:
  line_length: 256
  dump_width: 16
  max_dump_size: 64KB
"""

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(config_content)
        print_success(f"Config written to {output}")
    else:
        console.print(Panel(config_content, title="[bold cyan]Sample Config[/bold cyan]", border_style="cyan"))


if __name__ == "__main__":
    app()
