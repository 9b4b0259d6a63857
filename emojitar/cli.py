"""CLI commands for emojitar."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from emojitar.archiver import EmojiArchiver
from emojitar.errors import EmojitarError
from emojitar.models.config import ArchiverConfig
from emojitar.paths import directory_paths

console = Console()


def read_text(text: str | None, file: str | None) -> str:
    """Message text from the argument, a file, or stdin."""
    if text is not None:
        return text
    if file is not None:
        return Path(file).read_text(encoding="utf-8")
    return sys.stdin.read()


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="YAML config file")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """emojitar - Archive the custom emoji in a message."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = ArchiverConfig.load(Path(config_path) if config_path else None)


@main.command()
@click.argument("text", required=False)
@click.option("--file", "-f", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Read message text from a file")
@click.pass_context
def scan(ctx: click.Context, text: str | None, file: str | None) -> None:
    """List the emoji referenced by a message."""
    archiver = EmojiArchiver(ctx.obj["config"])
    refs = archiver.scan(read_text(text, file))

    if not refs:
        console.print("[yellow]No custom emoji found[/yellow]")
        return

    paths = archiver.file_paths(refs)

    table = Table(title="Emoji")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Animated")
    table.add_column("Archive Path", style="dim")

    for ref, path in zip(refs, paths):
        table.add_row(ref.id, ref.name, "yes" if ref.animated else "", path)

    console.print(table)
    console.print(f"[dim]{len(refs)} emoji in {len(directory_paths(paths))} directories[/dim]")


@main.command()
@click.argument("text", required=False)
@click.option("--file", "-f", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Read message text from a file")
@click.option("--output-dir", "-o", default=".", help="Directory for the archive")
@click.option("--deadline", "-d", default=None, type=float, help="Give up after this many seconds")
@click.option("--order", type=click.Choice(["completion", "reference"]), default=None,
              help="File order inside the archive")
@click.option("--on-failure", type=click.Choice(["abandon", "raise", "skip"]), default=None,
              help="What a failed download does")
@click.pass_context
def pack(
    ctx: click.Context,
    text: str | None,
    file: str | None,
    output_dir: str,
    deadline: float | None,
    order: str | None,
    on_failure: str | None,
) -> None:
    """Download every emoji in a message into a tar.gz."""
    config: ArchiverConfig = ctx.obj["config"]
    overrides = {
        k: v
        for k, v in {"deadline": deadline, "order": order, "on_failure": on_failure}.items()
        if v is not None
    }
    if overrides:
        config = ArchiverConfig.model_validate({**config.model_dump(), **overrides})

    message = read_text(text, file)

    async def run():
        async with EmojiArchiver(config) as archiver:
            return await archiver.build(message)

    try:
        with console.status("Downloading emoji..."):
            result = asyncio.run(run())
    except EmojitarError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if result is None:
        console.print("[yellow]No custom emoji found[/yellow]")
        return

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / result.filename
    out_path.write_bytes(result.data)

    console.print(
        f"[green]Wrote {result.file_count} emoji ({result.size} bytes) to {out_path}[/green]"
    )
    for ref in result.missing:
        console.print(f"[yellow]Missing: {ref.name} ({ref.id})[/yellow]")


@main.command()
@click.option("--host", default="127.0.0.1", help="Host to bind")
@click.option("--port", default=8000, help="Port to bind")
@click.option("--prefix", default="/emojitar", help="API prefix")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, prefix: str) -> None:
    """Start the API server."""
    import uvicorn
    from fastapi import FastAPI

    from emojitar.api import create_router

    archiver = EmojiArchiver(ctx.obj["config"])

    app = FastAPI(title="emojitar API")
    app.include_router(create_router(archiver, prefix=prefix))

    console.print(f"[green]Starting server at http://{host}:{port}{prefix}[/green]")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
