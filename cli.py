#!/usr/bin/env python3
"""
PixelPack - CLI Interface

Compress text, images and PDFs with a single target-percent control.

Usage:
    pixelpack compress notes.txt --algorithm huffman
    pixelpack compress photo.jpg --target 70 --output small.jpg
    pixelpack compress a.txt b.png c.pdf --preset max-reduction
    pixelpack plan *.txt *.png --json-output
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pixelpack import (
    CompressionConfig,
    PixelPackError,
    compress_batch,
    load_input_file,
    plan_compression,
)
from pixelpack.config import (
    ALGORITHMS,
    ALGORITHM_DEFLATE,
    MAX_TARGET_PERCENT,
    MIN_TARGET_PERCENT,
    PRESETS,
)
from pixelpack.utils import format_size, get_output_path

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool):
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def create_progress_bar():
    """Create a rich spinner for the running job."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )


def build_config(algorithm: str, target: Optional[int], preset: Optional[str]) -> CompressionConfig:
    """Resolve --target/--preset into one configuration."""
    if target is not None and preset is not None:
        raise click.UsageError("Use either --target or --preset, not both")
    if preset is not None:
        return CompressionConfig.from_preset(preset, algorithm=algorithm)
    if target is None:
        return CompressionConfig(algorithm=algorithm)
    return CompressionConfig(algorithm=algorithm, target_percent=target)


def fail(error: PixelPackError, json_output: bool):
    """Report a typed error and exit with its code."""
    if json_output:
        click.echo(json.dumps({"error": str(error), "type": type(error).__name__}), err=True)
    else:
        err_console.print(f"[bold red]Error: {error}[/bold red]")
    sys.exit(error.exit_code)


def config_options(func):
    """Options shared by compress and plan."""
    func = click.option(
        "--json-output", "-j",
        is_flag=True,
        help="Output results as JSON",
    )(func)
    func = click.option(
        "--preset", "-p",
        type=click.Choice(list(PRESETS)),
        help="Named target: max-quality (10), balanced (30), max-reduction (70)",
    )(func)
    func = click.option(
        "--target", "-t",
        type=click.IntRange(MIN_TARGET_PERCENT, MAX_TARGET_PERCENT),
        help=f"Target compression percent ({MIN_TARGET_PERCENT}-{MAX_TARGET_PERCENT}, default: 30)",
    )(func)
    func = click.option(
        "--algorithm", "-a",
        type=click.Choice(list(ALGORITHMS)),
        default=ALGORITHM_DEFLATE,
        help="Text algorithm (images and PDFs always use their own codec)",
    )(func)
    return func


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """PixelPack - Compress text, images and PDFs locally."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("input_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@config_options
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    help="Output path (default: <name>_compressed<ext>, or pixelpack-compressed.zip for several files)",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
def compress(
    input_files: tuple,
    algorithm: str,
    target: Optional[int],
    preset: Optional[str],
    json_output: bool,
    output: Optional[str],
    verbose: bool,
):
    """Compress one file, or several files into one archive."""
    setup_logging(verbose)
    config = build_config(algorithm, target, preset)
    files = [load_input_file(p) for p in input_files]
    output_path = get_output_path(input_files[0], output, batch=len(files) > 1)

    if not json_output:
        console.print(Panel(
            f"[bold blue]PixelPack[/bold blue]\n"
            f"Files: {len(files)}\n"
            f"Algorithm: {config.algorithm}\n"
            f"Target: {config.target_percent}%",
            title="Compression Job",
        ))

    try:
        if json_output:
            result = compress_batch(files, config)
        else:
            with create_progress_bar() as progress:
                progress.add_task(f"Compressing {len(files)} file(s)...", total=None)
                result = compress_batch(files, config)
    except PixelPackError as e:
        fail(e, json_output)

    output_path.write_bytes(result.data)

    if json_output:
        summary = result.to_dict()
        summary["output_path"] = str(output_path)
        click.echo(json.dumps(summary, indent=2))
        return

    table = Table(title="Compression Results")
    table.add_column("File", style="cyan")
    table.add_column("Codec")
    table.add_column("Original", justify="right")
    table.add_column("Compressed", justify="right", style="green")
    table.add_column("Reduction", justify="right")

    for r in result.results:
        table.add_row(
            r.name,
            r.codec,
            format_size(r.original_size),
            format_size(r.compressed_size),
            f"{r.compression_ratio * 100:.1f}%",
        )

    console.print(table)
    console.print(f"\n[bold green]Saved to: {output_path}[/bold green] ({format_size(result.compressed_size)})")


@cli.command()
@click.argument("input_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@config_options
def plan(
    input_files: tuple,
    algorithm: str,
    target: Optional[int],
    preset: Optional[str],
    json_output: bool,
):
    """Show which codec and parameters each file would get."""
    setup_logging(False)
    config = build_config(algorithm, target, preset)
    files = [load_input_file(p) for p in input_files]
    plans = plan_compression(files, config)

    if json_output:
        click.echo(json.dumps({
            "config": config.to_dict(),
            "files": [p.to_dict() for p in plans],
        }, indent=2))
        return

    table = Table(title=f"Compression Plan (target {config.target_percent}%)")
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Kind")
    table.add_column("Codec", style="green")
    table.add_column("Parameters")

    for p in plans:
        if p.error:
            table.add_row(p.name, format_size(p.size), "-", "[red]unsupported[/red]", p.error)
            continue
        params = ", ".join(f"{k}={v}" for k, v in p.params.items()) or "-"
        table.add_row(p.name, format_size(p.size), p.kind, p.codec, params)

    console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
