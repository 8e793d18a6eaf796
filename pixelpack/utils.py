"""Utility functions for PixelPack."""

from pathlib import Path
from typing import Union

from .config import ARCHIVE_NAME


def format_size(size_bytes: int) -> str:
    """
    Format bytes to human-readable string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable size string
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.2f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"


def calculate_compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Calculate compression ratio.

    Args:
        original_size: Original size in bytes
        compressed_size: Compressed size in bytes

    Returns:
        Compression ratio (e.g., 0.65 means 65% reduction, negative if larger)
    """
    if original_size == 0:
        return 0.0
    return 1 - (compressed_size / original_size)


def get_output_path(
    input_path: Union[str, Path],
    output_path: Union[str, Path, None],
    batch: bool = False,
    suffix: str = "_compressed",
) -> Path:
    """
    Determine output file path.

    Args:
        input_path: First input file path
        output_path: Explicit output path or None
        batch: Whether the output is the multi-file archive
        suffix: Suffix to add to the stem if no output path specified

    Returns:
        Output file path
    """
    if output_path:
        return Path(output_path)

    if batch:
        return Path.cwd() / ARCHIVE_NAME

    input_path = Path(input_path)
    return input_path.parent / f"{input_path.stem}{suffix}{input_path.suffix}"
