"""Batch orchestration: one output for one file, a zip archive for many."""

import io
import logging
import zipfile
from dataclasses import dataclass, field
from typing import List, Sequence

from .compressor import CompressionResult, compress_file
from .config import ARCHIVE_CONTENT_TYPE, ARCHIVE_NAME, CompressionConfig
from .content import InputFile
from .errors import BatchFailure, InvalidConfiguration, PixelPackError
from .utils import calculate_compression_ratio, format_size

logger = logging.getLogger(__name__)

# Fixed timestamp so identical inputs give byte-identical archives
ARCHIVE_DATE_TIME = (1980, 1, 1, 0, 0, 0)


@dataclass
class BatchResult:
    """
    Deliverable of one invocation.

    For one file this is that file's output; for several it is the archive.
    ``results`` always lists the per-file results in input order.
    """
    name: str
    data: bytes
    content_type: str
    results: List[CompressionResult] = field(default_factory=list)

    @property
    def is_archive(self) -> bool:
        return len(self.results) > 1

    @property
    def original_size(self) -> int:
        return sum(r.original_size for r in self.results)

    @property
    def compressed_size(self) -> int:
        return len(self.data)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        ratio = calculate_compression_ratio(self.original_size, self.compressed_size)
        return {
            "name": self.name,
            "content_type": self.content_type,
            "archive": self.is_archive,
            "original_size": self.original_size,
            "original_size_formatted": format_size(self.original_size),
            "compressed_size": self.compressed_size,
            "compressed_size_formatted": format_size(self.compressed_size),
            "compression_ratio": round(ratio * 100, 1),
            "files": [r.to_dict() for r in self.results],
        }


def check_batch(files: Sequence[InputFile]) -> None:
    """Reject empty batches and batches with repeated names."""
    if not files:
        raise InvalidConfiguration("no input files")

    seen = set()
    for f in files:
        if f.name in seen:
            raise InvalidConfiguration(f"duplicate file name in batch: {f.name}")
        seen.add(f.name)


def build_archive(results: Sequence[CompressionResult]) -> bytes:
    """Pack results into a zip, one stored entry per result, named as the source."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as archive:
        for result in results:
            info = zipfile.ZipInfo(result.name, date_time=ARCHIVE_DATE_TIME)
            info.external_attr = 0o644 << 16
            archive.writestr(info, result.data)
    return buffer.getvalue()


def compress_batch(files: Sequence[InputFile], config: CompressionConfig) -> BatchResult:
    """
    Compress files in order and return a single deliverable.

    One file returns its result unchanged, and per-file errors propagate
    as-is. Several files produce an archive named ``ARCHIVE_NAME``; the first
    failure aborts the run and is raised as BatchFailure, with no archive.

    Args:
        files: Input files, processed strictly in order
        config: Configuration shared by every file

    Returns:
        BatchResult

    Raises:
        InvalidConfiguration: Empty batch or duplicate names
        BatchFailure: A file failed in a multi-file run
    """
    check_batch(files)

    if len(files) == 1:
        result = compress_file(files[0], config)
        return BatchResult(
            name=result.name,
            data=result.data,
            content_type=result.content_type,
            results=[result],
        )

    results: List[CompressionResult] = []
    for index, input_file in enumerate(files):
        try:
            results.append(compress_file(input_file, config))
        except PixelPackError as e:
            raise BatchFailure(index, input_file.name, e) from e

    data = build_archive(results)
    logger.debug("batch: %d files -> %s (%d bytes)", len(results), ARCHIVE_NAME, len(data))

    return BatchResult(
        name=ARCHIVE_NAME,
        data=data,
        content_type=ARCHIVE_CONTENT_TYPE,
        results=results,
    )
