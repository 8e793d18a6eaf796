"""Codec dispatch for a single input file."""

import logging
import zlib
from dataclasses import dataclass, field
from typing import Optional

from .config import ALGORITHM_HUFFMAN, CompressionConfig
from .content import (
    OCTET_STREAM,
    PDF_CONTENT_TYPE,
    ContentKind,
    InputFile,
    classify_content,
    decode_text,
    resolve_content_type,
)
from .document import repackage_pdf
from .huffman import huffman_encode
from .normalizer import (
    CODEC_DEFLATE,
    CODEC_DOCUMENT,
    CODEC_HUFFMAN,
    CODEC_RASTER,
    deflate_level,
    normalize,
)
from .raster import is_lossless_source, recompress_image
from .utils import calculate_compression_ratio, format_size

logger = logging.getLogger(__name__)


@dataclass
class CompressionResult:
    """Result of compressing one file."""
    name: str
    data: bytes
    content_type: str
    original_size: int
    codec: Optional[str] = None
    params: dict = field(default_factory=dict)

    @property
    def compressed_size(self) -> int:
        return len(self.data)

    @property
    def compression_ratio(self) -> float:
        return calculate_compression_ratio(self.original_size, self.compressed_size)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "content_type": self.content_type,
            "codec": self.codec,
            "params": dict(self.params),
            "original_size": self.original_size,
            "original_size_formatted": format_size(self.original_size),
            "compressed_size": self.compressed_size,
            "compressed_size_formatted": format_size(self.compressed_size),
            "compression_ratio": round(self.compression_ratio * 100, 1),
        }


def deflate_text(text: str, target_percent: int) -> bytes:
    """zlib-wrapped DEFLATE of the UTF-8 text at the normalized level."""
    return zlib.compress(text.encode("utf-8"), deflate_level(target_percent))


def compress_text(text: str, algorithm: str, target_percent: int) -> bytes:
    """
    Compress text with the Huffman coder or with deflate.

    Any algorithm other than "huffman" selects deflate. The Huffman coder
    ignores the target percent.
    """
    if algorithm == ALGORITHM_HUFFMAN:
        return huffman_encode(text).data
    return deflate_text(text, target_percent)


def select_codec(kind: ContentKind, config: CompressionConfig) -> str:
    """Codec for a content kind; the algorithm only matters for text."""
    if kind is ContentKind.IMAGE:
        return CODEC_RASTER
    if kind is ContentKind.DOCUMENT:
        return CODEC_DOCUMENT
    if kind is ContentKind.TEXT:
        return CODEC_HUFFMAN if config.text_algorithm == ALGORITHM_HUFFMAN else CODEC_DEFLATE
    raise ValueError(f"Unknown content kind: {kind}")


def codec_params(input_file: InputFile, codec: str, config: CompressionConfig) -> dict:
    mime = resolve_content_type(input_file.content_type, input_file.data)
    lossless = codec == CODEC_RASTER and is_lossless_source(mime)
    return normalize(codec, config.target_percent, lossless=lossless)


def compress_file(input_file: InputFile, config: CompressionConfig) -> CompressionResult:
    """
    Classify one file and run it through the matching codec.

    Images go to the raster codec and PDFs to the document codec whatever
    the algorithm says; other files are text and use the configured text
    algorithm. The output keeps the source name.

    Args:
        input_file: File to compress
        config: Shared configuration

    Returns:
        CompressionResult

    Raises:
        UnsupportedContent: If the file's type matches no codec
        CodecFailure: If the selected codec fails
    """
    kind = classify_content(input_file.name, input_file.content_type, input_file.data)
    codec = select_codec(kind, config)
    params = codec_params(input_file, codec, config)

    logger.debug("dispatch: %s kind=%s codec=%s params=%s", input_file.name, kind.value, codec, params)

    if codec == CODEC_RASTER:
        raster = recompress_image(
            input_file.data,
            config.target_percent,
            content_type=resolve_content_type(input_file.content_type, input_file.data),
            name=input_file.name,
        )
        data, content_type = raster.data, raster.content_type
    elif codec == CODEC_DOCUMENT:
        data, content_type = repackage_pdf(input_file.data, input_file.name), PDF_CONTENT_TYPE
    else:
        text = decode_text(input_file.data)
        data, content_type = compress_text(text, codec, config.target_percent), OCTET_STREAM

    return CompressionResult(
        name=input_file.name,
        data=data,
        content_type=content_type,
        original_size=input_file.size,
        codec=codec,
        params=params,
    )
