"""
PixelPack

A local compressor for text, image and PDF payloads, driven by a single
target-percent control.
"""

import logging

__version__ = "1.0.0"
__author__ = "PixelPack Team"

from .analyzer import FilePlan, plan_compression
from .batch import BatchResult, compress_batch
from .compressor import CompressionResult, compress_file, compress_text
from .config import CompressionConfig, PRESETS
from .content import ContentKind, InputFile, classify_content, load_input_file
from .errors import (
    BatchFailure,
    CodecFailure,
    InvalidConfiguration,
    PixelPackError,
    UnsupportedContent,
)
from .huffman import EncodedPayload, huffman_encode

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BatchFailure",
    "BatchResult",
    "CodecFailure",
    "CompressionConfig",
    "CompressionResult",
    "ContentKind",
    "EncodedPayload",
    "FilePlan",
    "InputFile",
    "InvalidConfiguration",
    "PRESETS",
    "PixelPackError",
    "UnsupportedContent",
    "classify_content",
    "compress_batch",
    "compress_file",
    "compress_text",
    "huffman_encode",
    "load_input_file",
    "plan_compression",
]
