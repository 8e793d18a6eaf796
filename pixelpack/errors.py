"""Typed errors for PixelPack.

The CLI maps every error to a stable exit code via ``exit_code``.
"""

from typing import Optional

EXIT_OK = 0
EXIT_INVALID_CONFIGURATION = 2
EXIT_UNSUPPORTED_CONTENT = 3
EXIT_CODEC_FAILURE = 4
EXIT_BATCH_FAILURE = 5
EXIT_GENERIC = 10


class PixelPackError(Exception):
    """Base error for PixelPack."""

    exit_code: int = EXIT_GENERIC


class InvalidConfiguration(PixelPackError):
    """Target percent, preset or batch shape is not acceptable."""

    exit_code = EXIT_INVALID_CONFIGURATION


class UnsupportedContent(PixelPackError):
    """A file's content kind matches none of the dispatch rules."""

    exit_code = EXIT_UNSUPPORTED_CONTENT


class CodecFailure(PixelPackError):
    """A codec could not process its payload."""

    exit_code = EXIT_CODEC_FAILURE

    def __init__(self, codec: str, name: str, message: str):
        super().__init__(f"{codec} failed on {name}: {message}")
        self.codec = codec
        self.name = name


class BatchFailure(PixelPackError):
    """First per-file failure of a multi-file run."""

    exit_code = EXIT_BATCH_FAILURE

    def __init__(self, index: int, name: str, cause: PixelPackError):
        super().__init__(f"batch aborted at file #{index + 1} ({name}): {cause}")
        self.index = index
        self.name = name
        self.cause: Optional[PixelPackError] = cause
