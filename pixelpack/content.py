"""Input files and content-kind classification."""

import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import UnsupportedContent


class ContentKind(Enum):
    """Closed set of payload families the dispatcher knows about."""
    IMAGE = "image"
    DOCUMENT = "document"
    TEXT = "text"


PDF_CONTENT_TYPE = "application/pdf"
OCTET_STREAM = "application/octet-stream"

# Application types that carry plain text
TEXTUAL_APPLICATION_TYPES = {
    "application/json",
    "application/ld+json",
    "application/xml",
    "application/xhtml+xml",
    "application/javascript",
    "application/x-javascript",
    "application/ecmascript",
    "application/x-yaml",
    "application/yaml",
    "application/toml",
    "application/sql",
    "application/x-sh",
    "application/x-python-code",
    "application/rtf",
    "application/csv",
    "application/x-tex",
    "application/x-latex",
}

# (offset, signature, mime type)
MAGIC_SIGNATURES = (
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"BM", "image/bmp"),
    (0, b"II*\x00", "image/tiff"),
    (0, b"MM\x00*", "image/tiff"),
    (8, b"WEBP", "image/webp"),
    (0, b"%PDF-", PDF_CONTENT_TYPE),
)


@dataclass(frozen=True)
class InputFile:
    """One (name, content type, raw bytes) triple handed to the core."""
    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def sniff_content_type(data: bytes) -> Optional[str]:
    """Guess a MIME type from leading magic bytes."""
    for offset, signature, mime in MAGIC_SIGNATURES:
        if data[offset:offset + len(signature)] == signature:
            # RIFF container check for WebP
            if mime == "image/webp" and not data.startswith(b"RIFF"):
                continue
            return mime
    return None


def _base_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def _is_textual(mime: str) -> bool:
    return mime.startswith("text/") or mime in TEXTUAL_APPLICATION_TYPES or mime.endswith(("+json", "+xml"))


def _is_known_family(mime: str) -> bool:
    return (
        mime in ("", OCTET_STREAM)
        or mime.startswith("image/")
        or mime == PDF_CONTENT_TYPE
        or _is_textual(mime)
    )


def looks_like_text(data: bytes) -> bool:
    """True for NUL-free payloads that decode as UTF-8."""
    if b"\x00" in data:
        return False
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def resolve_content_type(content_type: str, data: bytes = b"") -> str:
    """
    Effective MIME type of a payload.

    The declared type wins unless it is empty or generic, in which case the
    magic bytes decide. Returns an empty string when nothing is known.
    """
    mime = _base_type(content_type or "")
    if mime in ("", OCTET_STREAM):
        return sniff_content_type(data) or mime
    return mime


def classify_content(name: str, content_type: str, data: bytes = b"") -> ContentKind:
    """
    Resolve a file's content kind once, at ingress.

    Priority: declared image type, then PDF by declared type or ``.pdf``
    suffix, then magic-byte sniffing for undeclared or generic types, then
    text. Declared types outside these families are rejected.

    Args:
        name: File name
        content_type: Declared MIME type (may be empty)
        data: Raw bytes, used for sniffing

    Returns:
        ContentKind

    Raises:
        UnsupportedContent: If the declared type matches no family
    """
    mime = resolve_content_type(content_type, data)

    if mime.startswith("image/"):
        return ContentKind.IMAGE
    if mime == PDF_CONTENT_TYPE or name.lower().endswith(".pdf"):
        return ContentKind.DOCUMENT
    if mime in ("", OCTET_STREAM) or _is_textual(mime):
        return ContentKind.TEXT

    raise UnsupportedContent(f"{name}: unsupported content type {mime!r}")


def decode_text(data: bytes) -> str:
    """Decode a text payload as UTF-8, replacing invalid sequences."""
    return data.decode("utf-8", errors="replace")


def load_input_file(path: Union[str, Path]) -> InputFile:
    """
    Read a file from disk into an InputFile.

    The content type is guessed from the file name; unknown extensions
    leave it empty so the classifier sniffs the bytes instead. A guess
    outside the supported families is also dropped when the bytes are
    plain text, since extensions like ``.ts`` are ambiguous.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    data = path.read_bytes()
    content_type, _ = mimetypes.guess_type(path.name)
    content_type = content_type or ""
    if not _is_known_family(_base_type(content_type)) and looks_like_text(data):
        content_type = ""
    return InputFile(name=path.name, content_type=content_type, data=data)
