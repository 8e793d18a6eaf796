"""PDF repackaging: strip metadata and reserialize with stream compression."""

import logging

import fitz  # PyMuPDF

from .errors import CodecFailure
from .normalizer import CODEC_DOCUMENT

logger = logging.getLogger(__name__)

PRODUCER = "PixelPack"


def strip_metadata(doc: fitz.Document) -> None:
    """Keep title and author, blank the rest, drop XMP metadata."""
    current = doc.metadata or {}
    doc.set_metadata({
        "title": current.get("title") or "",
        "author": current.get("author") or "",
        "subject": "",
        "keywords": "",
        "creator": PRODUCER,
        "producer": PRODUCER,
    })
    doc.del_xml_metadata()


def repackage_pdf(data: bytes, name: str = "document.pdf") -> bytes:
    """
    Reserialize a PDF with stripped metadata.

    The target percent does not influence this codec: it only strips
    metadata, collects garbage objects and deflates streams.

    Args:
        data: PDF bytes
        name: Source name, for error messages

    Returns:
        Repackaged PDF bytes

    Raises:
        CodecFailure: If the document is malformed, empty or encrypted
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise CodecFailure(CODEC_DOCUMENT, name, f"failed to open PDF: {e}") from e

    try:
        if doc.needs_pass:
            raise CodecFailure(CODEC_DOCUMENT, name, "document is encrypted")
        if doc.page_count == 0:
            raise CodecFailure(CODEC_DOCUMENT, name, "document has no pages")

        strip_metadata(doc)

        # Apply garbage collection and compression
        output = doc.tobytes(
            garbage=4,  # Maximum garbage collection
            deflate=True,  # Compress streams
            clean=True,  # Clean content streams
            deflate_images=True,
            deflate_fonts=True,
            no_new_id=True,  # keep output reproducible
        )
    except CodecFailure:
        raise
    except Exception as e:
        raise CodecFailure(CODEC_DOCUMENT, name, str(e)) from e
    finally:
        doc.close()

    logger.debug("document: %s %d -> %d bytes", name, len(data), len(output))
    return output
