from __future__ import annotations

import io
import struct
import zlib

import fitz  # PyMuPDF
import pytest
from PIL import Image

from pixelpack.document import PRODUCER, repackage_pdf
from pixelpack.errors import CodecFailure
from pixelpack.raster import recompress_image, scaled_size


def test_scaled_size_floors_and_keeps_one_pixel() -> None:
    assert scaled_size(101, 51, 0.5) == (50, 25)
    assert scaled_size(1, 1, 0.55) == (1, 1)


def test_png_stays_png_and_keeps_alpha(png_bytes: bytes) -> None:
    out = recompress_image(png_bytes, 30, content_type="image/png", name="icon.png")
    assert out.content_type == "image/png"
    with Image.open(io.BytesIO(out.data)) as img:
        assert img.format == "PNG"
        assert img.mode == "RGBA"
        assert img.size == (54, 40)


def test_jpeg_gets_smaller_as_target_rises(jpeg_bytes: bytes) -> None:
    gentle = recompress_image(jpeg_bytes, 10, content_type="image/jpeg")
    strong = recompress_image(jpeg_bytes, 90, content_type="image/jpeg")
    assert (gentle.width, gentle.height) == (190, 95)
    assert (strong.width, strong.height) == (110, 55)
    assert len(strong.data) < len(gentle.data)


def test_transparent_non_png_is_flattened_to_jpeg() -> None:
    img = Image.new("P", (20, 20), 3)
    img.putpalette([0, 0, 0, 255, 0, 0, 0, 255, 0, 0, 0, 255] * 64)
    buf = io.BytesIO()
    img.save(buf, format="GIF", transparency=3)

    out = recompress_image(buf.getvalue(), 50, content_type="image/gif", name="anim.gif")
    assert out.content_type == "image/jpeg"
    with Image.open(io.BytesIO(out.data)) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"


def test_undecodable_image_raises_codec_failure() -> None:
    with pytest.raises(CodecFailure) as excinfo:
        recompress_image(b"\x89PNG\r\n\x1a\ngarbage", 30, content_type="image/png", name="bad.png")
    assert isinstance(excinfo.value.__cause__, Exception)


def test_raster_is_deterministic(jpeg_bytes: bytes) -> None:
    a = recompress_image(jpeg_bytes, 45, content_type="image/jpeg")
    b = recompress_image(jpeg_bytes, 45, content_type="image/jpeg")
    assert a == b


def test_repackage_strips_metadata(sample_pdf: bytes) -> None:
    out = repackage_pdf(sample_pdf, "report.pdf")
    doc = fitz.open(stream=out, filetype="pdf")
    try:
        meta = doc.metadata
        assert meta["title"] == "Report"
        assert meta["author"] == "Jane"
        assert meta["subject"] == ""
        assert meta["keywords"] == ""
        assert meta["producer"] == PRODUCER
        assert meta["creator"] == PRODUCER
        assert "Hello PixelPack" in doc[0].get_text()
    finally:
        doc.close()


def test_repackage_is_deterministic(sample_pdf: bytes) -> None:
    assert repackage_pdf(sample_pdf) == repackage_pdf(sample_pdf)


@pytest.mark.parametrize("data", [b"", b"%PDF-1.7 but not really", b"hello world"])
def test_malformed_pdf_raises_codec_failure(data: bytes) -> None:
    with pytest.raises(CodecFailure) as excinfo:
        repackage_pdf(data, "broken.pdf")
    assert excinfo.value.codec == "document"


def test_encrypted_pdf_raises_codec_failure(sample_pdf: bytes) -> None:
    doc = fitz.open(stream=sample_pdf, filetype="pdf")
    encrypted = doc.tobytes(
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="user",
    )
    doc.close()

    with pytest.raises(CodecFailure, match="encrypted"):
        repackage_pdf(encrypted, "locked.pdf")


def oversized_png_header(width: int = 20000, height: int = 20000) -> bytes:
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    chunk = b"IHDR" + ihdr
    return b"\x89PNG\r\n\x1a\n" + struct.pack(">I", len(ihdr)) + chunk + struct.pack(">I", zlib.crc32(chunk))


def test_decompression_bomb_is_codec_failure() -> None:
    with pytest.raises(CodecFailure) as excinfo:
        recompress_image(oversized_png_header(), 30, content_type="image/png", name="bomb.png")
    assert isinstance(excinfo.value.__cause__, Image.DecompressionBombError)
