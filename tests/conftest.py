from __future__ import annotations

import io

import fitz  # PyMuPDF
import pytest
from PIL import Image


def image_bytes(fmt: str, size=(64, 48), mode: str = "RGB", color=(200, 30, 30)) -> bytes:
    img = Image.new(mode, size, color)
    # a diagonal stripe so encoders have something to chew on
    alpha = (128,) if mode == "RGBA" else ()
    for x in range(size[0]):
        img.putpixel((x, x % size[1]), (x * 3 % 256, 0, 255 - x * 3 % 256) + alpha)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def pdf_bytes(text: str = "Hello PixelPack", pages: int = 1, subject: str = "secret subject") -> bytes:
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page()
        page.insert_text((72, 72), f"{text} page {i + 1}")
    doc.set_metadata({
        "title": "Report",
        "author": "Jane",
        "subject": subject,
        "keywords": "alpha, beta",
        "creator": "Writer",
        "producer": "Some Producer",
    })
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def png_bytes() -> bytes:
    return image_bytes("PNG", mode="RGBA", color=(0, 120, 200, 255))


@pytest.fixture
def jpeg_bytes() -> bytes:
    return image_bytes("JPEG", size=(200, 100))


@pytest.fixture
def sample_pdf() -> bytes:
    return pdf_bytes()
