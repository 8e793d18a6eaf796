"""Raster image recompression."""

import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps

from .errors import CodecFailure
from .normalizer import CODEC_RASTER, RasterParams, raster_params

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RasterOutput:
    """Re-encoded image bytes and their MIME type."""
    data: bytes
    content_type: str
    width: int
    height: int


def is_lossless_source(content_type: str) -> bool:
    """PNG sources stay PNG; everything else is re-encoded as JPEG."""
    return "png" in content_type.lower()


def scaled_size(width: int, height: int, scale: float):
    """Target dimensions, floored and never below 1 px."""
    return max(1, int(width * scale)), max(1, int(height * scale))


def _flatten_to_rgb(image: Image.Image) -> Image.Image:
    """Convert to RGB, compositing any transparency onto white."""
    if image.mode in ("RGBA", "P", "LA", "PA"):
        # Create white background for transparency
        background = Image.new("RGB", image.size, (255, 255, 255))
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        background.paste(image, mask=image.split()[-1])
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def recompress_image(
    data: bytes,
    target_percent: int,
    content_type: str = "",
    name: str = "image",
) -> RasterOutput:
    """
    Resample and re-encode an image at the normalized scale and quality.

    Args:
        data: Encoded source image
        target_percent: Target percent in [10, 90]
        content_type: Resolved MIME type of the source
        name: Source name, for error messages

    Returns:
        RasterOutput with PNG bytes for PNG sources, JPEG bytes otherwise

    Raises:
        CodecFailure: If Pillow cannot decode or encode the image
    """
    lossless = is_lossless_source(content_type)
    params: RasterParams = raster_params(target_percent, lossless=lossless)

    try:
        with Image.open(io.BytesIO(data)) as source:
            source.load()
            pil_image = ImageOps.exif_transpose(source)
    except Exception as e:
        raise CodecFailure(CODEC_RASTER, name, f"cannot decode image: {e}") from e

    try:
        new_size = scaled_size(pil_image.width, pil_image.height, params.scale)

        if lossless:
            if pil_image.mode == "P":
                pil_image = pil_image.convert("RGBA")
            if new_size != pil_image.size:
                pil_image = pil_image.resize(new_size, Image.Resampling.LANCZOS)
            out_type = "image/png"
            save_kwargs = {"format": "PNG", "optimize": True}
        else:
            pil_image = _flatten_to_rgb(pil_image)
            if new_size != pil_image.size:
                pil_image = pil_image.resize(new_size, Image.Resampling.LANCZOS)
            out_type = "image/jpeg"
            save_kwargs = {"format": "JPEG", "quality": params.jpeg_quality, "optimize": True}

        img_buffer = io.BytesIO()
        pil_image.save(img_buffer, **save_kwargs)
    except (OSError, ValueError) as e:
        raise CodecFailure(CODEC_RASTER, name, f"cannot encode image: {e}") from e

    logger.debug(
        "raster: %s scale=%.3f quality=%s -> %dx%d %s",
        name, params.scale, params.jpeg_quality, new_size[0], new_size[1], out_type,
    )
    return RasterOutput(
        data=img_buffer.getvalue(),
        content_type=out_type,
        width=new_size[0],
        height=new_size[1],
    )
