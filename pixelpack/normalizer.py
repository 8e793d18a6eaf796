"""Map the single target-percent knob onto each codec's native parameters."""

from dataclasses import dataclass
from typing import Optional

from .config import validate_target_percent

CODEC_HUFFMAN = "huffman"
CODEC_DEFLATE = "deflate"
CODEC_RASTER = "raster"
CODEC_DOCUMENT = "document"

DEFLATE_MIN_LEVEL = 1
DEFLATE_MAX_LEVEL = 9

MAX_DOWNSCALE = 0.5
MIN_QUALITY = 0.1

# Pillow's JPEG encoder ignores most of the range above 95
JPEG_MIN_QUALITY = 1
JPEG_MAX_QUALITY = 95


@dataclass(frozen=True)
class RasterParams:
    """Resample factor and encoder quality for one image."""
    scale: float
    quality: Optional[float] = None

    @property
    def jpeg_quality(self) -> Optional[int]:
        """Quality on Pillow's 1-95 scale, or None for lossless output."""
        if self.quality is None:
            return None
        value = int(self.quality * 100 + 0.5)
        return max(JPEG_MIN_QUALITY, min(JPEG_MAX_QUALITY, value))

    def to_dict(self) -> dict:
        return {"scale": self.scale, "quality": self.quality}


def deflate_level(target_percent: int) -> int:
    """
    Strength level for the deflate coder.

    round(target / 100 * 9), halves rounded up, clamped to [1, 9].
    Target 10 gives level 1 and target 90 gives level 8.
    """
    target_percent = validate_target_percent(target_percent)
    level = (target_percent * DEFLATE_MAX_LEVEL + 50) // 100
    return max(DEFLATE_MIN_LEVEL, min(DEFLATE_MAX_LEVEL, level))


def raster_params(target_percent: int, lossless: bool = False) -> RasterParams:
    """
    Downscale factor and quality for the raster codec.

    Args:
        target_percent: Target percent in [10, 90]
        lossless: True when the output format has no quality axis (PNG)

    Returns:
        RasterParams; quality is None for lossless output
    """
    target_percent = validate_target_percent(target_percent)
    # 1 - min(0.5, p / 200) and 1 - p / 100, kept as single divisions
    scale = (200 - min(MAX_DOWNSCALE * 200, target_percent)) / 200
    quality = None if lossless else max(MIN_QUALITY, (100 - target_percent) / 100)
    return RasterParams(scale=scale, quality=quality)


def normalize(codec: str, target_percent: int, lossless: bool = False) -> dict:
    """
    Native parameters of ``codec`` for a target percent, as a plain dict.

    The huffman and document codecs have no tunable strength, so their
    parameters are empty.
    """
    if codec == CODEC_DEFLATE:
        return {"level": deflate_level(target_percent)}
    if codec == CODEC_RASTER:
        return raster_params(target_percent, lossless=lossless).to_dict()
    if codec in (CODEC_HUFFMAN, CODEC_DOCUMENT):
        validate_target_percent(target_percent)
        return {}
    raise ValueError(f"Unknown codec: {codec}")
