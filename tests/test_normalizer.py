from __future__ import annotations

import pytest

from pixelpack.config import PRESETS, CompressionConfig
from pixelpack.errors import InvalidConfiguration
from pixelpack.normalizer import (
    CODEC_DEFLATE,
    CODEC_DOCUMENT,
    CODEC_HUFFMAN,
    CODEC_RASTER,
    deflate_level,
    normalize,
    raster_params,
)

TARGETS = list(range(10, 91))


def test_deflate_level_boundaries() -> None:
    assert deflate_level(10) == 1
    assert deflate_level(90) == 8


def test_deflate_level_rounds_halves_up() -> None:
    # 50 / 100 * 9 = 4.5
    assert deflate_level(50) == 5
    assert deflate_level(30) == 3


def test_deflate_level_is_monotonic() -> None:
    levels = [deflate_level(p) for p in TARGETS]
    assert levels == sorted(levels)
    assert all(1 <= lv <= 9 for lv in levels)


def test_raster_params_boundaries() -> None:
    weakest = raster_params(10)
    strongest = raster_params(90)
    assert weakest.scale == pytest.approx(0.95)
    assert weakest.quality == pytest.approx(0.9)
    assert strongest.scale == pytest.approx(0.55)
    assert strongest.quality == pytest.approx(0.1)
    assert weakest.jpeg_quality == 90
    assert strongest.jpeg_quality == 10


def test_raster_params_are_monotonic() -> None:
    params = [raster_params(p) for p in TARGETS]
    scales = [p.scale for p in params]
    qualities = [p.quality for p in params]
    assert scales == sorted(scales, reverse=True)
    assert qualities == sorted(qualities, reverse=True)
    assert min(scales) >= 0.5
    assert min(qualities) >= 0.1


def test_lossless_raster_has_no_quality() -> None:
    params = raster_params(40, lossless=True)
    assert params.quality is None
    assert params.jpeg_quality is None
    assert params.scale == pytest.approx(0.8)


def test_normalize_dispatches_per_codec() -> None:
    assert normalize(CODEC_DEFLATE, 30) == {"level": 3}
    assert normalize(CODEC_RASTER, 20) == {"scale": pytest.approx(0.9), "quality": pytest.approx(0.8)}
    assert normalize(CODEC_HUFFMAN, 70) == {}
    assert normalize(CODEC_DOCUMENT, 70) == {}
    with pytest.raises(ValueError):
        normalize("brotli", 30)


def test_normalize_is_pure() -> None:
    assert normalize(CODEC_RASTER, 55) == normalize(CODEC_RASTER, 55)


@pytest.mark.parametrize("bad", [9, 91, 0, 100, -5, 30.0, "30", True, None])
def test_out_of_range_target_is_rejected(bad) -> None:
    with pytest.raises(InvalidConfiguration):
        deflate_level(bad)
    with pytest.raises(InvalidConfiguration):
        CompressionConfig(target_percent=bad)


def test_config_defaults_and_text_algorithm() -> None:
    config = CompressionConfig()
    assert config.algorithm == "deflate"
    assert config.target_percent == 30
    assert CompressionConfig(algorithm="huffman").text_algorithm == "huffman"
    assert CompressionConfig(algorithm="image").text_algorithm == "deflate"
    assert CompressionConfig(algorithm="pdf").text_algorithm == "deflate"


def test_config_rejects_unknown_algorithm() -> None:
    with pytest.raises(InvalidConfiguration):
        CompressionConfig(algorithm="lzma")


def test_presets() -> None:
    assert PRESETS == {"max-quality": 10, "balanced": 30, "max-reduction": 70}
    config = CompressionConfig.from_preset("max-reduction", algorithm="huffman")
    assert config == CompressionConfig(algorithm="huffman", target_percent=70)
    with pytest.raises(InvalidConfiguration):
        CompressionConfig.from_preset("ultra")
