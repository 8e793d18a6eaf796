"""Compression configuration shared by every codec in one invocation."""

from dataclasses import dataclass

from .errors import InvalidConfiguration

MIN_TARGET_PERCENT = 10
MAX_TARGET_PERCENT = 90
DEFAULT_TARGET_PERCENT = 30

ALGORITHM_HUFFMAN = "huffman"
ALGORITHM_DEFLATE = "deflate"
ALGORITHM_IMAGE = "image"
ALGORITHM_PDF = "pdf"

ALGORITHMS = (ALGORITHM_HUFFMAN, ALGORITHM_DEFLATE, ALGORITHM_IMAGE, ALGORITHM_PDF)
TEXT_ALGORITHMS = (ALGORITHM_HUFFMAN, ALGORITHM_DEFLATE)

PRESETS = {
    "max-quality": 10,
    "balanced": 30,
    "max-reduction": 70,
}

ARCHIVE_NAME = "pixelpack-compressed.zip"
ARCHIVE_CONTENT_TYPE = "application/zip"


def validate_target_percent(target_percent) -> int:
    """
    Check that a target percent is an integer in [10, 90].

    Raises:
        InvalidConfiguration: If the value is not an int or is out of range
    """
    if isinstance(target_percent, bool) or not isinstance(target_percent, int):
        raise InvalidConfiguration(
            f"target percent must be an integer, got {target_percent!r}"
        )
    if not MIN_TARGET_PERCENT <= target_percent <= MAX_TARGET_PERCENT:
        raise InvalidConfiguration(
            f"target percent must be between {MIN_TARGET_PERCENT} and "
            f"{MAX_TARGET_PERCENT}, got {target_percent}"
        )
    return target_percent


@dataclass(frozen=True)
class CompressionConfig:
    """
    Settings for one compression invocation.

    Attributes:
        algorithm: "huffman", "deflate", "image" or "pdf". Only the two text
            algorithms change behavior; anything else means deflate for text.
        target_percent: Desired aggressiveness, 10 (gentle) to 90 (strong)
    """
    algorithm: str = ALGORITHM_DEFLATE
    target_percent: int = DEFAULT_TARGET_PERCENT

    def __post_init__(self):
        if self.algorithm not in ALGORITHMS:
            raise InvalidConfiguration(
                f"unknown algorithm {self.algorithm!r}, expected one of {', '.join(ALGORITHMS)}"
            )
        validate_target_percent(self.target_percent)

    @property
    def text_algorithm(self) -> str:
        """Text codec to use for non-image, non-document files."""
        if self.algorithm in TEXT_ALGORITHMS:
            return self.algorithm
        return ALGORITHM_DEFLATE

    @classmethod
    def from_preset(cls, preset: str, algorithm: str = ALGORITHM_DEFLATE) -> "CompressionConfig":
        """Build a config from a named preset."""
        if preset not in PRESETS:
            raise InvalidConfiguration(
                f"unknown preset {preset!r}, expected one of {', '.join(PRESETS)}"
            )
        return cls(algorithm=algorithm, target_percent=PRESETS[preset])

    def to_dict(self) -> dict:
        return {"algorithm": self.algorithm, "target_percent": self.target_percent}
