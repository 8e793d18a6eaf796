"""Dry-run planning: what each file would go through, without encoding it."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .compressor import codec_params, select_codec
from .config import CompressionConfig
from .content import InputFile, classify_content
from .errors import UnsupportedContent


@dataclass
class FilePlan:
    """Planned handling of one input file."""
    name: str
    size: int
    kind: Optional[str] = None
    codec: Optional[str] = None
    params: dict = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "size": self.size,
            "kind": self.kind,
            "codec": self.codec,
            "params": dict(self.params),
            "error": self.error,
        }


def plan_file(input_file: InputFile, config: CompressionConfig) -> FilePlan:
    """Resolve kind, codec and normalized parameters for one file."""
    try:
        kind = classify_content(input_file.name, input_file.content_type, input_file.data)
    except UnsupportedContent as e:
        return FilePlan(name=input_file.name, size=input_file.size, error=str(e))

    codec = select_codec(kind, config)
    return FilePlan(
        name=input_file.name,
        size=input_file.size,
        kind=kind.value,
        codec=codec,
        params=codec_params(input_file, codec, config),
    )


def plan_compression(files: Sequence[InputFile], config: CompressionConfig) -> List[FilePlan]:
    """
    Plan a compression run.

    Unsupported files are reported through ``FilePlan.error`` instead of
    raising, so one call describes the whole batch.
    """
    return [plan_file(f, config) for f in files]
