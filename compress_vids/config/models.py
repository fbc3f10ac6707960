from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator

from compress_vids.domain.errors import StartupArgumentError

TEMP_PREFIX = "__compress_vids_tmp__"


class RunMode(str, Enum):
    CHECK = "check"
    COMPRESS = "compress"


class EncoderConfig(BaseModel):
    """Fixed transcode policy. Not exposed on the command line."""
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"
    video_codec: str = "libx265"
    crf: int = Field(default=24, ge=0, le=51)
    temp_prefix: str = Field(default=TEMP_PREFIX, min_length=1)


class RunConfig(BaseModel):
    mode: RunMode
    patterns: List[str] = Field(min_length=1)
    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
    debug: bool = False
    log_path: Optional[Path] = None

    @field_validator("patterns")
    @classmethod
    def normalize_separators(cls, v: List[str]) -> List[str]:
        return [normalize_pattern(p) for p in v]


def normalize_pattern(pattern: str) -> str:
    """Windows-style separators become forward slashes before glob matching."""
    return pattern.replace("\\", "/")


def build_run_config(
    mode: Optional[str],
    patterns: Optional[List[str]],
    debug: bool = False,
    log_path: Optional[Path] = None,
) -> RunConfig:
    """Validates raw CLI input into a RunConfig.

    Raises StartupArgumentError for an unknown mode or an empty pattern list.
    """
    allowed = [m.value for m in RunMode]
    if mode not in allowed:
        raise StartupArgumentError(f"Allowed modes: {' & '.join(allowed)} (got {mode!r})")
    if not patterns:
        raise StartupArgumentError(
            "Usage: compress-vids [check | compress] src/vid.mp4 C:\\whateverFolder ./folder3 ..."
        )
    try:
        return RunConfig(mode=RunMode(mode), patterns=list(patterns), debug=debug, log_path=log_path)
    except ValidationError as exc:
        raise StartupArgumentError(str(exc)) from exc
