import logging
import time
from pathlib import Path
from typing import List

from compress_vids.config.models import EncoderConfig
from compress_vids.domain.errors import EncodeError
from compress_vids.infrastructure.process import ExternalToolError, run_streamed


class FFmpegAdapter:
    """Wrapper around ffmpeg for HEVC transcoding."""

    def __init__(self, config: EncoderConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)

    def _build_command(self, input_path: Path, output_path: Path) -> List[str]:
        """Constructs the ffmpeg command line arguments."""
        return [
            self.config.ffmpeg_bin,
            "-hide_banner",
            "-v", "error",
            "-stats",
            "-y",  # never prompt; the replacer checks the output path is free
            "-i", str(input_path),
            "-c:v", self.config.video_codec,
            "-c:a", "copy",
            "-x265-params", f"crf={self.config.crf}",
            str(output_path),
        ]

    def encode(self, input_path: Path, output_path: Path) -> None:
        """Transcodes input_path into output_path, streaming ffmpeg output to the console.

        The output must be a different file in the same directory as the input so
        the final rename stays on one filesystem.
        """
        if output_path == input_path:
            raise ValueError(f"Output path must differ from input path: {input_path}")
        if output_path.parent != input_path.parent:
            raise ValueError(f"Output {output_path} must live in the input directory {input_path.parent}")

        cmd = self._build_command(input_path, output_path)
        self.logger.info(f"FFMPEG_START: {input_path.name} (codec={self.config.video_codec}, crf={self.config.crf})")
        self.logger.debug(f"FFMPEG_CMD: {' '.join(cmd)}")
        start_time = time.monotonic()

        try:
            run_streamed(cmd)
        except ExternalToolError as exc:
            elapsed = time.monotonic() - start_time
            self.logger.info(f"FFMPEG_END: {input_path.name} status=failed code={exc.returncode} elapsed={elapsed:.2f}s")
            if exc.returncode is None:
                raise EncodeError(f"ffmpeg could not be started: {exc}") from exc
            raise EncodeError(f"ffmpeg exited with code {exc.returncode}", exit_code=exc.returncode) from exc

        elapsed = time.monotonic() - start_time
        self.logger.info(f"FFMPEG_END: {input_path.name} status=completed elapsed={elapsed:.2f}s")
