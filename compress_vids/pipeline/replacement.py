import logging
import os
from pathlib import Path

from compress_vids.config.models import TEMP_PREFIX
from compress_vids.domain.errors import EncodeError, ReplaceError
from compress_vids.infrastructure.event_bus import EventBus
from compress_vids.infrastructure.ffmpeg import FFmpegAdapter
from compress_vids.domain.events import FileReplaced


class FileReplacer:
    """Encodes next to the original, then renames the result over it.

    The temp file shares the original's directory so the rename never
    crosses filesystems. A failed encode leaves the original untouched;
    a failed rename leaves the encoded temp file in place. An existing temp
    file is never overwritten or removed, so the file it blocks fails instead.
    """

    def __init__(self, ffmpeg_adapter: FFmpegAdapter, event_bus: EventBus, temp_prefix: str = TEMP_PREFIX):
        self.ffmpeg_adapter = ffmpeg_adapter
        self.event_bus = event_bus
        self.temp_prefix = temp_prefix
        self.logger = logging.getLogger(__name__)

    def temp_path_for(self, input_path: Path) -> Path:
        return input_path.with_name(f"{self.temp_prefix}{input_path.suffix}")

    def replace(self, input_path: Path) -> Path:
        """Transcodes input_path in place and returns it.

        Raises EncodeError (original untouched) or ReplaceError (encoded
        output left at ReplaceError.temp_path).
        """
        tmp_path = self.temp_path_for(input_path)
        if tmp_path.exists():
            self.logger.warning(f"TEMP_EXISTS: {tmp_path}, not encoding {input_path}")
            raise EncodeError(
                f"Temp file {tmp_path} already exists (left by an earlier failure or in use by another run); "
                f"remove it to retry {input_path.name}"
            )

        try:
            self.ffmpeg_adapter.encode(input_path, tmp_path)
        except EncodeError:
            # tmp_path did not exist before encode, so this is our partial output
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError as exc:
                    self.logger.warning(f"Could not remove partial output {tmp_path}: {exc}")
            raise

        if not tmp_path.exists():
            raise EncodeError(f"ffmpeg reported success but wrote no output to {tmp_path}")

        self.event_bus.publish(FileReplaced(path=input_path, temp_path=tmp_path))
        try:
            os.replace(tmp_path, input_path)
        except OSError as exc:
            self.logger.error(f"REPLACE_FAILED: {input_path} (encoded output kept at {tmp_path}): {exc}")
            raise ReplaceError(
                f"Failed to move {tmp_path.name} over {input_path}: {exc}. Encoded output kept at {tmp_path}",
                temp_path=tmp_path,
            ) from exc

        self.logger.info(f"REPLACED: {input_path}")
        return input_path
