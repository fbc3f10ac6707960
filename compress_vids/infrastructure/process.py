"""Blocking wrappers around the external media tools.

Two contracts: `run_captured` collects stdout for parsing, `run_streamed`
lets the child write straight to the terminal so ffmpeg's live stats stay
visible. Both block until the process exits.
"""

import logging
import subprocess
from typing import List, Optional

logger = logging.getLogger(__name__)


class ExternalToolError(Exception):
    """An external process failed to launch or exited non-zero."""

    def __init__(self, cmd: List[str], returncode: Optional[int], stdout: str = "", stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if returncode is None:
            message = f"{cmd[0]} could not be started: {stderr}"
        else:
            message = f"{cmd[0]} exited with code {returncode}"
            if stderr.strip():
                message = f"{message}: {stderr.strip()}"
        super().__init__(message)


def run_captured(cmd: List[str]) -> str:
    """Runs cmd, returns its stdout. Raises ExternalToolError on failure."""
    logger.debug(f"RUN_CAPTURED: {' '.join(cmd)}")
    try:
        # Tool output may embed non-UTF-8 filename or tag bytes
        result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
    except OSError as exc:
        raise ExternalToolError(cmd, None, stderr=str(exc)) from exc
    if result.returncode != 0:
        raise ExternalToolError(cmd, result.returncode, result.stdout or "", result.stderr or "")
    return result.stdout


def run_streamed(cmd: List[str]) -> None:
    """Runs cmd with inherited stdio. Raises ExternalToolError on failure."""
    logger.debug(f"RUN_STREAMED: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd)
    except OSError as exc:
        raise ExternalToolError(cmd, None, stderr=str(exc)) from exc
    if result.returncode != 0:
        raise ExternalToolError(cmd, result.returncode)
