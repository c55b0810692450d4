"""Run external command-line tools (ffprobe, ffmpeg)."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

from ..errors import ProcessingError

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Exit status and captured output of a finished tool run."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ToolRunner(Protocol):
    """Anything that can run an argument vector and report how it went."""

    def run(self, argv: Sequence[str], timeout: float) -> ToolResult:
        ...


class SubprocessToolRunner:
    """ToolRunner backed by ``subprocess.run``."""

    def run(self, argv: Sequence[str], timeout: float) -> ToolResult:
        cmd = [str(arg) for arg in argv]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            raise ProcessingError(diagnostic=f"{cmd[0]} timed out after {timeout}s")
        except FileNotFoundError:
            raise ProcessingError(diagnostic=f"{cmd[0]} not found. Please install ffmpeg.")

        logger.debug(f"{cmd[0]} exited with {result.returncode}")
        return ToolResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
