"""Remux MP4 files so the moov atom precedes the media data."""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ProcessingError
from .runner import ToolRunner

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".processed.mp4"


def faststart_output_path(file_path: str | Path) -> Path:
    """Output path for a remux of ``file_path``; the same input always maps to the same output."""
    path = Path(file_path)
    return path.with_name(path.name + OUTPUT_SUFFIX)


def faststart_command(ffmpeg: str, source: Path, output: Path) -> list[str]:
    # Stream copy only: no re-encoding, existing tags preserved
    return [
        ffmpeg,
        "-y",
        "-i", str(source),
        "-map_metadata", "0",
        "-movflags", "+faststart",
        "-codec", "copy",
        "-f", "mp4",
        str(output),
    ]


def remux_for_faststart(
    file_path: str | Path,
    runner: ToolRunner,
    timeout: float = 300,
    ffmpeg: str = "ffmpeg",
) -> Path:
    """
    Rewrite a video for progressive playback.

    Returns:
        Path of the remuxed file. The caller owns it and must delete it.

    Raises:
        ProcessingError: If ffmpeg fails, times out or writes nothing.
    """
    source = Path(file_path)
    output = faststart_output_path(source)

    result = runner.run(faststart_command(ffmpeg, source, output), timeout=timeout)
    if not result.ok:
        raise ProcessingError(diagnostic=f"ffmpeg exited with {result.returncode}: {result.stderr[:500]}")
    if not output.is_file():
        raise ProcessingError(diagnostic=f"ffmpeg produced no output at {output}")

    logger.info(f"Remuxed {source.name} for faststart")
    return output
