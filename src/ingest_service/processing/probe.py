"""Probe video geometry with ffprobe and classify its aspect ratio."""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

from ..errors import ProcessingError
from .runner import ToolRunner

logger = logging.getLogger(__name__)

LANDSCAPE_RATIO = 16 / 9
PORTRAIT_RATIO = 9 / 16
RATIO_TOLERANCE = 0.1


class GeometryClass(str, Enum):
    """Aspect ratio bucket, also used as the storage key namespace."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    OTHER = "other"


def classify_aspect_ratio(width: int, height: int) -> GeometryClass:
    """Bucket a frame size into landscape (16:9), portrait (9:16) or other."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid dimensions: {width}x{height}")

    ratio = width / height
    if abs(ratio - LANDSCAPE_RATIO) < RATIO_TOLERANCE:
        return GeometryClass.LANDSCAPE
    if abs(ratio - PORTRAIT_RATIO) < RATIO_TOLERANCE:
        return GeometryClass.PORTRAIT
    return GeometryClass.OTHER


def probe_command(ffprobe: str, file_path: str | Path) -> list[str]:
    return [
        ffprobe,
        "-v", "error",
        "-select_streams", "v:0",
        "-show_entries", "stream=width,height",
        "-print_format", "json",
        str(file_path),
    ]


def probe_dimensions(
    file_path: str | Path,
    runner: ToolRunner,
    timeout: float = 30,
    ffprobe: str = "ffprobe",
) -> tuple[int, int]:
    """
    Read width and height of the first video stream.

    Raises:
        ProcessingError: On non-zero exit, timeout, missing stream or
            malformed output. There is no fallback geometry.
    """
    result = runner.run(probe_command(ffprobe, file_path), timeout=timeout)
    if not result.ok:
        raise ProcessingError(diagnostic=f"ffprobe exited with {result.returncode}: {result.stderr[:500]}")

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ProcessingError(diagnostic=f"Failed to parse ffprobe output: {e}")

    return _parse_dimensions(data)


def _parse_dimensions(data: Any) -> tuple[int, int]:
    streams = data.get("streams") if isinstance(data, dict) else None
    if not streams or not isinstance(streams, list) or not isinstance(streams[0], dict):
        raise ProcessingError(diagnostic="ffprobe reported no video stream")

    stream = streams[0]
    width = _positive_int(stream.get("width"))
    height = _positive_int(stream.get("height"))
    if width is None or height is None:
        raise ProcessingError(
            diagnostic=f"ffprobe returned unusable dimensions: {stream.get('width')}x{stream.get('height')}"
        )
    return width, height


def _positive_int(value: Any) -> int | None:
    # bool is an int subclass; a JSON true is not a width
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (ValueError, TypeError):
        return None
    return number if number > 0 else None


def probe_geometry(
    file_path: str | Path,
    runner: ToolRunner,
    timeout: float = 30,
    ffprobe: str = "ffprobe",
) -> GeometryClass:
    """Probe a local video file and classify its aspect ratio."""
    width, height = probe_dimensions(file_path, runner, timeout=timeout, ffprobe=ffprobe)
    classification = classify_aspect_ratio(width, height)
    logger.info(f"Probed {Path(file_path).name}: {width}x{height} -> {classification.value}")
    return classification
