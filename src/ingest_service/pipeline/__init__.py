"""Upload pipeline module."""

from .types import RecordStore, VideoRecord
from .upload import UploadPipeline

__all__ = [
    "RecordStore",
    "VideoRecord",
    "UploadPipeline",
]
