"""Service account key resolution shared by the GCS and Firebase clients."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def resolve_service_account_key(*candidates: str | None) -> Path | dict[str, Any] | None:
    """
    Resolve the first configured key to a file path or parsed key info.

    A key may be given as a path to a JSON key file or as the JSON itself.
    Returns None when no key is configured, so callers fall back to
    application default credentials.

    Raises:
        ValueError: If the key is neither an existing file nor valid JSON.
    """
    key = next((c for c in candidates if c), None)
    if not key:
        return None

    path = Path(key).expanduser()
    if path.exists():
        return path

    try:
        return json.loads(key)
    except json.JSONDecodeError:
        raise ValueError("Invalid service account key")
