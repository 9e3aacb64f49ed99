from __future__ import annotations

import json
from typing import Any


def load_document(blob: bytes | str | dict[str, Any], provider: str) -> dict[str, Any]:
    """Decode a JSON document, passing dictionaries through unchanged."""
    if isinstance(blob, dict):
        return blob
    if isinstance(blob, bytes):
        blob = blob.decode("utf-8")
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid {provider} payload") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {provider} payload: expected a JSON object")
    return data
