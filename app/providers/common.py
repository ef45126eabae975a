from __future__ import annotations

import time
from typing import Any, TypedDict


class ProviderAdapterResult(TypedDict):
    attempt: dict[str, Any]
    mapped: Any


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_json_or_raw(text: str, parser: Any) -> dict[str, Any]:
    try:
        parsed = parser()
        if isinstance(parsed, dict):
            return parsed
        return {"value": parsed}
    except Exception:  # noqa: BLE001
        return {"raw": text}


def flatten_form_fields(values: dict[str, Any], prefix: str | None = None) -> dict[str, str]:
    """Encode nested dicts as bracketed form keys (metadata[product]=...), skipping None."""
    fields: dict[str, str] = {}
    for key, value in values.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, dict):
            fields.update(flatten_form_fields(value, name))
        elif isinstance(value, bool):
            fields[name] = "true" if value else "false"
        else:
            fields[name] = str(value)
    return fields
