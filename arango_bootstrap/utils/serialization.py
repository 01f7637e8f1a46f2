"""JSON round-trip helpers."""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from typing import Any, Dict

from pydantic import BaseModel


def _encode_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def struct_to_map(record: Any) -> Dict[str, Any]:
    """Convert ``record`` into a plain dict by encoding it to JSON and back.

    Handy for building bind variables or patch documents out of models.
    Encoding errors propagate unchanged.
    """
    raw = json.dumps(record, default=_encode_default, allow_nan=False)
    data = json.loads(raw)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"{type(record).__name__} does not encode to a JSON object")
    return data
