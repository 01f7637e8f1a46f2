"""Persistent and TTL index bootstrap helpers.

Indexes are identified by name. A same-named index that already exists is
never altered; when its definition no longer matches the request a warning
is logged so the drift can be dealt with by hand.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence

from arango.collection import StandardCollection
from pydantic import BaseModel, ConfigDict, Field

from arango_bootstrap.db.errors import CHECK, CREATE, DRIVER_ERRORS, BootstrapError

logger = logging.getLogger(__name__)


class PersistentIndexOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    unique: bool = False
    sparse: bool = False
    in_background: Optional[bool] = None
    cache_enabled: Optional[bool] = None
    stored_values: Optional[List[str]] = None


class TTLIndexOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    in_background: Optional[bool] = None


def index_path(collection: StandardCollection, name: str) -> str:
    return f"{collection.db_name}.{collection.name}/{name}"


def ttl_seconds(ttl: timedelta | float) -> int:
    """Convert ``ttl`` to whole seconds, truncating any fraction."""
    if isinstance(ttl, bool):
        raise ValueError("ttl must be a duration or a number of seconds, not a bool")
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if not math.isfinite(seconds):
        raise ValueError(f"ttl must be finite, got {seconds}")
    if seconds < 0:
        raise ValueError(f"ttl must not be negative, got {seconds}s")
    return int(seconds)


def _validate_fields(fields: Sequence[str]) -> List[str]:
    if isinstance(fields, str):
        raise ValueError("fields must be a sequence of field names, not a string")
    fields = list(fields)
    if not fields:
        raise ValueError("index needs at least one field")
    if any(not field for field in fields):
        raise ValueError("index field names must not be empty")
    return fields


def _find_index(collection: StandardCollection, name: str) -> Optional[Dict[str, Any]]:
    try:
        indexes = collection.indexes()
    except DRIVER_ERRORS as exc:
        raise BootstrapError(CHECK, "index", index_path(collection, name), exc) from exc
    for index in indexes:
        if index.get("name") == name:
            return index
    return None


def _warn_on_drift(
    collection: StandardCollection,
    name: str,
    existing: Dict[str, Any],
    requested: Dict[str, Any],
) -> None:
    drift = {
        key: {"requested": value, "existing": existing.get(key)}
        for key, value in requested.items()
        if existing.get(key) != value
    }
    if drift:
        logger.warning(
            "Index definition drift",
            extra={"index": index_path(collection, name), "drift": drift},
        )


def bootstrap_persistent_index(
    collection: StandardCollection,
    fields: Sequence[str],
    options: PersistentIndexOptions,
) -> bool:
    """Create the named persistent index unless one with that name exists.

    Returns ``True`` only when the index was created by this call.
    """
    fields = _validate_fields(fields)
    existing = _find_index(collection, options.name)
    if existing is not None:
        _warn_on_drift(
            collection,
            options.name,
            existing,
            {
                "type": "persistent",
                "fields": fields,
                "unique": options.unique,
                "sparse": options.sparse,
            },
        )
        return False

    extra: Dict[str, Any] = {}
    if options.stored_values is not None:
        extra["storedValues"] = list(options.stored_values)
    if options.cache_enabled is not None:
        extra["cacheEnabled"] = options.cache_enabled
    try:
        result = collection.add_persistent_index(
            fields,
            unique=options.unique,
            sparse=options.sparse,
            name=options.name,
            in_background=options.in_background,
            **extra,
        )
    except DRIVER_ERRORS as exc:
        raise BootstrapError(CREATE, "index", index_path(collection, options.name), exc) from exc

    created = bool(result.get("new", True))
    if created:
        logger.info(
            "Created persistent index",
            extra={"index": index_path(collection, options.name), "fields": fields},
        )
    return created


def bootstrap_ttl_index(
    collection: StandardCollection,
    field: str,
    ttl: timedelta | float,
    options: TTLIndexOptions,
) -> bool:
    """Create the named TTL index unless one with that name exists.

    Documents expire ``ttl`` after the timestamp stored in ``field``.
    """
    if not field:
        raise ValueError("ttl index field must not be empty")
    expiry = ttl_seconds(ttl)
    existing = _find_index(collection, options.name)
    if existing is not None:
        _warn_on_drift(
            collection,
            options.name,
            existing,
            {"type": "ttl", "fields": [field], "expiry_time": expiry},
        )
        return False

    try:
        result = collection.add_ttl_index(
            [field],
            expiry,
            name=options.name,
            in_background=options.in_background,
        )
    except DRIVER_ERRORS as exc:
        raise BootstrapError(CREATE, "index", index_path(collection, options.name), exc) from exc

    created = bool(result.get("new", True))
    if created:
        logger.info(
            "Created TTL index",
            extra={"index": index_path(collection, options.name), "field": field, "expiry_time": expiry},
        )
    return created
