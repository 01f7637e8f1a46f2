"""Collection bootstrap helpers."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional, Tuple

from arango.collection import StandardCollection
from arango.database import StandardDatabase
from pydantic import BaseModel, ConfigDict, Field

from arango_bootstrap.db.errors import CHECK, CREATE, DRIVER_ERRORS, FETCH, BootstrapError

logger = logging.getLogger(__name__)


class CollectionOptions(BaseModel):
    """Creation options forwarded to ``StandardDatabase.create_collection``."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    edge: Optional[bool] = None
    sync: Optional[bool] = None
    system: Optional[bool] = None
    key_generator: Optional[Literal["traditional", "autoincrement", "uuid", "padded"]] = None
    user_keys: Optional[bool] = None
    key_increment: Optional[int] = Field(default=None, gt=0)
    key_offset: Optional[int] = Field(default=None, ge=0)
    shard_fields: Optional[List[str]] = Field(default=None, min_length=1)
    shard_count: Optional[int] = Field(default=None, gt=0)
    replication_factor: Optional[int] = Field(default=None, gt=0)
    write_concern: Optional[int] = Field(default=None, gt=0)
    sharding_strategy: Optional[str] = None
    # Passed as the collection's JSON schema validation rule.
    schema_: Optional[Dict[str, Any]] = Field(default=None, alias="schema")

    def to_kwargs(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, by_alias=True)


def collection_path(db: StandardDatabase, name: str) -> str:
    return f"{db.name}.{name}"


def bootstrap_collection(
    db: StandardDatabase,
    name: str,
    options: CollectionOptions | None = None,
) -> Tuple[bool, StandardCollection]:
    """Return ``(created, collection)``, creating the collection if missing."""
    if not name:
        raise ValueError("collection name must not be empty")
    path = collection_path(db, name)

    try:
        exists = db.has_collection(name)
    except DRIVER_ERRORS as exc:
        raise BootstrapError(CHECK, "collection", path, exc) from exc

    if exists:
        try:
            return False, db.collection(name)
        except DRIVER_ERRORS as exc:
            raise BootstrapError(FETCH, "collection", path, exc) from exc

    kwargs = options.to_kwargs() if options is not None else {}
    try:
        collection = db.create_collection(name, **kwargs)
    except DRIVER_ERRORS as exc:
        raise BootstrapError(CREATE, "collection", path, exc) from exc
    logger.info("Created collection", extra={"collection": path, "options": kwargs})
    return True, collection
