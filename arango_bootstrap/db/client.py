"""ArangoDB client helpers."""

from __future__ import annotations

import logging

from arango import ArangoClient
from arango.database import StandardDatabase
from arango.exceptions import ArangoServerError

from arango_bootstrap.config.settings import ArangoConfig
from arango_bootstrap.db.errors import CHECK, CONNECT, CREATE, DRIVER_ERRORS, FETCH, BootstrapError

logger = logging.getLogger(__name__)

SYSTEM_DATABASE = "_system"
DATABASE_NOT_FOUND = 1228


def get_client(config: ArangoConfig) -> ArangoClient:
    return ArangoClient(hosts=list(config.endpoints), request_timeout=config.request_timeout)


def _open_db(client: ArangoClient, config: ArangoConfig, name: str) -> StandardDatabase:
    return client.db(name, username=config.user, password=config.password, verify=True)


def _is_missing_database(exc: BaseException) -> bool:
    if not isinstance(exc, ArangoServerError):
        return False
    return exc.error_code == DATABASE_NOT_FOUND or exc.http_code == 404


def bootstrap_database(config: ArangoConfig) -> StandardDatabase:
    """Connect to ArangoDB and return a handle to ``config.database``.

    The target database is opened directly, so a user with rights on that
    database only is enough once it exists. When the server reports it
    missing, ``_system`` is used to check and to create it together with one
    active user that carries the connecting credentials. A ``fetch`` error
    can follow a successful create; the new database is left in place.
    Any driver failure is raised as a :class:`BootstrapError`; nothing is
    retried or rolled back.
    """
    name = config.database
    try:
        client = get_client(config)
        db = _open_db(client, config, name)
    except DRIVER_ERRORS as exc:
        if not _is_missing_database(exc):
            raise BootstrapError(CONNECT, "database", name, exc) from exc
    else:
        logger.debug("Using existing database", extra={"database": name})
        return db

    try:
        sys_db = _open_db(client, config, SYSTEM_DATABASE)
    except DRIVER_ERRORS as exc:
        raise BootstrapError(CONNECT, "database", name, exc) from exc

    try:
        exists = sys_db.has_database(name)
    except DRIVER_ERRORS as exc:
        raise BootstrapError(CHECK, "database", name, exc) from exc

    if not exists:
        users = [{"username": config.user, "password": config.password, "active": True}]
        try:
            sys_db.create_database(name, users=users)
        except DRIVER_ERRORS as exc:
            raise BootstrapError(CREATE, "database", name, exc) from exc
        logger.info("Created database", extra={"database": name, "user": config.user})

    try:
        return _open_db(client, config, name)
    except DRIVER_ERRORS as exc:
        raise BootstrapError(FETCH, "database", name, exc) from exc
