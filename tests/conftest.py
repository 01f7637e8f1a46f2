"""In-memory stand-ins for the parts of python-arango the bootstrap code uses."""

from __future__ import annotations

from typing import Dict, List
from unittest.mock import MagicMock

import pytest

from arango.exceptions import ServerConnectionError


class FakeCollection:
    def __init__(self, name: str, db_name: str, **options):
        self.name = name
        self.db_name = db_name
        self.options = options
        self._indexes: List[Dict] = [
            {"id": f"{name}/0", "name": "primary", "type": "primary", "fields": ["_key"]}
        ]
        self.persistent_calls: List[tuple] = []
        self.ttl_calls: List[tuple] = []

    def indexes(self) -> List[Dict]:
        return [dict(index) for index in self._indexes]

    def add_persistent_index(self, fields, **kwargs) -> Dict:
        self.persistent_calls.append((list(fields), kwargs))
        index = {
            "id": f"{self.name}/{len(self._indexes)}",
            "name": kwargs.get("name"),
            "type": "persistent",
            "fields": list(fields),
            "unique": bool(kwargs.get("unique")),
            "sparse": bool(kwargs.get("sparse")),
        }
        self._indexes.append(index)
        return {**index, "new": True}

    def add_ttl_index(self, fields, expiry_time, **kwargs) -> Dict:
        self.ttl_calls.append((list(fields), expiry_time, kwargs))
        index = {
            "id": f"{self.name}/{len(self._indexes)}",
            "name": kwargs.get("name"),
            "type": "ttl",
            "fields": list(fields),
            "expiry_time": expiry_time,
        }
        self._indexes.append(index)
        return {**index, "new": True}


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}
        self.create_calls: List[tuple] = []

    def has_collection(self, name: str) -> bool:
        return name in self.collections

    def collection(self, name: str) -> FakeCollection:
        return self.collections[name]

    def create_collection(self, name: str, **kwargs) -> FakeCollection:
        self.create_calls.append((name, kwargs))
        collection = FakeCollection(name, self.name, **kwargs)
        self.collections[name] = collection
        return collection


class FakeSystemDatabase(FakeDatabase):
    def __init__(self, server: "FakeServer"):
        super().__init__("_system")
        self._server = server
        self.database_calls: List[tuple] = []

    def has_database(self, name: str) -> bool:
        return name in self._server.databases

    def create_database(self, name: str, users=None, **kwargs) -> bool:
        self.database_calls.append((name, users, kwargs))
        self._server.databases[name] = FakeDatabase(name)
        self._server.users[name] = list(users or [])
        return True


def server_error(http_code: int, error_code: int, message: str) -> ServerConnectionError:
    resp = MagicMock(
        status_code=http_code,
        status_text=message,
        error_code=error_code,
        error_message=message,
        url="http://db:8529",
        method="get",
        headers={},
    )
    return ServerConnectionError(resp, MagicMock(), message)


def missing_database_error(name: str) -> ServerConnectionError:
    return server_error(404, 1228, f"database not found: {name}")


class FakeServer:
    """One ArangoDB deployment shared by every client built in a test."""

    def __init__(self, user: str = "root", password: str = "secret", system_access: bool = True):
        self.credentials = (user, password)
        self.system_access = system_access
        self.databases: Dict[str, FakeDatabase] = {}
        self.users: Dict[str, List[Dict]] = {}
        self.system = FakeSystemDatabase(self)
        self.clients: List["FakeClient"] = []
        self.opened: List[str] = []

    def client_factory(self, hosts=None, **kwargs) -> "FakeClient":
        client = FakeClient(self, hosts, **kwargs)
        self.clients.append(client)
        return client


class FakeClient:
    def __init__(self, server: FakeServer, hosts, **kwargs):
        self._server = server
        self.hosts = hosts
        self.kwargs = kwargs

    def db(self, name="_system", username="root", password="", verify=False, **kwargs):
        self._server.opened.append(name)
        if (username, password) != self._server.credentials:
            raise server_error(401, 11, "bad username/password or token is expired")
        if name == "_system":
            if not self._server.system_access:
                raise server_error(401, 11, "bad username/password or token is expired")
            return self._server.system
        if name not in self._server.databases:
            raise missing_database_error(name)
        return self._server.databases[name]


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase("app")


@pytest.fixture
def fake_collection() -> FakeCollection:
    return FakeCollection("sessions", "app")


@pytest.fixture
def missing_database():
    return missing_database_error
