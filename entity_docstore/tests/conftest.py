import typing

import pytest
from _pytest.config.argparsing import Parser

from entity_docstore.repository import Repository
from entity_docstore.storages.base import Acknowledgement, Connection, Criteria, Document
from entity_docstore.storages.memory import MemoryCollection


def pytest_addoption(parser: Parser) -> None:
    parser.addoption("--sqlalchemy-url", action="store", default="sqlite://")


class RecordingCollection(MemoryCollection):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.calls: typing.List[typing.Tuple[str, typing.Any]] = []
        self.acknowledgement: typing.Optional[Acknowledgement] = None
        self.error: typing.Optional[Exception] = None

    def _record(self, operation: str, *arguments: typing.Any) -> None:
        self.calls.append((operation, arguments))
        if self.error is not None:
            raise self.error

    def insert(self, document: Document) -> Acknowledgement:
        self._record("insert", dict(document))
        if self.acknowledgement is not None:
            return self.acknowledgement
        return super().insert(document)

    def update(self, criteria: Criteria, document: Document) -> Acknowledgement:
        self._record("update", dict(criteria), dict(document))
        if self.acknowledgement is not None:
            return self.acknowledgement
        return super().update(criteria, document)

    def remove(self, criteria: Criteria) -> bool:
        self._record("remove", dict(criteria))
        return super().remove(criteria)

    def find(
        self, criteria: typing.Optional[Criteria] = None, *args: typing.Any, **kwargs: typing.Any
    ) -> typing.List[Document]:
        self._record("find", dict(criteria or {}))
        return super().find(criteria, *args, **kwargs)

    def count(self, criteria: typing.Optional[Criteria] = None) -> int:
        self._record("count", dict(criteria or {}))
        return super().count(criteria)


class RecordingConnection(Connection):
    def __init__(self) -> None:
        self.collections: typing.Dict[str, RecordingCollection] = {}

    def get_collection(self, name: str) -> RecordingCollection:
        if name not in self.collections:
            self.collections[name] = RecordingCollection(name)
        return self.collections[name]


class UsersRepository(Repository):
    display_field = "name"


@pytest.fixture()
def connection() -> RecordingConnection:
    return RecordingConnection()


@pytest.fixture()
def users(connection: RecordingConnection) -> UsersRepository:
    return UsersRepository(connection)


@pytest.fixture()
def users_collection(connection: RecordingConnection) -> RecordingCollection:
    return connection.get_collection("users")
