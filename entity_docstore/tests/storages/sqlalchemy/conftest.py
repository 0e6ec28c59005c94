from typing import Generator

import pytest
from sqlalchemy import MetaData
from sqlalchemy.engine import Engine

from entity_docstore.storages.sqlalchemy import SqlAlchemyCollection, SqlAlchemyConnection


@pytest.fixture()
def metadata() -> MetaData:
    return MetaData()


@pytest.fixture()
def sa_connection(metadata: MetaData, engine: Engine) -> Generator[SqlAlchemyConnection, None, None]:
    yield SqlAlchemyConnection(engine, metadata)
    metadata.drop_all(engine)


@pytest.fixture()
def collection(sa_connection: SqlAlchemyConnection) -> SqlAlchemyCollection:
    return sa_connection.get_collection("documents")
