import logging
import typing

from entity_docstore.storages.base import Collection, Connection
from entity_docstore.storages.memory import MemoryConnection

logger = logging.getLogger(__name__)

MEMORY_URL = "memory://"


def connect(url: str = MEMORY_URL, **engine_options: typing.Any) -> Connection:
    if url == MEMORY_URL:
        logger.debug("Using in-memory document store")
        return MemoryConnection()

    from sqlalchemy import create_engine

    from entity_docstore.storages.sqlalchemy import SqlAlchemyConnection

    logger.debug("Using SQL document store", extra={"dialect": url.split(":", 1)[0]})
    return SqlAlchemyConnection(create_engine(url, **engine_options))


__all__ = ["Collection", "Connection", "MemoryConnection", "connect"]
