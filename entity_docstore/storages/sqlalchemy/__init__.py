import logging
import typing

from sqlalchemy import Column, Integer, MetaData, String, Table, delete, insert, select, update
from sqlalchemy.engine import Connection as SaConnection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from entity_docstore.exceptions import DuplicateKeyError, StoreError
from entity_docstore.identity import IdentityGenerator, default_generator
from entity_docstore.storages import filtering
from entity_docstore.storages.base import Acknowledgement, Collection, Connection, Criteria, Document
from entity_docstore.storages.sqlalchemy.types import DocumentType, encode

logger = logging.getLogger(__name__)


def document_key(identifier: typing.Any) -> str:
    return encode(identifier, sort_keys=True)


def build_table(name: str, metadata: MetaData) -> Table:
    return Table(
        name,
        metadata,
        Column("seq", Integer, primary_key=True, autoincrement=True),
        Column("id", String(255), nullable=False, unique=True),
        Column("document", DocumentType(), nullable=False),
    )


class SqlAlchemyCollection(Collection):
    """Documents stored one per row of a SQL table; criteria are evaluated in Python."""

    def __init__(self, engine: Engine, table: Table, id_generator: IdentityGenerator = default_generator) -> None:
        self._engine = engine
        self._table = table
        self._id_generator = id_generator

    @property
    def name(self) -> str:
        return self._table.name

    def _select(self, connection: SaConnection, criteria: typing.Optional[Criteria]) -> typing.List[Document]:
        statement = select(self._table.c.document).order_by(self._table.c.seq)
        identifier = filtering.equality_fields(criteria).get("_id")
        if identifier is not None:
            statement = statement.where(self._table.c.id == document_key(identifier))
        documents = connection.execute(statement).scalars()
        return [document for document in documents if filtering.matches(document, criteria)]

    def insert(self, document: Document) -> Acknowledgement:
        stored = dict(document)
        stored.setdefault("_id", self._id_generator.new_id())
        try:
            with self._engine.begin() as connection:
                connection.execute(insert(self._table).values(id=document_key(stored["_id"]), document=stored))
        except IntegrityError as e:
            raise DuplicateKeyError(f"Duplicate _id {stored['_id']!r} in collection {self.name!r}") from e
        except SQLAlchemyError as e:
            logger.error("Insert failed", extra={"collection": self.name, "error": str(e)})
            raise StoreError(str(e)) from e
        return {"ok": True, "n": 1}

    def update(self, criteria: Criteria, document: Document) -> Acknowledgement:
        try:
            with self._engine.begin() as connection:
                found = self._select(connection, criteria)
                if not found:
                    return {"ok": True, "n": 0}
                replacement = filtering.replace(found[0], criteria, document)
                result = connection.execute(
                    update(self._table)
                    .where(self._table.c.id == document_key(found[0]["_id"]))
                    .values(document=replacement)
                )
                updated = result.rowcount
        except SQLAlchemyError as e:
            logger.error("Update failed", extra={"collection": self.name, "error": str(e)})
            raise StoreError(str(e)) from e
        return {"ok": True, "n": updated}

    def remove(self, criteria: Criteria) -> bool:
        try:
            with self._engine.begin() as connection:
                keys = [document_key(document["_id"]) for document in self._select(connection, criteria)]
                if keys:
                    connection.execute(delete(self._table).where(self._table.c.id.in_(keys)))
        except SQLAlchemyError as e:
            logger.error("Remove failed", extra={"collection": self.name, "error": str(e)})
            raise StoreError(str(e)) from e
        return True

    def find(
        self,
        criteria: typing.Optional[Criteria] = None,
        projection: typing.Optional[typing.Sequence[str]] = None,
        sort: typing.Optional[typing.Sequence[typing.Tuple[str, int]]] = None,
        skip: int = 0,
        limit: typing.Optional[int] = None,
    ) -> typing.List[Document]:
        try:
            with self._engine.connect() as connection:
                found = self._select(connection, criteria)
        except SQLAlchemyError as e:
            logger.error("Find failed", extra={"collection": self.name, "error": str(e)})
            raise StoreError(str(e)) from e
        return filtering.run_query(found, None, projection, sort, skip, limit)

    def count(self, criteria: typing.Optional[Criteria] = None) -> int:
        return len(self.find(criteria))


class SqlAlchemyConnection(Connection):
    def __init__(
        self,
        engine: Engine,
        metadata: typing.Optional[MetaData] = None,
        id_generator: IdentityGenerator = default_generator,
    ) -> None:
        self.engine = engine
        self.metadata = metadata if metadata is not None else MetaData()
        self._id_generator = id_generator
        self._tables: typing.Dict[str, Table] = {}

    def get_collection(self, name: str) -> SqlAlchemyCollection:
        if name not in self._tables:
            table = build_table(name, self.metadata)
            try:
                self.metadata.create_all(self.engine, tables=[table])
            except SQLAlchemyError as e:
                raise StoreError(str(e)) from e
            self._tables[name] = table
        return SqlAlchemyCollection(self.engine, self._tables[name], self._id_generator)

    def close(self) -> None:
        self.engine.dispose()
