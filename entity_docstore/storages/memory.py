"""
In-memory document store for development and testing.

Documents are deep-copied on the way in and out, so callers never share state
with the store. Data is lost when the connection is dropped.
"""

import copy
import logging
import typing
from collections import OrderedDict

from entity_docstore.exceptions import DuplicateKeyError
from entity_docstore.identity import IdentityGenerator, default_generator
from entity_docstore.storages import filtering
from entity_docstore.storages.base import Acknowledgement, Collection, Connection, Criteria, Document

logger = logging.getLogger(__name__)


class MemoryCollection(Collection):
    def __init__(self, name: str, id_generator: IdentityGenerator = default_generator) -> None:
        self.name = name
        self._id_generator = id_generator
        self._documents: "OrderedDict[typing.Any, Document]" = OrderedDict()

    def insert(self, document: Document) -> Acknowledgement:
        stored = copy.deepcopy(document)
        stored.setdefault("_id", self._id_generator.new_id())
        if stored["_id"] in self._documents:
            raise DuplicateKeyError(f"Duplicate _id {stored['_id']!r} in collection {self.name!r}")
        self._documents[stored["_id"]] = stored
        logger.debug("Inserted document", extra={"collection": self.name, "document_id": stored["_id"]})
        return {"ok": True, "n": 1}

    def update(self, criteria: Criteria, document: Document) -> Acknowledgement:
        for key, existing in self._documents.items():
            if filtering.matches(existing, criteria):
                self._documents[key] = filtering.replace(existing, criteria, copy.deepcopy(document))
                return {"ok": True, "n": 1}
        return {"ok": True, "n": 0}

    def remove(self, criteria: Criteria) -> bool:
        doomed = [key for key, existing in self._documents.items() if filtering.matches(existing, criteria)]
        for key in doomed:
            del self._documents[key]
        logger.debug("Removed documents", extra={"collection": self.name, "removed": len(doomed)})
        return True

    def find(
        self,
        criteria: typing.Optional[Criteria] = None,
        projection: typing.Optional[typing.Sequence[str]] = None,
        sort: typing.Optional[typing.Sequence[typing.Tuple[str, int]]] = None,
        skip: int = 0,
        limit: typing.Optional[int] = None,
    ) -> typing.List[Document]:
        found = filtering.run_query(self._documents.values(), criteria, projection, sort, skip, limit)
        return copy.deepcopy(found)

    def count(self, criteria: typing.Optional[Criteria] = None) -> int:
        return sum(1 for existing in self._documents.values() if filtering.matches(existing, criteria))


class MemoryConnection(Connection):
    def __init__(self, id_generator: IdentityGenerator = default_generator) -> None:
        self._id_generator = id_generator
        self._collections: typing.Dict[str, MemoryCollection] = {}

    def get_collection(self, name: str) -> MemoryCollection:
        if name not in self._collections:
            self._collections[name] = MemoryCollection(name, self._id_generator)
        return self._collections[name]

    def drop(self, name: str) -> None:
        self._collections.pop(name, None)

    def close(self) -> None:
        self._collections.clear()
