import abc
import typing


Document = typing.Dict[str, typing.Any]
Criteria = typing.Mapping[str, typing.Any]
Acknowledgement = typing.Dict[str, typing.Any]


class Collection(abc.ABC):
    """Store-side handle for one named collection of documents.

    Driver failures surface as ``StoreError``; an ``{"ok": False}`` acknowledgement is a
    soft failure reported to the caller.
    """

    @abc.abstractmethod
    def insert(self, document: Document) -> Acknowledgement:
        pass

    @abc.abstractmethod
    def update(self, criteria: Criteria, document: Document) -> Acknowledgement:
        """Replace the body of the first matching document, keeping its ``_id`` and the criteria's equality fields."""

    @abc.abstractmethod
    def remove(self, criteria: Criteria) -> bool:
        pass

    @abc.abstractmethod
    def find(
        self,
        criteria: typing.Optional[Criteria] = None,
        projection: typing.Optional[typing.Sequence[str]] = None,
        sort: typing.Optional[typing.Sequence[typing.Tuple[str, int]]] = None,
        skip: int = 0,
        limit: typing.Optional[int] = None,
    ) -> typing.List[Document]:
        pass

    @abc.abstractmethod
    def count(self, criteria: typing.Optional[Criteria] = None) -> int:
        pass


class Connection(abc.ABC):
    @abc.abstractmethod
    def get_collection(self, name: str) -> Collection:
        pass

    def close(self) -> None:
        pass
