import typing

import attr

from entity_docstore.entity import Entity


@attr.s(auto_attribs=True, frozen=True)
class QueryResult:
    items: typing.List[Entity]
    total: int

    def __iter__(self) -> typing.Iterator[Entity]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@attr.s(auto_attribs=True, frozen=True)
class Saved:
    entity: Entity


@attr.s(auto_attribs=True, frozen=True)
class Vetoed:
    result: typing.Any


@attr.s(auto_attribs=True, frozen=True)
class Failed:
    reason: str


SaveOutcome = typing.Union[Saved, Vetoed, Failed]
