import typing
from datetime import datetime, timezone
from functools import singledispatch

from entity_docstore.entity import Entity


Document = typing.Dict[str, typing.Any]


@singledispatch
def to_native(argument: typing.Any) -> typing.Any:
    return argument


@to_native.register(datetime)
def _(argument: datetime) -> datetime:
    tzinfo = None
    if argument.tzinfo is not None:
        argument = argument.astimezone(timezone.utc)
        tzinfo = timezone.utc
    # rebuilt from components so no display format or foreign offset leaks into the store
    return datetime(
        argument.year, argument.month, argument.day, argument.hour, argument.minute, argument.second, tzinfo=tzinfo
    )


@to_native.register(dict)
def _(argument: dict) -> dict:
    return {key: to_native(value) for key, value in argument.items()}


@to_native.register(list)
@to_native.register(tuple)
def _(argument: typing.Sequence) -> list:
    return [to_native(value) for value in argument]


class DocumentMapper:
    def __init__(self, entity_class: typing.Type[Entity] = Entity) -> None:
        self.entity_class = entity_class

    def to_document(self, entity: Entity) -> Document:
        return {field: to_native(value) for field, value in entity.to_dict().items()}

    def from_document(self, document: typing.Mapping[str, typing.Any], alias: str) -> Entity:
        return self.entity_class(dict(document), new=False, source=alias)
