import json
import typing
import uuid
from datetime import date, datetime
from functools import singledispatch

from sqlalchemy.engine import Dialect
from sqlalchemy.types import Text, TypeDecorator


@singledispatch
def to_storage(argument: typing.Any) -> typing.Any:
    raise TypeError(f"Unsupported document value - {argument!r}")


@to_storage.register(datetime)
def _(argument: datetime) -> typing.Dict[str, str]:
    return {"$date": argument.isoformat()}


@to_storage.register(date)
def _(argument: date) -> typing.Dict[str, str]:
    return {"$day": argument.isoformat()}


@to_storage.register(uuid.UUID)
def _(argument: uuid.UUID) -> typing.Dict[str, str]:
    return {"$uuid": str(argument)}


mapping: typing.Dict[str, typing.Callable[[str], typing.Any]] = {
    "$date": datetime.fromisoformat,
    "$day": date.fromisoformat,
    "$uuid": uuid.UUID,
}


def from_storage(argument: typing.Dict[str, typing.Any]) -> typing.Any:
    if len(argument) == 1:
        (tag, value), = argument.items()
        if tag in mapping:
            return mapping[tag](value)
    return argument


def encode(value: typing.Any, sort_keys: bool = False) -> str:
    return json.dumps(value, default=to_storage, sort_keys=sort_keys)


def decode(text: str) -> typing.Any:
    return json.loads(text, object_hook=from_storage)


class DocumentType(TypeDecorator):
    """JSON text column keeping temporal and uuid values typed across the round trip."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: typing.Any, dialect: Dialect) -> typing.Optional[str]:
        if value is None:
            return None
        return encode(value)

    def process_result_value(self, value: typing.Optional[str], dialect: Dialect) -> typing.Any:
        if value is None:
            return None
        return decode(value)
