import uuid
from datetime import date, datetime

import pytest

from entity_docstore.storages.sqlalchemy.types import decode, encode


@pytest.mark.parametrize(
    "value",
    [
        {"at": datetime(2024, 1, 2, 3, 4, 5)},
        {"on": date(2024, 1, 2)},
        {"id": uuid.UUID(int=1)},
        {"plain": {"$other": "kept"}},
        {"list": [1, "two", None, 3.5]},
    ],
)
def test_values_survive_encoding(value):
    assert decode(encode(value)) == value


def test_datetimes_are_tagged():
    assert encode({"at": datetime(2024, 1, 2, 3, 4, 5)}) == '{"at": {"$date": "2024-01-02T03:04:05"}}'


def test_unsupported_values_are_rejected():
    with pytest.raises(TypeError):
        encode({"blob": object()})
