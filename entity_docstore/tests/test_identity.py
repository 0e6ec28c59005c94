import string

import pytest

from entity_docstore.identity import IdentityGenerator


@pytest.fixture()
def generator() -> IdentityGenerator:
    return IdentityGenerator()


def test_generates_object_id_shaped_strings(generator: IdentityGenerator) -> None:
    identifier = generator.generate(["_id"])

    assert len(identifier) == 24
    assert set(identifier) <= set(string.hexdigits.lower())


def test_identifiers_are_unique(generator: IdentityGenerator) -> None:
    identifiers = {generator.new_id() for _ in range(10000)}

    assert len(identifiers) == 10000


@pytest.mark.parametrize("fields", [[], (), ["group_id", "user_id"], ("a", "b", "c")])
def test_composite_and_missing_keys_are_not_generated(generator: IdentityGenerator, fields) -> None:
    assert generator.generate(fields) is None


def test_generators_do_not_collide(generator: IdentityGenerator) -> None:
    other = IdentityGenerator()

    assert generator.new_id() != other.new_id()


def test_leading_bytes_hold_timestamp(generator: IdentityGenerator, monkeypatch) -> None:
    monkeypatch.setattr("entity_docstore.identity.time.time", lambda: 0x5F5E1000)

    assert generator.new_id().startswith("5f5e1000")
