import pytest

from entity_docstore.entity import Entity
from entity_docstore.repository import Repository
from entity_docstore.rules import Mode, RulesChecker, is_unique


def test_rules_apply_only_to_their_modes():
    rules = RulesChecker().add_create(lambda entity, options: False).add_update(lambda entity, options: True)

    assert rules.check(Entity(), Mode.CREATE) is False
    assert rules.check(Entity(), "update") is True


def test_failed_rule_records_error_when_configured():
    rules = RulesChecker().add(lambda entity, options: False, "positive", error_field="age", message="Must be positive")
    entity = Entity({"age": -1})

    assert not rules.check(entity, Mode.UPDATE)
    assert entity.errors == {"age": {"positive": "Must be positive"}}


def test_failed_rule_without_error_field_leaves_errors_alone():
    entity = Entity()

    assert not RulesChecker().add(lambda entity, options: False).check(entity, Mode.CREATE)
    assert entity.errors == {}


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        RulesChecker().check(Entity(), "delete")


def test_is_unique(users: Repository) -> None:
    users.rules.add(is_unique(users, "email"), error_field="email", message="Already taken")
    alice = users.save(users.new_entity(name="Alice", email="alice@example.com"))

    impostor = users.new_entity(name="Eve", email="alice@example.com")
    assert users.save(impostor) is False
    assert impostor.errors == {"email": {"is_unique": "Already taken"}}

    alice["name"] = "Alice Liddell"
    assert users.save(alice) is alice
    assert users.save(users.new_entity(name="Nobody")) is not False
