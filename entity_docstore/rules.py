import enum
import typing

import attr

from entity_docstore.entity import Entity

if typing.TYPE_CHECKING:
    from entity_docstore.repository import Repository


class Mode(enum.Enum):
    CREATE = "create"
    UPDATE = "update"


Rule = typing.Callable[[Entity, typing.Mapping[str, typing.Any]], bool]


@attr.s(auto_attribs=True)
class RuleDefinition:
    rule: Rule
    modes: typing.FrozenSet[Mode]
    name: str
    error_field: typing.Optional[str] = None
    message: str = "This value is invalid"


class RulesChecker:
    def __init__(self) -> None:
        self._rules: typing.List[RuleDefinition] = []

    def add(
        self,
        rule: Rule,
        name: typing.Optional[str] = None,
        *,
        error_field: typing.Optional[str] = None,
        message: typing.Optional[str] = None,
    ) -> "RulesChecker":
        return self._add(rule, frozenset(Mode), name, error_field, message)

    def add_create(
        self,
        rule: Rule,
        name: typing.Optional[str] = None,
        *,
        error_field: typing.Optional[str] = None,
        message: typing.Optional[str] = None,
    ) -> "RulesChecker":
        return self._add(rule, frozenset({Mode.CREATE}), name, error_field, message)

    def add_update(
        self,
        rule: Rule,
        name: typing.Optional[str] = None,
        *,
        error_field: typing.Optional[str] = None,
        message: typing.Optional[str] = None,
    ) -> "RulesChecker":
        return self._add(rule, frozenset({Mode.UPDATE}), name, error_field, message)

    def _add(
        self,
        rule: Rule,
        modes: typing.FrozenSet[Mode],
        name: typing.Optional[str],
        error_field: typing.Optional[str],
        message: typing.Optional[str],
    ) -> "RulesChecker":
        definition = RuleDefinition(rule, modes, name or getattr(rule, "__name__", "rule"), error_field)
        if message:
            definition = attr.evolve(definition, message=message)
        self._rules.append(definition)
        return self

    def __len__(self) -> int:
        return len(self._rules)

    def check(
        self,
        entity: Entity,
        mode: typing.Union[Mode, str],
        options: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> bool:
        mode = Mode(mode)
        options = options or {}
        success = True
        for definition in self._rules:
            if mode not in definition.modes:
                continue
            if definition.rule(entity, options):
                continue
            success = False
            if definition.error_field:
                entity.set_error(definition.error_field, {definition.name: definition.message})
        return success


def is_unique(repository: "Repository", *fields: str, allow_multiple_nulls: bool = True) -> Rule:
    """Rule passing when no other stored document shares the values of ``fields``."""

    def rule(entity: Entity, options: typing.Mapping[str, typing.Any]) -> bool:
        conditions = {field: entity.get(field) for field in fields}
        if allow_multiple_nulls and any(value is None for value in conditions.values()):
            return True
        own_key = None if entity.is_new else repository.extract_key(entity)
        return all(repository.extract_key(other) == own_key for other in repository.find("all", conditions=conditions))

    rule.__name__ = "is_unique"
    return rule
