import logging
import typing
import warnings

import attr
import inflection

from entity_docstore.entity import Entity
from entity_docstore.events import AFTER_SAVE, AFTER_SAVE_COMMIT, BEFORE_SAVE, EventDispatcher, EventManager
from entity_docstore.exceptions import (
    ConfigurationError,
    MissingPrimaryKeyError,
    RecordNotFoundError,
    StoreError,
    StoreWarning,
)
from entity_docstore.finders import Finder, default_finders
from entity_docstore.identity import IdentityGenerator, default_generator
from entity_docstore.mapping import Document, DocumentMapper
from entity_docstore.registry import FinderRegistry
from entity_docstore.results import Failed, QueryResult, Saved, SaveOutcome, Vetoed
from entity_docstore.rules import Mode, RulesChecker
from entity_docstore.storages.base import Collection, Connection

logger = logging.getLogger(__name__)


@attr.s(auto_attribs=True, frozen=True)
class SaveOptions:
    check_rules: bool = True
    check_existing: bool = True
    primary: bool = True
    extra: typing.Dict[str, typing.Any] = attr.Factory(dict)

    @classmethod
    def build(cls, options: typing.Mapping[str, typing.Any]) -> "SaveOptions":
        known = {field.name for field in attr.fields(cls)} - {"extra"}
        flags: typing.Dict[str, typing.Any] = {}
        extra: typing.Dict[str, typing.Any] = {}
        for key, value in options.items():
            # checkRules, checkExisting and _primary name the same flags
            name = inflection.underscore(key.lstrip("_"))
            if name in known:
                flags[name] = value
            else:
                extra[key] = value
        if extra:
            logger.debug("Forwarding extra save options", extra={"options": sorted(extra)})
        return cls(extra=extra, **flags)

    def __getitem__(self, key: str) -> typing.Any:
        if key in self.extra:
            return self.extra[key]
        return getattr(self, key)

    def get(self, key: str, default: typing.Any = None) -> typing.Any:
        try:
            return self[key]
        except AttributeError:
            return default


class Repository:
    """Maps entities onto one collection of a document store.

    Configure by subclassing (``class UsersRepository(Repository)`` stores into ``users``)
    or by passing ``table`` and friends to the constructor.
    """

    table: typing.Optional[str] = None
    alias: typing.Optional[str] = None
    primary_key: typing.Union[str, typing.Sequence[str]] = "_id"
    display_field: typing.Optional[str] = None
    entity_class: typing.Type[Entity] = Entity

    def __init__(
        self,
        connection: Connection,
        *,
        table: typing.Optional[str] = None,
        alias: typing.Optional[str] = None,
        primary_key: typing.Optional[typing.Union[str, typing.Sequence[str]]] = None,
        display_field: typing.Optional[str] = None,
        events: typing.Optional[EventDispatcher] = None,
        rules: typing.Optional[RulesChecker] = None,
        mapper: typing.Optional[DocumentMapper] = None,
        id_generator: typing.Optional[IdentityGenerator] = None,
        finders: typing.Optional[FinderRegistry] = None,
    ) -> None:
        self.connection = connection
        self.table = table or self.table or self._default_table()
        self.alias = alias or self.alias or inflection.camelize(self.table)
        if primary_key is not None:
            self.primary_key = primary_key
        if display_field is not None:
            self.display_field = display_field
        self.events = events if events is not None else EventManager()
        self.mapper = mapper or DocumentMapper(self.entity_class)
        self.id_generator = id_generator or default_generator
        self.finders = finders if finders is not None else default_finders.copy()
        self.rules = self.build_rules(rules if rules is not None else RulesChecker())

    def _default_table(self) -> str:
        name = type(self).__name__
        if name == "Repository" or not name.endswith("Repository"):
            raise ConfigurationError(f"{name} needs a table name")
        return inflection.tableize(name[: -len("Repository")])

    def build_rules(self, rules: RulesChecker) -> RulesChecker:
        return rules

    def _collection(self) -> Collection:
        return self.connection.get_collection(self.table)

    def primary_key_fields(self) -> typing.Tuple[str, ...]:
        if isinstance(self.primary_key, str):
            return (self.primary_key,) if self.primary_key else ()
        return tuple(self.primary_key or ())

    def extract_key(
        self, source: typing.Union[Entity, typing.Mapping[str, typing.Any]]
    ) -> typing.Tuple[typing.Any, ...]:
        return tuple(source.get(field) for field in self.primary_key_fields())

    def has_field(self, field: str) -> bool:
        return True

    def new_entity(
        self, properties: typing.Optional[typing.Mapping[str, typing.Any]] = None, **fields: typing.Any
    ) -> Entity:
        return self.entity_class(dict(properties or {}, **fields), source=self.alias)

    def _finder(self, options: typing.Dict[str, typing.Any]) -> Finder:
        return Finder(self._collection(), options, self.primary_key_fields(), self.display_field)

    def find(self, kind: str = "all", **options: typing.Any) -> typing.Union[typing.List[Entity], QueryResult]:
        strategy = self.finders.resolve(kind)
        finder = self._finder(options)
        results = [self.mapper.from_document(document, self.alias) for document in strategy(finder)]
        if options.get("whitelist") is not None:
            return QueryResult(results, finder.count())
        return results

    def get(self, primary_key: typing.Any, **options: typing.Any) -> Entity:
        if not self.primary_key_fields():
            raise MissingPrimaryKeyError(self.table)
        documents = list(self._finder(options).get(primary_key))
        if not documents:
            raise RecordNotFoundError(self.table, primary_key)
        return self.mapper.from_document(documents[0], self.alias)

    def delete(self, entity: Entity, **options: typing.Any) -> bool:
        primary = self.primary_key_fields()
        if not primary:
            raise MissingPrimaryKeyError(self.table)
        criteria = dict(zip(primary, self.extract_key(entity)))
        if any(value is None for value in criteria.values()):
            logger.warning("Cannot delete entity without a primary key", extra={"table": self.table})
            return False
        try:
            removed = self._collection().remove(criteria)
        except StoreError as e:
            logger.error("Delete failed", extra={"table": self.table, "error": str(e)}, exc_info=True)
            warnings.warn(str(e), StoreWarning, stacklevel=2)
            return False
        return bool(removed)

    def save(self, entity: Entity, **options: typing.Any) -> typing.Any:
        """Insert or update ``entity``.

        Returns the entity on success and ``False`` on any persistence failure. When a
        ``Model.beforeSave`` listener stops the event, its result is returned as is.
        """
        save_options = SaveOptions.build(options)

        if entity.errors:
            logger.debug("Refusing to save entity with errors", extra={"table": self.table, "errors": entity.errors})
            return False

        if not entity.is_new and not entity.is_dirty:
            return entity

        outcome = self._process_save(entity, save_options)
        if isinstance(outcome, Vetoed):
            return outcome.result
        if isinstance(outcome, Failed):
            logger.info("Save failed", extra={"table": self.table, "reason": outcome.reason})
            return False

        if save_options.primary:
            self.events.dispatch(AFTER_SAVE_COMMIT, self, entity=entity, options=save_options)
            entity.is_new = False
            entity.source = self.alias
        return entity

    def _process_save(self, entity: Entity, options: SaveOptions) -> SaveOutcome:
        is_new = entity.is_new
        mode = Mode.CREATE if is_new else Mode.UPDATE
        if options.check_rules and not self.rules.check(entity, mode, options):
            return Failed(f"{mode.value} rules failed")

        event = self.events.dispatch(BEFORE_SAVE, self, entity=entity, options=options)
        if event.is_stopped():
            return Vetoed(event.result)

        document = self.mapper.to_document(entity)

        if is_new:
            previous_key = {field: entity[field] for field in self.primary_key_fields() if field in entity}
            outcome: SaveOutcome = Failed("insert raised")
            try:
                outcome = self._insert(entity, document)
            finally:
                if not isinstance(outcome, Saved):
                    self._rollback_insert(entity, previous_key)
        else:
            outcome = self._update(entity, document)

        if isinstance(outcome, Saved):
            self.events.dispatch(AFTER_SAVE, self, entity=entity, options=options)
            entity.clean()
            if not options.primary:
                entity.is_new = False
                entity.source = self.alias
        return outcome

    def _rollback_insert(self, entity: Entity, previous_key: typing.Dict[str, typing.Any]) -> None:
        for field in self.primary_key_fields():
            if field in previous_key:
                entity.set(field, previous_key[field])
            else:
                entity.unset(field)
        entity.is_new = True

    def _insert(self, entity: Entity, document: Document) -> SaveOutcome:
        primary = self.primary_key_fields()
        if not primary:
            raise MissingPrimaryKeyError(self.table)

        if any(document.get(field) is None for field in primary):
            new_id = self.id_generator.generate(primary)
            if new_id is not None:
                document[primary[0]] = new_id
                entity.set(primary[0], new_id)

        if not document:
            return Failed("empty document")

        acknowledgement = self._collection().insert(document)
        if not acknowledgement.get("ok", True):
            return Failed("insert not acknowledged")
        logger.debug("Inserted document", extra={"table": self.table, "document_id": document.get(primary[0])})
        return Saved(entity)

    def _update(self, entity: Entity, document: Document) -> SaveOutcome:
        primary = self.primary_key_fields()
        if not primary:
            raise MissingPrimaryKeyError(self.table)

        criteria = dict(zip(primary, self.extract_key(entity)))
        if any(value is None for value in criteria.values()):
            return Failed("missing primary key value")

        for field in (*primary, "_id"):
            document.pop(field, None)

        acknowledgement = self._collection().update(criteria, document)
        if not acknowledgement.get("ok", True):
            return Failed("update not acknowledged")
        logger.debug("Updated document", extra={"table": self.table, "criteria": criteria})
        return Saved(entity)
