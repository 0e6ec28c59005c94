import operator
import typing
from datetime import date, datetime

from entity_docstore.storages.base import Criteria, Document


_MISSING = object()

_COMPARISONS: typing.Dict[str, typing.Callable[[typing.Any, typing.Any], bool]] = {
    "$eq": operator.eq,
    "$ne": operator.ne,
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
}


def _is_operator_expression(condition: typing.Any) -> bool:
    return isinstance(condition, typing.Mapping) and bool(condition) and all(key.startswith("$") for key in condition)


def _matches_operator(value: typing.Any, name: str, argument: typing.Any) -> bool:
    if name == "$exists":
        return (value is not _MISSING) == bool(argument)
    if name == "$in":
        return value is not _MISSING and value in argument
    if name == "$nin":
        return value is _MISSING or value not in argument
    try:
        compare = _COMPARISONS[name]
    except KeyError:
        raise ValueError(f"Unsupported query operator {name!r}") from None
    if value is _MISSING:
        return name == "$ne"
    try:
        return compare(value, argument)
    except TypeError:
        return False


def matches(document: Document, criteria: typing.Optional[Criteria]) -> bool:
    for field, condition in (criteria or {}).items():
        value = document.get(field, _MISSING)
        if _is_operator_expression(condition):
            if not all(_matches_operator(value, name, argument) for name, argument in condition.items()):
                return False
        elif value is _MISSING or value != condition:
            return False
    return True


def equality_fields(criteria: typing.Optional[Criteria]) -> Document:
    return {
        field: condition for field, condition in (criteria or {}).items() if not _is_operator_expression(condition)
    }


def replace(existing: Document, criteria: typing.Optional[Criteria], document: Document) -> Document:
    replacement = dict(document)
    replacement.update(equality_fields(criteria))
    replacement["_id"] = existing["_id"]
    return replacement


def project(document: Document, projection: typing.Optional[typing.Sequence[str]]) -> Document:
    if not projection:
        return document
    fields = set(projection) | {"_id"}
    return {field: value for field, value in document.items() if field in fields}


def _sort_key(value: typing.Any) -> typing.Tuple[typing.Any, ...]:
    # values of different types order by type first, the way the BSON sort order does
    if value is None:
        return (0,)
    if isinstance(value, bool):
        return (6, value)
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    if isinstance(value, typing.Mapping):
        return (3, repr(value))
    if isinstance(value, (list, tuple)):
        return (4, repr(value))
    if isinstance(value, bytes):
        return (5, value)
    if isinstance(value, datetime):
        return (7, value.tzinfo is not None, value)
    if isinstance(value, date):
        return (8, value)
    return (9, type(value).__name__, repr(value))


def apply_sort(
    documents: typing.List[Document], sort: typing.Optional[typing.Sequence[typing.Tuple[str, int]]]
) -> None:
    for field, direction in reversed(list(sort or [])):
        documents.sort(key=lambda document: _sort_key(document.get(field)), reverse=direction < 0)


def run_query(
    documents: typing.Iterable[Document],
    criteria: typing.Optional[Criteria] = None,
    projection: typing.Optional[typing.Sequence[str]] = None,
    sort: typing.Optional[typing.Sequence[typing.Tuple[str, int]]] = None,
    skip: int = 0,
    limit: typing.Optional[int] = None,
) -> typing.List[Document]:
    selected = [document for document in documents if matches(document, criteria)]
    apply_sort(selected, sort)
    end = skip + limit if limit else None
    return [project(document, projection) for document in selected[skip:end]]
