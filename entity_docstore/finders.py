import typing

import attr

from entity_docstore.exceptions import InvalidPrimaryKeyError
from entity_docstore.registry import FinderRegistry
from entity_docstore.storages.base import Collection, Document


Sort = typing.List[typing.Tuple[str, int]]

ASCENDING = 1
DESCENDING = -1


def _parse_order(order: typing.Any) -> Sort:
    if not order:
        return []
    if isinstance(order, str):
        field, _, direction = order.strip().partition(" ")
        return [(field, DESCENDING if direction.strip().lower() == "desc" else ASCENDING)]
    if isinstance(order, typing.Mapping):
        return [
            (field, DESCENDING if str(direction).lower() in ("desc", "-1") else ASCENDING)
            for field, direction in order.items()
        ]
    sort: Sort = []
    for item in order:
        sort.extend(_parse_order(item))
    return sort


@attr.s(auto_attribs=True)
class Finder:
    """Translates repository find options into collection queries."""

    collection: Collection
    options: typing.Dict[str, typing.Any] = attr.Factory(dict)
    primary_key: typing.Tuple[str, ...] = ("_id",)
    display_field: typing.Optional[str] = None

    @property
    def conditions(self) -> typing.Dict[str, typing.Any]:
        return dict(self.options.get("conditions") or {})

    @property
    def projection(self) -> typing.Optional[typing.List[str]]:
        fields = self.options.get("fields")
        return list(fields) if fields else None

    @property
    def sort(self) -> Sort:
        return _parse_order(self.options.get("order"))

    @property
    def limit(self) -> typing.Optional[int]:
        limit = self.options.get("limit")
        return int(limit) if limit is not None else None

    @property
    def skip(self) -> int:
        if self.options.get("offset") is not None:
            return int(self.options["offset"])
        page = self.options.get("page")
        if page is not None and self.limit:
            return max(int(page) - 1, 0) * self.limit
        return 0

    def _find(
        self, projection: typing.Optional[typing.List[str]], limit: typing.Optional[int]
    ) -> typing.List[Document]:
        return self.collection.find(self.conditions, projection=projection, sort=self.sort, skip=self.skip, limit=limit)

    def find_all(self) -> typing.List[Document]:
        return self._find(self.projection, self.limit)

    def find_first(self) -> typing.List[Document]:
        return self._find(self.projection, 1)

    def find_list(self) -> typing.List[Document]:
        key_field = self.options.get("key_field") or self.primary_key[0]
        value_field = self.options.get("value_field") or self.display_field or key_field
        return self._find([key_field, value_field], self.limit)

    def get(self, primary_key: typing.Any) -> typing.List[Document]:
        if len(self.primary_key) == 1:
            values: typing.Sequence[typing.Any] = [primary_key]
        elif isinstance(primary_key, (list, tuple)) and len(primary_key) == len(self.primary_key):
            values = primary_key
        else:
            raise InvalidPrimaryKeyError(
                f"Record not found, primary key {primary_key!r} does not match key fields {list(self.primary_key)}"
            )
        return self.collection.find(dict(zip(self.primary_key, values)), limit=1)

    def count(self) -> int:
        return self.collection.count(self.conditions)


default_finders = FinderRegistry()
default_finders.register("all", Finder.find_all)
default_finders.register("first", Finder.find_first)
default_finders.register("list", Finder.find_list)
