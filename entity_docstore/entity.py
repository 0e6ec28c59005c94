import typing

import attr


Errors = typing.Dict[str, typing.Dict[str, str]]


@attr.s(auto_attribs=True, eq=False, repr=False)
class Entity:
    """Attribute mapping with the lifecycle flags a repository reconciles against the store.

    Fields are read with ``entity["name"]``, ``entity.get("name")`` or plain attribute access,
    and written with ``entity["name"] = value`` or ``entity.set("name", value)``.
    """

    _properties: typing.Dict[str, typing.Any] = attr.Factory(dict)
    _new: bool = True
    _source: typing.Optional[str] = None
    _dirty: typing.Set[str] = attr.ib(factory=set, init=False)
    _errors: Errors = attr.ib(factory=dict, init=False)

    def __attrs_post_init__(self) -> None:
        self._properties = dict(self._properties)
        if self._new:
            self._dirty = set(self._properties)

    def __getattr__(self, name: str) -> typing.Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._properties[name]
        except KeyError:
            raise AttributeError(name) from None

    def __getitem__(self, field: str) -> typing.Any:
        return self._properties[field]

    def __setitem__(self, field: str, value: typing.Any) -> None:
        self.set(field, value)

    def __contains__(self, field: str) -> bool:
        return field in self._properties

    def __repr__(self) -> str:
        return f"{type(self).__name__}(properties={self._properties!r}, new={self._new!r}, source={self._source!r})"

    def get(self, field: str, default: typing.Any = None) -> typing.Any:
        return self._properties.get(field, default)

    def set(self, field: str, value: typing.Any) -> None:
        changed = field not in self._properties or self._properties[field] != value
        if changed:
            # a new value invalidates what the rules reported about the old one
            self._errors.pop(field, None)
        if changed or self._new:
            self._dirty.add(field)
        self._properties[field] = value

    def has(self, field: str) -> bool:
        return self._properties.get(field) is not None

    def unset(self, field: str) -> None:
        self._properties.pop(field, None)
        self._dirty.discard(field)

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        return dict(self._properties)

    @property
    def is_new(self) -> bool:
        return self._new

    @is_new.setter
    def is_new(self, value: bool) -> None:
        self._new = value

    @property
    def source(self) -> typing.Optional[str]:
        return self._source

    @source.setter
    def source(self, alias: typing.Optional[str]) -> None:
        self._source = alias

    @property
    def is_dirty(self) -> bool:
        return bool(self._dirty)

    def is_field_dirty(self, field: str) -> bool:
        return field in self._dirty

    def dirty_fields(self) -> typing.List[str]:
        return sorted(self._dirty)

    def set_dirty(self, field: str, dirty: bool = True) -> None:
        if dirty:
            self._dirty.add(field)
        else:
            self._dirty.discard(field)

    @property
    def errors(self) -> Errors:
        return {field: dict(messages) for field, messages in self._errors.items()}

    def set_error(self, field: str, messages: typing.Mapping[str, str]) -> None:
        self._errors.setdefault(field, {}).update(messages)

    def clean(self) -> None:
        self._dirty.clear()
        self._errors.clear()
