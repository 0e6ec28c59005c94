import typing

import attr
import inflection

from entity_docstore.exceptions import UnsupportedFinderError

if typing.TYPE_CHECKING:
    from entity_docstore.finders import Finder


FinderStrategy = typing.Callable[["Finder"], typing.Iterable[typing.Dict[str, typing.Any]]]


def finder_method_name(name: str) -> str:
    return "find" + inflection.camelize(name)


@attr.s(auto_attribs=True)
class FinderRegistry:
    strategies: typing.Dict[str, FinderStrategy] = attr.Factory(dict)

    def register(
        self, name: str, strategy: typing.Optional[FinderStrategy] = None, replace: bool = False
    ) -> typing.Any:
        if strategy is None:

            def decorator(func: FinderStrategy) -> FinderStrategy:
                self.register(name, func, replace)
                return func

            return decorator

        if not isinstance(name, str) or not name:
            raise ValueError(f"Finder name must be a non-empty string, got {name!r}")
        if not callable(strategy):
            raise TypeError(f"Finder {name!r} must be callable, got {strategy!r}")
        if name in self.strategies and not replace:
            raise ValueError(f"Finder {name!r} is already registered")
        self.strategies[name] = strategy
        return strategy

    def resolve(self, name: str) -> FinderStrategy:
        try:
            return self.strategies[name]
        except KeyError:
            raise UnsupportedFinderError(finder_method_name(str(name))) from None

    def copy(self) -> "FinderRegistry":
        return FinderRegistry(dict(self.strategies))

    def __contains__(self, name: str) -> bool:
        return name in self.strategies
