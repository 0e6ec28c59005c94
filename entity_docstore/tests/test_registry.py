import pytest

from entity_docstore.exceptions import UnsupportedFinderError
from entity_docstore.finders import default_finders
from entity_docstore.registry import FinderRegistry, finder_method_name


def test_builtin_finders():
    assert {"all", "first", "list"} <= set(default_finders.strategies)


@pytest.mark.parametrize("name, method", [("bogus", "findBogus"), ("all", "findAll"), ("by_owner", "findByOwner")])
def test_method_names(name, method):
    assert finder_method_name(name) == method


def test_registration_is_validated():
    registry = FinderRegistry()

    with pytest.raises(ValueError):
        registry.register("", lambda finder: [])
    with pytest.raises(TypeError):
        registry.register("broken", "not callable")

    registry.register("recent", lambda finder: [])
    with pytest.raises(ValueError):
        registry.register("recent", lambda finder: [])
    registry.register("recent", lambda finder: [{"_id": 1}], replace=True)

    assert list(registry.resolve("recent")(None)) == [{"_id": 1}]


def test_decorator_registration():
    registry = FinderRegistry()

    @registry.register("newest")
    def newest(finder):
        return []

    assert registry.resolve("newest") is newest
    assert "newest" in registry


def test_unknown_name_raises():
    with pytest.raises(UnsupportedFinderError, match="findMissing"):
        FinderRegistry().resolve("missing")


def test_copies_are_independent():
    copy = default_finders.copy()
    copy.register("extra", lambda finder: [])

    assert "extra" not in default_finders
