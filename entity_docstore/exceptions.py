import typing


class DocstoreError(Exception):
    pass


class ConfigurationError(DocstoreError):
    pass


class MissingPrimaryKeyError(ConfigurationError, RuntimeError):
    def __init__(self, table: str) -> None:
        super().__init__(f'Cannot insert row in "{table}" table, it has no primary key.')
        self.table = table


class RecordNotFoundError(DocstoreError, LookupError):
    def __init__(self, table: str, primary_key: typing.Any) -> None:
        super().__init__(f'Record not found in table "{table}" with primary key [{primary_key}]')
        self.table = table
        self.primary_key = primary_key


class InvalidPrimaryKeyError(DocstoreError, ValueError):
    pass


class UnsupportedFinderError(DocstoreError, AttributeError):
    def __init__(self, method: str) -> None:
        super().__init__(f'Unknown method "{method}"')
        self.method = method


class StoreError(DocstoreError):
    """Raised by storages when the underlying driver fails."""


class DuplicateKeyError(StoreError):
    pass


class StoreWarning(UserWarning):
    pass
