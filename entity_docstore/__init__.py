import logging

from entity_docstore.config import Settings, connect_from_settings
from entity_docstore.entity import Entity
from entity_docstore.events import EventManager
from entity_docstore.exceptions import (
    MissingPrimaryKeyError,
    RecordNotFoundError,
    StoreError,
    UnsupportedFinderError,
)
from entity_docstore.identity import IdentityGenerator
from entity_docstore.logs import configure_logging
from entity_docstore.mapping import DocumentMapper
from entity_docstore.repository import Repository, SaveOptions
from entity_docstore.results import QueryResult
from entity_docstore.rules import Mode, RulesChecker
from entity_docstore.storages import connect

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DocumentMapper",
    "Entity",
    "EventManager",
    "IdentityGenerator",
    "MissingPrimaryKeyError",
    "Mode",
    "QueryResult",
    "RecordNotFoundError",
    "Repository",
    "RulesChecker",
    "SaveOptions",
    "Settings",
    "StoreError",
    "UnsupportedFinderError",
    "configure_logging",
    "connect",
    "connect_from_settings",
]
