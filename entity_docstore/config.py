import os
import typing

import attr
from dotenv import load_dotenv

from entity_docstore.logs import configure_logging
from entity_docstore.storages import MEMORY_URL, connect
from entity_docstore.storages.base import Connection


_TRUE_VALUES = {"1", "true", "yes", "on"}


@attr.s(auto_attribs=True, frozen=True)
class Settings:
    url: str = MEMORY_URL
    echo: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: typing.Optional[typing.Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            load_dotenv()
            environ = os.environ
        return cls(
            url=environ.get("DOCSTORE_URL", MEMORY_URL),
            echo=environ.get("DOCSTORE_ECHO", "").strip().lower() in _TRUE_VALUES,
            log_level=environ.get("DOCSTORE_LOG_LEVEL", "INFO").upper(),
        )


def connect_from_settings(settings: typing.Optional[Settings] = None) -> Connection:
    """Configure package logging and open the store named by ``settings`` (read from the environment by default)."""
    settings = settings if settings is not None else Settings.from_env()
    configure_logging(settings.log_level)
    if settings.url == MEMORY_URL:
        return connect(settings.url)
    return connect(settings.url, echo=settings.echo)
