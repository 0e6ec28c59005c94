from typing import Generator

import pytest
from _pytest.fixtures import SubRequest
from sqlalchemy.engine import Engine, create_engine


@pytest.fixture()
def engine(request: SubRequest) -> Generator[Engine, None, None]:
    connection_url = request.config.getoption("--sqlalchemy-url")
    assert connection_url, "You have to define --sqlalchemy-url cmd line option!"
    engine = create_engine(connection_url)
    yield engine
    engine.dispose()
