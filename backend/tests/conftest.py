from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from sqlproc.api.deps import get_repository, get_session_factory
from sqlproc.main import app
from tests.utils.session import FakeSession, InMemoryScriptRepository, factory_for


@pytest.fixture
def repository() -> InMemoryScriptRepository:
    return InMemoryScriptRepository({})


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(
    repository: InMemoryScriptRepository, fake_session: FakeSession
) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_session_factory] = lambda: factory_for(fake_session)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()
