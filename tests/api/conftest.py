"""API test fixtures — ASGI client over a fresh app with an in-process container.

Invariants:
    - get_container is overridden with fakes for every external collaborator
    - Overrides are cleared after each test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from callrelay.main import create_app
from callrelay.services.container import build_container, get_container


@pytest.fixture
def api_app():
    app = create_app()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def container(settings, store, completion, platform, telephony, issuer):
    return build_container(
        settings, store=store, completion_client=completion,
        platform=platform, telephony=telephony, issuer=issuer,
    )


@pytest.fixture
async def client(api_app, container):
    api_app.dependency_overrides[get_container] = lambda: container
    async with AsyncClient(
        transport=ASGITransport(app=api_app), base_url="http://test",
    ) as c:
        yield c
