"""API test fixtures: FastAPI app wired to an in-memory Redis double.

Invariants:
    - Every test gets a fresh FakeRedis
    - app.state is populated directly (ASGITransport does not run the lifespan)
    - `client` runs in legacy status mode, `typed_client` in typed mode
"""

import pytest

from tests.app_factory import build_app, http_client
from tests.fake_redis import FakeRedis


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
async def client(fake_redis):
    async with http_client(build_app(fake_redis)) as c:
        yield c


@pytest.fixture
async def typed_client(fake_redis):
    async with http_client(build_app(fake_redis, error_status_mode="typed")) as c:
        yield c
