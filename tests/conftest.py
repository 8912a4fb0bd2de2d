"""Root conftest — shared test configuration and orchestration fixtures."""

import os

import pytest

# Ensure tests don't accidentally use real API keys or a developer .env
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault("API_AUTH_TOKEN", "")
os.environ.setdefault("YELP_API_KEY", "")

from callrelay.core.call_action_policy import CallActionPolicy  # noqa: E402
from callrelay.core.dispatch_guard import DispatchGuard  # noqa: E402
from callrelay.core.kv_store import InMemoryKeyValueStore  # noqa: E402
from callrelay.core.phone_directory import PhoneDirectory  # noqa: E402

from tests.fakes import (  # noqa: E402
    FakeAgentPlatform, FakeCompletionClient, FakeIssuer, FakeTelephony,
    make_settings,
)


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def guard(store):
    return DispatchGuard(store)


@pytest.fixture
def directory(store):
    return PhoneDirectory(store)


@pytest.fixture
def call_actions(store):
    return CallActionPolicy(store)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def platform():
    return FakeAgentPlatform()


@pytest.fixture
def telephony():
    return FakeTelephony()


@pytest.fixture
def issuer():
    return FakeIssuer()


@pytest.fixture
def completion():
    return FakeCompletionClient()
