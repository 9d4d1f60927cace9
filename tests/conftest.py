from datetime import datetime, timezone

import pytest

from generators.seed import load_seed_data
from matcher.engine import ActivityMatcher
from matcher.providers import InMemoryActivityCatalog, InMemoryPatientDirectory
from planner.assistant import PlanAssistant, ChatHistory

FIXED_NOW = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def seed():
    return load_seed_data()


@pytest.fixture
def catalog(seed):
    return InMemoryActivityCatalog(seed.activities)


@pytest.fixture
def directory(seed):
    return InMemoryPatientDirectory(seed.patients)


@pytest.fixture
def matcher(catalog, directory):
    return ActivityMatcher(catalog, directory)


@pytest.fixture
def assistant(matcher):
    return PlanAssistant(matcher, clock=lambda: FIXED_NOW)


@pytest.fixture
def history(seed):
    return ChatHistory(seed.chats)
