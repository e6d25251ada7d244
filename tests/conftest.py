from __future__ import annotations

import pytest

from fakes import FakeChannelSet, ManualClock


@pytest.fixture
def channels() -> FakeChannelSet:
    return FakeChannelSet("C", "D", "E")


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(1000.0)
