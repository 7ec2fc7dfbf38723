import pytest

from models import AlertConfig, Thresholds

from fakes import FakeClock, FakePlayer, fake_resolver


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def player(clock):
    return FakePlayer(clock)


@pytest.fixture
def resolver():
    return fake_resolver


@pytest.fixture
def alert_config():
    return AlertConfig(
        thresholds=Thresholds(upper=90, lower=15),
        full_sound="full.wav",
        low_sound="low.wav",
        mute_alerts=False,
    )
