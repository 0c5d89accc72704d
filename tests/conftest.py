import pytest

from utils.env import Settings


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {
            "YOUTUBE_API_KEY": "yt-key",
            "YOUTUBE_CHANNEL_ID": "UCchannel",
            "CONVERSION_API_URL": "https://convert.test/v1",
            "CONVERSION_API_KEY": "conv-key",
            "ASSEMBLYAI_API_KEY": "aai-key",
            "OPENAI_API_KEY": None,
            "SUMMARIZE_TRANSCRIPT": False,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()
