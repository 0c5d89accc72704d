"""
Tests for settings validation and poll budget construction.
"""

import pytest
from pydantic import ValidationError

from models.job import PollBudget


class TestSettings:
    def test_defaults(self, settings):
        assert settings.ASSEMBLYAI_API_URL == "https://api.assemblyai.com/v2"
        assert settings.CONVERSION_OUTPUT_FORMAT == "mp3"
        assert settings.summary_enabled is False

    def test_budgets(self, make_settings):
        settings = make_settings(
            CONVERSION_POLL_INTERVAL_SECONDS=5,
            CONVERSION_MAX_ATTEMPTS=12,
            TRANSCRIPTION_POLL_INTERVAL_SECONDS=30,
            TRANSCRIPTION_MAX_ATTEMPTS=None,
            TRANSCRIPTION_DEADLINE_SECONDS=900,
        )

        assert settings.conversion_budget() == PollBudget(interval=5, max_attempts=12)
        assert settings.transcription_budget() == PollBudget(interval=30, deadline=900)

    def test_trailing_slash_stripped(self, make_settings):
        assert make_settings(CONVERSION_API_URL="https://convert.test/v1/").CONVERSION_API_URL == "https://convert.test/v1"

    def test_rejects_non_positive_interval(self, make_settings):
        with pytest.raises(ValidationError):
            make_settings(TRANSCRIPTION_POLL_INTERVAL_SECONDS=0)

    def test_rejects_zero_attempts(self, make_settings):
        with pytest.raises(ValidationError):
            make_settings(CONVERSION_MAX_ATTEMPTS=0)

    def test_rejects_blank_channel(self, make_settings):
        with pytest.raises(ValidationError):
            make_settings(YOUTUBE_CHANNEL_ID="  ")

    def test_summary_needs_key(self, make_settings):
        assert make_settings(SUMMARIZE_TRANSCRIPT=True).summary_enabled is False
        assert make_settings(SUMMARIZE_TRANSCRIPT=True, OPENAI_API_KEY="sk-test").summary_enabled is True

    def test_budget_without_bounds_is_rejected(self, make_settings):
        settings = make_settings(CONVERSION_MAX_ATTEMPTS=None, CONVERSION_DEADLINE_SECONDS=None)
        with pytest.raises(ValueError):
            settings.conversion_budget()
