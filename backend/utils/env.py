from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

from models.job import PollBudget


class Settings(BaseSettings):
    YOUTUBE_API_KEY: str
    YOUTUBE_CHANNEL_ID: str
    CONVERSION_API_URL: str
    CONVERSION_API_KEY: str
    CONVERSION_OUTPUT_FORMAT: str = "mp3"
    ASSEMBLYAI_API_KEY: str
    ASSEMBLYAI_API_URL: str = "https://api.assemblyai.com/v2"
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    SUMMARIZE_TRANSCRIPT: bool = False
    HTTP_TIMEOUT_SECONDS: float = 30.0
    CONVERSION_POLL_INTERVAL_SECONDS: float = 10.0
    CONVERSION_MAX_ATTEMPTS: int | None = 60
    CONVERSION_DEADLINE_SECONDS: float | None = None
    TRANSCRIPTION_POLL_INTERVAL_SECONDS: float = 30.0
    TRANSCRIPTION_MAX_ATTEMPTS: int | None = 120
    TRANSCRIPTION_DEADLINE_SECONDS: float | None = 3600.0
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True
    )

    @field_validator(
        "HTTP_TIMEOUT_SECONDS",
        "CONVERSION_POLL_INTERVAL_SECONDS",
        "CONVERSION_DEADLINE_SECONDS",
        "TRANSCRIPTION_POLL_INTERVAL_SECONDS",
        "TRANSCRIPTION_DEADLINE_SECONDS",
    )
    @classmethod
    def _positive_seconds(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("CONVERSION_MAX_ATTEMPTS", "TRANSCRIPTION_MAX_ATTEMPTS")
    @classmethod
    def _at_least_one(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator("YOUTUBE_CHANNEL_ID", "CONVERSION_API_URL", "ASSEMBLYAI_API_URL")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def summary_enabled(self) -> bool:
        return self.SUMMARIZE_TRANSCRIPT and bool(self.OPENAI_API_KEY)

    def conversion_budget(self) -> PollBudget:
        return PollBudget(
            interval=self.CONVERSION_POLL_INTERVAL_SECONDS,
            max_attempts=self.CONVERSION_MAX_ATTEMPTS,
            deadline=self.CONVERSION_DEADLINE_SECONDS,
        )

    def transcription_budget(self) -> PollBudget:
        return PollBudget(
            interval=self.TRANSCRIPTION_POLL_INTERVAL_SECONDS,
            max_attempts=self.TRANSCRIPTION_MAX_ATTEMPTS,
            deadline=self.TRANSCRIPTION_DEADLINE_SECONDS,
        )
