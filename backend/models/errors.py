from typing import Optional


class PipelineError(Exception):
    """Base error for every pipeline stage; `stage` names where it came from."""

    stage = "pipeline"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if stage:
            self.stage = stage

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class VideoLookupError(PipelineError, LookupError):
    stage = "lookup"


class SubmissionError(PipelineError):
    pass


class StatusCheckError(PipelineError):
    pass


class TranscriptionError(PipelineError):
    stage = "transcription"

    def __init__(self, detail: str, handle: Optional[str] = None):
        message = f"transcription job {handle} failed: {detail}" if handle else f"transcription failed: {detail}"
        super().__init__(message)
        self.detail = detail
        self.handle = handle


class PollTimeoutError(PipelineError, TimeoutError):
    def __init__(self, stage: str, handle: str, attempts: int, elapsed: float):
        super().__init__(
            f"job {handle} still pending after {attempts} poll(s) and {elapsed:.1f}s",
            stage=stage,
        )
        self.handle = handle
        self.attempts = attempts
        self.elapsed = elapsed


class SummaryError(PipelineError):
    stage = "summary"
