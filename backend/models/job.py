from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Literal

# Opaque job identifier returned by a job-creation call
JobHandle = str


@dataclass
class JobStatus:
    status: Literal["done", "waiting", "error"]
    result: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != "waiting"


@dataclass(frozen=True)
class PollBudget:
    """How long a job may be polled before it is treated as timed out.

    `deadline` is measured in seconds from the moment polling starts. When both
    bounds are set, whichever is reached first ends the loop.
    """
    interval: float
    max_attempts: Optional[int] = None
    deadline: Optional[float] = None

    def __post_init__(self):
        if self.interval <= 0:
            raise ValueError("poll interval must be positive")
        if self.max_attempts is None and self.deadline is None:
            raise ValueError("poll budget needs max_attempts or deadline")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.deadline is not None and self.deadline <= 0:
            raise ValueError("deadline must be positive")


@dataclass(frozen=True)
class VideoReference:
    video_id: str
    title: str = ""
    published_at: Optional[str] = None

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"


@dataclass
class BlogPost:
    title: str
    content: str


@dataclass
class PipelineResult:
    video: VideoReference
    audio_url: str
    transcript: str
    post: Optional[BlogPost] = None

    def to_dict(self) -> dict:
        return {
            "video_id": self.video.video_id,
            "video_url": self.video.url,
            "title": self.video.title,
            "published_at": self.video.published_at,
            "audio_url": self.audio_url,
            "transcript": self.transcript,
            "post": (
                {"title": self.post.title, "content": self.post.content}
                if self.post
                else None
            ),
        }


@dataclass
class RunStatus:
    """State of one background pipeline run started over HTTP."""
    status: Literal["done", "waiting", "error"]
    run_start_time: datetime
    run_end_time: Optional[datetime] = None
    result: Optional[PipelineResult] = None
    error: Optional[str] = None
    stage: Optional[str] = None
    timed_out: bool = False

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "run_start_time": self.run_start_time.isoformat(),
            "run_end_time": self.run_end_time.isoformat() if self.run_end_time else None,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
            "stage": self.stage,
            "timed_out": self.timed_out,
        }
