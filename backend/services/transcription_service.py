import asyncio
import logging
import time
from typing import Awaitable, Callable

import aiohttp

from models.errors import StatusCheckError, SubmissionError, TranscriptionError
from models.job import JobHandle, JobStatus, PollBudget
from services.polling import poll_until_complete
from utils.env import Settings
from utils.http import HttpStatusError, fetch_json

logger = logging.getLogger("transcription_service")

STAGE = "transcription"
PENDING_STATUSES = {"queued", "processing"}


def classify_transcript(data: dict) -> JobStatus:
    """Normalize an AssemblyAI transcript body to waiting / done / error.

    Bodies carrying an explicit `status` are classified on it. Bodies without one
    only signal completion through a non-empty `text`.
    """
    error = data.get("error")
    status = data.get("status")

    if status is None:
        if error:
            return JobStatus(status="error", error=str(error))
        if data.get("text"):
            return JobStatus(status="done", result=data["text"])
        return JobStatus(status="waiting")

    status = str(status).lower()
    if status == "error" or error:
        return JobStatus(status="error", error=str(error or "transcription failed without detail"))
    if status == "completed":
        return JobStatus(status="done", result=data.get("text") or "")
    if status not in PENDING_STATUSES:
        logger.warning(f"Unknown transcript status {status!r}, treating as pending")
    return JobStatus(status="waiting")


class TranscriptionService:
    def __init__(
        self,
        settings: Settings,
        session: aiohttp.ClientSession,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.base_url = settings.ASSEMBLYAI_API_URL
        self.session = session
        self.headers = {
            "authorization": settings.ASSEMBLYAI_API_KEY,
            "content-type": "application/json",
        }
        self._sleep = sleep
        self._clock = clock

    async def submit(self, audio_url: str) -> JobHandle:
        try:
            data = await fetch_json(
                self.session,
                "POST",
                f"{self.base_url}/transcript",
                json={"audio_url": audio_url},
                headers=self.headers,
            )
        except HttpStatusError as e:
            raise SubmissionError(f"AssemblyAI rejected {audio_url}: {e.detail}", stage=STAGE) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise SubmissionError(f"could not submit {audio_url} to AssemblyAI: {e}", stage=STAGE) from e

        transcript_id = data.get("id")
        if not transcript_id:
            raise SubmissionError(f"AssemblyAI response has no transcript id: {data}", stage=STAGE)

        logger.info(f"Transcription job {transcript_id} submitted (status={data.get('status')})")
        return str(transcript_id)

    async def get_status(self, handle: JobHandle) -> JobStatus:
        try:
            data = await fetch_json(
                self.session, "GET", f"{self.base_url}/transcript/{handle}", headers=self.headers
            )
        except (HttpStatusError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise StatusCheckError(f"status check for transcript {handle} failed: {e}", stage=STAGE) from e

        status = classify_transcript(data)
        if status.status == "done" and not isinstance(status.result, str):
            raise StatusCheckError(
                f"transcript {handle} returned non-string text: {status.result!r}", stage=STAGE
            )
        return status

    async def await_result(self, handle: JobHandle, budget: PollBudget) -> str:
        return await poll_until_complete(
            lambda: self.get_status(handle),
            budget,
            stage=STAGE,
            handle=handle,
            on_failure=lambda detail: TranscriptionError(detail, handle=handle),
            sleep=self._sleep,
            clock=self._clock,
        )
