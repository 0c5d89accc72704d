import asyncio
import logging
import time
from typing import Awaitable, Callable

import aiohttp

from models.errors import StatusCheckError, SubmissionError, PipelineError
from models.job import JobHandle, JobStatus, PollBudget, VideoReference
from services.polling import poll_until_complete
from utils.env import Settings
from utils.http import HttpStatusError, fetch_json

logger = logging.getLogger("conversion_service")

STAGE = "conversion"


class ConversionService:
    """Video-to-audio conversion jobs.

    The service only reports a `resultUrl` once the audio is ready. It has no
    failure signal, so a job that never finishes is only detected by the poll
    budget running out.
    """

    def __init__(
        self,
        settings: Settings,
        session: aiohttp.ClientSession,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.base_url = settings.CONVERSION_API_URL
        self.output_format = settings.CONVERSION_OUTPUT_FORMAT
        self.session = session
        self.headers = {
            "Authorization": f"Bearer {settings.CONVERSION_API_KEY}",
            "Content-Type": "application/json",
        }
        self._sleep = sleep
        self._clock = clock

    async def submit(self, video: VideoReference | str) -> JobHandle:
        video_url = video.url if isinstance(video, VideoReference) else video
        payload = {"url": video_url, "format": self.output_format}
        try:
            data = await fetch_json(
                self.session, "POST", f"{self.base_url}/jobs", json=payload, headers=self.headers
            )
        except (HttpStatusError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise SubmissionError(f"could not create conversion job for {video_url}: {e}", stage=STAGE) from e

        job_id = data.get("jobId")
        if not job_id:
            raise SubmissionError(f"conversion response has no jobId: {data}", stage=STAGE)

        logger.info(f"Conversion job {job_id} created for {video_url} ({self.output_format})")
        return str(job_id)

    async def get_status(self, handle: JobHandle) -> JobStatus:
        try:
            data = await fetch_json(
                self.session, "GET", f"{self.base_url}/jobs/{handle}", headers=self.headers
            )
        except (HttpStatusError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise StatusCheckError(f"status check for conversion job {handle} failed: {e}", stage=STAGE) from e

        result_url = data.get("resultUrl")
        if not result_url:
            return JobStatus(status="waiting")
        if not isinstance(result_url, str):
            raise StatusCheckError(
                f"conversion job {handle} returned a non-string resultUrl: {result_url!r}", stage=STAGE
            )
        return JobStatus(status="done", result=result_url)

    async def await_result(self, handle: JobHandle, budget: PollBudget) -> str:
        return await poll_until_complete(
            lambda: self.get_status(handle),
            budget,
            stage=STAGE,
            handle=handle,
            on_failure=lambda detail: PipelineError(f"conversion job {handle} failed: {detail}", stage=STAGE),
            sleep=self._sleep,
            clock=self._clock,
        )
