import asyncio
import logging
import uuid
from datetime import datetime
from typing import Any, Awaitable, Optional

import aiohttp

from models.errors import PipelineError, PollTimeoutError
from models.job import PipelineResult, PollBudget, RunStatus
from services.conversion_service import ConversionService
from services.summary_service import SummaryService
from services.transcription_service import TranscriptionService
from services.youtube_service import YoutubeService
from utils.env import Settings

logger = logging.getLogger("pipeline_service")


class TranscriptPipeline:
    """Latest video -> audio URL -> transcript, strictly in sequence.

    The first failing stage ends the run; its error is re-raised tagged with the
    stage name and nothing produced by earlier stages is kept.
    """

    def __init__(
        self,
        locator: YoutubeService,
        converter: ConversionService,
        transcriber: TranscriptionService,
        conversion_budget: PollBudget,
        transcription_budget: PollBudget,
        channel_id: str,
        summarizer: SummaryService | None = None,
    ) -> None:
        self.locator = locator
        self.converter = converter
        self.transcriber = transcriber
        self.conversion_budget = conversion_budget
        self.transcription_budget = transcription_budget
        self.channel_id = channel_id
        self.summarizer = summarizer

    async def _stage(self, stage: str, step: Awaitable[Any]) -> Any:
        try:
            return await step
        except PipelineError as e:
            if e.stage != stage:
                e.stage = stage
            logger.error(f"Stage {stage} failed: {e.message}")
            raise
        except Exception as e:
            logger.exception(f"Stage {stage} failed unexpectedly")
            raise PipelineError(f"unexpected {type(e).__name__}: {e}", stage=stage) from e

    async def transcribe_latest(self) -> PipelineResult:
        logger.info(f"Pipeline started for channel {self.channel_id}")
        video = await self._stage("lookup", self.locator.get_latest_video(self.channel_id))
        audio_url = await self._stage("conversion", self._convert(video))
        transcript = await self._stage("transcription", self._transcribe(audio_url))

        post = None
        if self.summarizer is not None:
            post = await self._stage("summary", self.summarizer.summarize(transcript))

        logger.info(f"Pipeline finished for {video.video_id}: {len(transcript)} chars of transcript")
        return PipelineResult(video=video, audio_url=audio_url, transcript=transcript, post=post)

    async def _convert(self, video) -> str:
        handle = await self.converter.submit(video)
        return await self.converter.await_result(handle, self.conversion_budget)

    async def _transcribe(self, audio_url: str) -> str:
        handle = await self.transcriber.submit(audio_url)
        return await self.transcriber.await_result(handle, self.transcription_budget)


class PipelineService:
    def __init__(self, settings: Settings):
        self.settings = settings
        # In-memory only; runs are not kept across restarts
        self.runs: dict[str, RunStatus] = {}
        self._tasks: set[asyncio.Task] = set()

    async def start_run(self) -> str:
        """Start a pipeline run in the background and return its id for polling."""
        run_id = str(uuid.uuid4())
        self.runs[run_id] = RunStatus(status="waiting", run_start_time=datetime.now())
        task = asyncio.create_task(self._run_in_background(run_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info(f"[{run_id[:8]}] Pipeline run queued")
        return run_id

    def get_run(self, run_id: str) -> Optional[RunStatus]:
        return self.runs.get(run_id)

    async def _run_in_background(self, run_id: str) -> None:
        run = self.runs[run_id]
        try:
            run.result = await self.run()
            run.status = "done"
            logger.info(f"[{run_id[:8]}] Pipeline run done")
        except PipelineError as e:
            run.status = "error"
            run.error = e.message
            run.stage = e.stage
            run.timed_out = isinstance(e, PollTimeoutError)
            logger.error(f"[{run_id[:8]}] Pipeline run failed: {e}")
        except Exception as e:
            run.status = "error"
            run.error = f"unexpected {type(e).__name__}: {e}"
            run.stage = PipelineError.stage
            logger.exception(f"[{run_id[:8]}] Pipeline run crashed")
        finally:
            run.run_end_time = datetime.now()

    def build_pipeline(self, session: aiohttp.ClientSession) -> TranscriptPipeline:
        summarizer = SummaryService(self.settings) if self.settings.summary_enabled else None
        return TranscriptPipeline(
            locator=YoutubeService(self.settings, session),
            converter=ConversionService(self.settings, session),
            transcriber=TranscriptionService(self.settings, session),
            conversion_budget=self.settings.conversion_budget(),
            transcription_budget=self.settings.transcription_budget(),
            channel_id=self.settings.YOUTUBE_CHANNEL_ID,
            summarizer=summarizer,
        )

    async def run(self) -> PipelineResult:
        # One session per run so concurrent runs share no connection state
        timeout = aiohttp.ClientTimeout(total=self.settings.HTTP_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            return await self.build_pipeline(session).transcribe_latest()
