import asyncio
import logging
import time
from typing import Awaitable, Callable

from models.errors import PipelineError, PollTimeoutError
from models.job import JobHandle, JobStatus, PollBudget

logger = logging.getLogger("polling")

StatusFetcher = Callable[[], Awaitable[JobStatus]]
FailureFactory = Callable[[str], PipelineError]


async def poll_until_complete(
    fetch_status: StatusFetcher,
    budget: PollBudget,
    *,
    stage: str,
    handle: JobHandle,
    on_failure: FailureFactory,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> str:
    """Poll a remote job until it completes, fails, or exhausts its budget.

    Every status request is preceded by one interval of waiting, so the first
    request goes out `budget.interval` seconds after polling starts. When no more
    than an interval is left before the deadline, the loop waits out the
    remainder and times out without issuing another request. With a deadline
    set, each status request is also cut off when the deadline passes.
    """
    started = clock()
    attempts = 0

    def remaining() -> float:
        return budget.deadline - (clock() - started)

    while budget.max_attempts is None or attempts < budget.max_attempts:
        wait = budget.interval
        if budget.deadline is not None:
            left = remaining()
            if left <= wait:
                if left > 0:
                    await sleep(left)
                break

        await sleep(wait)
        attempts += 1

        if budget.deadline is None:
            status = await fetch_status()
        else:
            left = remaining()
            if left <= 0:
                break
            try:
                status = await asyncio.wait_for(fetch_status(), timeout=left)
            except asyncio.TimeoutError:
                logger.warning(f"[{stage}] status request for job {handle} outlived the deadline")
                break

        if status.status == "done":
            logger.info(f"[{stage}] job {handle} completed after {attempts} poll(s)")
            return status.result or ""
        if status.status == "error":
            logger.error(f"[{stage}] job {handle} failed on poll {attempts}: {status.error}")
            raise on_failure(status.error or "unknown error")
        logger.debug(f"[{stage}] job {handle} still pending (poll {attempts})")

    elapsed = clock() - started
    logger.warning(f"[{stage}] job {handle} timed out after {attempts} poll(s), {elapsed:.1f}s")
    raise PollTimeoutError(stage, handle, attempts, elapsed)
