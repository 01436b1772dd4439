"""
Asynchronous job polling.

Some providers run transcription as a remote job: the job is submitted, then
its status is fetched at a fixed interval until it succeeds, fails, or the
total wait exceeds a bound. JobPoller drives that state machine:

    SUBMITTED --poll--> IN_PROGRESS --poll--> SUCCEEDED
                                      \\----> FAILED
    (elapsed > timeout)            --------> TIMED_OUT

The clock and sleep functions are injectable so the timeout path can be
exercised without waiting in real time.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from relay.errors import ProviderError, TimedOutError

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    SUBMITTED = "SUBMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.SUCCEEDED, JobState.FAILED, JobState.TIMED_OUT)


# Provider lifecycle strings mapped onto JobState
LIFECYCLE_STATES = {
    "ACCEPTED": JobState.SUBMITTED,
    "SUBMITTED": JobState.SUBMITTED,
    "IN_PROGRESS": JobState.IN_PROGRESS,
    "CANCELING": JobState.IN_PROGRESS,
    "SUCCEEDED": JobState.SUCCEEDED,
    "FAILED": JobState.FAILED,
    "CANCELED": JobState.FAILED,
}


def map_lifecycle_state(lifecycle_state: Optional[str]) -> JobState:
    """Translate a provider lifecycle string; unknown values are non-terminal."""
    return LIFECYCLE_STATES.get((lifecycle_state or "").upper(), JobState.IN_PROGRESS)


@dataclass
class JobStatus:
    """Snapshot of a remote job as reported by the provider."""
    job_id: str
    state: JobState
    detail: Optional[str] = None
    raw: Any = field(default=None, repr=False)


class JobPoller:
    """Polls a remote job until it reaches a terminal state.

    Args:
        provider: Provider name used in raised errors
        fetch_status: Coroutine function returning the JobStatus of a job id
        interval: Fixed seconds between polls
        timeout: Maximum total seconds to wait
        clock: Monotonic clock, seconds
        sleep: Coroutine function used to wait between polls
    """

    def __init__(
        self,
        provider: str,
        fetch_status: Callable[[str], Awaitable[JobStatus]],
        interval: float = 5.0,
        timeout: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.provider = provider
        self._fetch_status = fetch_status
        self.interval = interval
        self.timeout = timeout
        self._clock = clock
        self._sleep = sleep
        self.polls = 0

    async def wait(self, job_id: str) -> JobStatus:
        """Block until the job succeeds.

        Returns:
            The SUCCEEDED JobStatus

        Raises:
            ProviderError: If the job reports failure, with its detail message
            TimedOutError: If the job is still running after ``timeout`` seconds
        """
        started = self._clock()
        while True:
            status = await self._fetch_status(job_id)
            self.polls += 1
            logger.info(f"Job {job_id} status: {status.state.value}")

            if status.state is JobState.SUCCEEDED:
                return status

            if status.state is JobState.FAILED:
                raise ProviderError(
                    self.provider,
                    f"Transcription job failed: {status.detail or 'Unknown error'}",
                )

            elapsed = self._clock() - started
            if elapsed > self.timeout:
                raise TimedOutError(self.provider, job_id, elapsed)

            await self._sleep(self.interval)
