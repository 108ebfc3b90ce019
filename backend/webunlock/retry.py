"""
Retry orchestration for browser operations.

Each attempt gets a brand-new browser session which is always released before
the next attempt starts. Failures are reported through ``AttemptOutcome``
instead of being raised.

    Idle -> Attempting -> Success
                       -> RetryPending -> Attempting ...
                       -> Exhausted
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncContextManager, Awaitable, Callable, Generic, List, Optional, TypeVar

from .config import RETRY_BACKOFF_MS
from .models import ScrapeOptions
from .session import BrowserSession, browser_session

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[BrowserSession], Awaitable[T]]
SessionFactory = Callable[[ScrapeOptions], AsyncContextManager[BrowserSession]]
Sleep = Callable[[float], Awaitable[Any]]


class AttemptState(Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRY_PENDING = "retry_pending"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


@dataclass
class AttemptOutcome(Generic[T]):
    state: AttemptState
    attempts: int
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.state is AttemptState.SUCCESS


def backoff_delay(attempts_made: int) -> float:
    """Seconds to wait after ``attempts_made`` failed attempts (linear)."""
    return RETRY_BACKOFF_MS * attempts_made / 1000


class RetryOrchestrator:
    def __init__(self, session_factory: SessionFactory = browser_session, sleep: Sleep = asyncio.sleep):
        self.session_factory = session_factory
        self.sleep = sleep
        self.transitions: List[AttemptState] = [AttemptState.IDLE]

    def _enter(self, state: AttemptState) -> None:
        self.transitions.append(state)

    async def run(self, operation: Operation, options: ScrapeOptions, label: str = "operation") -> AttemptOutcome:
        """Run ``operation`` with up to ``options.retries`` extra attempts."""
        max_attempts = options.retries + 1

        for attempt in range(1, max_attempts + 1):
            self._enter(AttemptState.ATTEMPTING)
            logger.info(f"{label}: attempt {attempt}/{max_attempts}")
            try:
                async with self.session_factory(options) as session:
                    value = await operation(session)
            except Exception as e:
                error = str(e) or type(e).__name__
                logger.warning(f"{label}: attempt {attempt} failed: {error}")

                if attempt <= options.retries:
                    self._enter(AttemptState.RETRY_PENDING)
                    await self.sleep(backoff_delay(attempt))
                    continue

                self._enter(AttemptState.EXHAUSTED)
                logger.error(f"{label}: giving up after {attempt} attempts. Last error: {error}", exc_info=True)
                return AttemptOutcome(state=AttemptState.EXHAUSTED, attempts=attempt, error=error)

            self._enter(AttemptState.SUCCESS)
            logger.info(f"{label}: succeeded on attempt {attempt}")
            return AttemptOutcome(state=AttemptState.SUCCESS, attempts=attempt, value=value)

        # retries is validated non-negative, so the loop always returns
        raise AssertionError("unreachable")
