"""
Bounded polling for remote object state.

A refresh function returns a ``PollOutcome``. ``wait_for_state`` calls it
until the outcome reaches one of the target states, the refresh reports an
error, or the deadline elapses.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Collection, Optional

from errors import WaitTimeoutError

logger = logging.getLogger(__name__)


class PollState(Enum):
    """Observed state of a remote object during polling."""

    PENDING = "pending"
    PRESENT = "present"
    ABSENT = "absent"
    ERROR = "error"


@dataclass(frozen=True)
class PollOutcome:
    """Result of a single probe."""

    state: PollState
    token: str = ""
    observed: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def pending(cls, observed: Any = None) -> "PollOutcome":
        return cls(state=PollState.PENDING, observed=observed)

    @classmethod
    def present(cls, token: str, observed: Any = None) -> "PollOutcome":
        return cls(state=PollState.PRESENT, token=token, observed=observed)

    @classmethod
    def absent(cls) -> "PollOutcome":
        return cls(state=PollState.ABSENT)

    @classmethod
    def failed(cls, error: BaseException) -> "PollOutcome":
        return cls(state=PollState.ERROR, error=error)


RefreshFunc = Callable[[], Awaitable[PollOutcome]]


async def wait_for_state(
    refresh: RefreshFunc,
    target: Collection[PollState],
    timeout: float,
    poll_interval: float = 5.0,
    expected_token: Optional[str] = None,
    delay: float = 0.0,
) -> PollOutcome:
    """
    Poll ``refresh`` until it reports one of the ``target`` states.

    Args:
        refresh: Probe returning a PollOutcome.
        target: States that end the wait successfully.
        timeout: Seconds before giving up.
        poll_interval: Seconds between probes.
        expected_token: When set, a PRESENT outcome only counts if its token
            matches (e.g. waiting for an object to become visible by name).
        delay: Seconds to wait before the first probe.

    Returns:
        The first outcome that matched.

    Raises:
        Exception: The probe's error when it reports PollState.ERROR.
        WaitTimeoutError: If the deadline elapses first.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    expected = ", ".join(sorted(s.value for s in target))

    if delay > 0:
        await asyncio.sleep(min(delay, timeout))

    while True:
        outcome = await refresh()

        if outcome.state is PollState.ERROR:
            raise outcome.error

        if outcome.state in target and (
            expected_token is None
            or outcome.state is not PollState.PRESENT
            or outcome.token == expected_token
        ):
            return outcome

        remaining = deadline - loop.time()
        if remaining <= 0:
            raise WaitTimeoutError(outcome.state.value, expected, timeout)

        logger.debug(
            f"State is {outcome.state.value}, waiting for {expected} "
            f"({remaining:.0f}s left)"
        )
        await asyncio.sleep(min(poll_interval, remaining))
