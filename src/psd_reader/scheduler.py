"""
Cooperative time-slicing.

Decoding a large document takes a while. Instead of running it in one go,
the work is split into small units exposed by a *stage*: any object with a
``step()`` method that runs one unit and returns `True` once the stage is
finished. :py:class:`CooperativeScheduler` runs a stage in bounded slices
and gives control back to the host between slices.

Three ways to drive a stage:

- :py:meth:`CooperativeScheduler.run_slice` runs a single slice; the host
  calls it again from its own loop.
- :py:meth:`CooperativeScheduler.run` blocks until done, sleeping between
  slices.
- :py:meth:`CooperativeScheduler.run_async` awaits between slices so other
  coroutines of the event loop keep running.

Example::

    import asyncio

    scheduler = CooperativeScheduler(SchedulerConfig(time_slice_ms=4))
    asyncio.run(scheduler.run_async(stage))
"""

import asyncio
import logging
import time
from typing import Any, Callable, Optional, Protocol

from attrs import define, field

from psd_reader.config import SchedulerConfig
from psd_reader.errors import DecodeCancelled

logger = logging.getLogger(__name__)


class Stage(Protocol):
    def step(self) -> bool: ...


@define
class CancelToken:
    """
    Caller-side switch to abort a running stage.

    The scheduler checks the token at slice boundaries only; a slice in
    progress always completes.
    """

    cancelled: bool = field(default=False, init=False)

    def cancel(self) -> None:
        self.cancelled = True

    def check(self) -> None:
        if self.cancelled:
            raise DecodeCancelled("Decoding was cancelled")


class CooperativeScheduler:
    """
    Runs stages in bounded slices.

    A slice calls ``stage.step()`` up to ``config.block_size`` times, or until
    ``config.time_slice_ms`` have elapsed, whichever comes first.

    :param config: :py:class:`~psd_reader.config.SchedulerConfig`.
    :param clock: monotonic clock in seconds.
    :param sleep: blocking sleep used by :py:meth:`run`.
    """

    def __init__(
        self,
        config: Optional[SchedulerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        self.config = config or SchedulerConfig()
        self.clock = clock
        self.sleep = sleep
        self.slices = 0

    def __repr__(self) -> str:
        return "CooperativeScheduler(%r)" % (self.config,)

    @property
    def delay(self) -> float:
        return self.config.yield_delay_ms / 1000.0

    def run_slice(self, stage: Stage, cancel: Optional[CancelToken] = None) -> bool:
        """
        Runs one slice of ``stage``.

        :return: `True` when the stage is done.
        """
        if cancel is not None:
            cancel.check()
        deadline = self.clock() + self.config.time_slice_ms / 1000.0
        done = False
        count = 0
        while count < self.config.block_size:
            done = stage.step()
            count += 1
            if done or self.clock() >= deadline:
                break
        self.slices += 1
        logger.debug("slice %d ran %d units, done=%s" % (self.slices, count, done))
        return done

    def run(self, stage: Stage, cancel: Optional[CancelToken] = None) -> None:
        """Runs ``stage`` to completion, sleeping between slices."""
        while not self.run_slice(stage, cancel):
            self.sleep(self.delay)

    async def run_async(self, stage: Stage, cancel: Optional[CancelToken] = None) -> None:
        """Runs ``stage`` to completion, yielding to the event loop between slices."""
        while not self.run_slice(stage, cancel):
            await asyncio.sleep(self.delay)
