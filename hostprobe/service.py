"""Probe service: the sampling and reporting loop."""

import asyncio
import time

import structlog

from .collector import Sampler
from .config import ProbeConfig
from .reporter import Reporter

logger = structlog.get_logger(__name__)


def compensated_delay(interval_seconds: float, elapsed: float) -> float:
    """Time left in the cycle after ``elapsed`` seconds of work, never negative."""
    return max(0.0, interval_seconds - elapsed)


class ProbeService:
    """Runs the sample, report, sleep cycle forever.

    The sleep at the end of a cycle is shortened by the time spent sampling
    and submitting, so the period stays close to the configured interval.
    Overruns are not carried over to later cycles.
    """

    def __init__(
        self,
        config: ProbeConfig,
        sampler: Sampler,
        reporter: Reporter,
        clock=time.monotonic,
        sleep=asyncio.sleep,
    ):
        """Initialize the probe service."""
        self.config = config
        self.sampler = sampler
        self.reporter = reporter
        self._clock = clock
        self._sleep = sleep

    async def run_cycle(self) -> float:
        """Run one iteration and return the number of seconds slept."""
        start = self._clock()

        try:
            report = await self.sampler.sample()
            logger.debug("Sampled report", report=report.model_dump())
            await self.reporter.submit(report)
        except Exception as e:
            logger.error("Error in probe cycle", error=str(e), exc_info=True)

        elapsed = self._clock() - start
        delay = compensated_delay(self.config.interval_seconds, elapsed)
        logger.debug("Cycle finished", elapsed=round(elapsed, 3), sleep=round(delay, 3))
        if elapsed > self.config.interval_seconds:
            logger.warning(
                "Cycle overran interval",
                elapsed=round(elapsed, 3),
                interval=self.config.interval_seconds,
            )

        await self._sleep(delay)
        return delay

    async def run_forever(self) -> None:
        """Run cycles until the process is stopped."""
        logger.info(
            "Starting probe",
            node=self.config.node_name,
            url=self.config.submit_url,
            interval=self.config.interval_seconds,
        )
        try:
            while True:
                await self.run_cycle()
        finally:
            await self.reporter.aclose()
            logger.info("Probe stopped")
