"""Single-metric threshold check."""

import logging
from collections.abc import Awaitable, Callable

from fleetwatch.checks.results import CheckResult, MetricPoint
from fleetwatch.checks.thresholds import Threshold
from fleetwatch.registry.errors import RegistryError

logger = logging.getLogger(__name__)


class StandardCheck:
    """
    A check built from one numeric observation.

    The same definition backs two registry entries: ``check()`` classifies
    the value against the thresholds, ``metric()`` only reports it.
    """

    def __init__(
        self,
        name: str,
        metric_name: str,
        fetch_value: Callable[[], Awaitable[float]],
        threshold: Threshold,
        message: Callable[[float], str] | None = None,
    ):
        """
        Initialize the check.

        Args:
            name: Check name used in result messages
            metric_name: Dotted metric name for the reported value
            fetch_value: Coroutine function returning the observation
            threshold: Warning/error thresholds and their direction
            message: Formats the observation for humans
        """
        self.name = name
        self.metric_name = metric_name
        self.fetch_value = fetch_value
        self.threshold = threshold
        self.message = message or (lambda value: f"{value:g}")

    async def check(self) -> CheckResult:
        try:
            value = await self.fetch_value()
        except RegistryError as e:
            return CheckResult.error(self.name, f"{self.name}: {e}")

        return CheckResult(
            name=self.name,
            verdict=self.threshold.classify(value),
            output=f"{self.name}: {self.message(value)}",
            points=[MetricPoint(self.metric_name, value)],
        )

    async def metric(self) -> CheckResult:
        try:
            value = await self.fetch_value()
        except RegistryError as e:
            logger.warning("%s: metric unavailable: %s", self.name, e)
            return CheckResult.metric(self.name, [])

        return CheckResult.metric(self.name, [MetricPoint(self.metric_name, value)])
