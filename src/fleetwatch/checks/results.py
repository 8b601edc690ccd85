"""Check verdicts, results and metric points."""

import time
from dataclasses import dataclass, field
from enum import Enum


class Verdict(Enum):
    """Tri-state check outcome. Values are Sensu-compatible exit codes."""

    OK = 0
    WARNING = 1
    ERROR = 2

    @property
    def exit_code(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower()


def shrink_name(name: str) -> str:
    """Make a metric name safe for dotted metric sinks (``@`` -> ``_``)."""
    return name.replace("@", "_")


@dataclass
class MetricPoint:
    """A single ``(dotted-name, value)`` sample."""

    name: str
    value: float
    timestamp: int = field(default_factory=lambda: int(time.time()))

    def render(self) -> str:
        """Render as a Graphite plaintext line."""
        value = float(self.value)
        rendered = f"{value:.0f}" if value.is_integer() else repr(value)
        return f"{shrink_name(self.name)} {rendered} {self.timestamp}"


@dataclass
class CheckResult:
    """Outcome of one check invocation."""

    name: str
    verdict: Verdict
    output: str
    points: list[MetricPoint] = field(default_factory=list)

    @classmethod
    def ok(cls, name: str, output: str) -> "CheckResult":
        return cls(name=name, verdict=Verdict.OK, output=output)

    @classmethod
    def warning(cls, name: str, output: str) -> "CheckResult":
        return cls(name=name, verdict=Verdict.WARNING, output=output)

    @classmethod
    def error(cls, name: str, output: str) -> "CheckResult":
        return cls(name=name, verdict=Verdict.ERROR, output=output)

    @classmethod
    def metric(cls, name: str, points: list[MetricPoint]) -> "CheckResult":
        """Build an Ok result whose output is the rendered points."""
        output = "\n".join(point.render() for point in points)
        return cls(name=name, verdict=Verdict.OK, output=output, points=list(points))

    @property
    def exit_code(self) -> int:
        return self.verdict.exit_code


def count_points(counts: dict[str, int]) -> list[MetricPoint]:
    """Turn a ``{name: count}`` tally into metric points, sorted by name."""
    now = int(time.time())
    return [MetricPoint(name=k, value=float(v), timestamp=now) for k, v in sorted(counts.items())]
