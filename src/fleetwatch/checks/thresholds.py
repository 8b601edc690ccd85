"""Warning/error threshold classification.

A comparator encodes the direction of a threshold: ``GreaterThan`` for
"too high / too many", ``LessThan`` for "too low / too few". Comparisons
are strict, so a value equal to a threshold never trips that level.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from fleetwatch.checks.results import Verdict


class Comparator(ABC):
    """Direction of a threshold comparison."""

    symbol: str = "?"

    @abstractmethod
    def exceeds(self, observed: float, threshold: float) -> bool:
        """Whether ``observed`` is past ``threshold`` in this direction."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))


class GreaterThan(Comparator):
    symbol = ">"

    def exceeds(self, observed: float, threshold: float) -> bool:
        return observed > threshold


class LessThan(Comparator):
    symbol = "<"

    def exceeds(self, observed: float, threshold: float) -> bool:
        return observed < threshold


def classify(value: float, warning: float, error: float, comparator: Comparator) -> Verdict:
    """
    Map an observation to a verdict.

    Args:
        value: Observed value
        warning: Warning threshold
        error: Error threshold
        comparator: Threshold direction

    Returns:
        ERROR if the error threshold is exceeded, else WARNING if the
        warning threshold is exceeded, else OK
    """
    if comparator.exceeds(value, error):
        return Verdict.ERROR
    if comparator.exceeds(value, warning):
        return Verdict.WARNING
    return Verdict.OK


@dataclass(frozen=True)
class Threshold:
    """A warning/error pair with its direction."""

    warning: float
    error: float
    comparator: Comparator = field(default_factory=GreaterThan)

    def classify(self, value: float) -> Verdict:
        return classify(value, self.warning, self.error, self.comparator)
