"""Checks: verdicts, thresholds and the fleet check suite."""

from fleetwatch.checks.fleet import FleetChecks, build_default_registry
from fleetwatch.checks.registry import CheckDefinition, CheckRegistry
from fleetwatch.checks.results import CheckResult, MetricPoint, Verdict
from fleetwatch.checks.standard import StandardCheck
from fleetwatch.checks.thresholds import Comparator, GreaterThan, LessThan, Threshold, classify

__all__ = [
    "CheckResult",
    "MetricPoint",
    "Verdict",
    "Comparator",
    "GreaterThan",
    "LessThan",
    "Threshold",
    "classify",
    "StandardCheck",
    "CheckDefinition",
    "CheckRegistry",
    "FleetChecks",
    "build_default_registry",
]
