"""Registry of named checks.

Built once at startup and handed to whatever runs the checks; there is
no module-level registry.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal

from fleetwatch.checks.results import CheckResult
from fleetwatch.config.loader import ConfigError
from fleetwatch.registry.errors import RegistryError

logger = logging.getLogger(__name__)

CheckFunction = Callable[[], Awaitable[CheckResult]]


@dataclass
class CheckDefinition:
    """A named check and the coroutine function that runs it."""

    name: str
    run: CheckFunction
    description: str = ""
    kind: Literal["check", "metric"] = "check"


class CheckRegistry:
    """Registry of check definitions keyed by name."""

    def __init__(self) -> None:
        self._checks: dict[str, CheckDefinition] = {}

    def register(self, definition: CheckDefinition) -> None:
        """Register a check.

        Args:
            definition: Check to register

        Raises:
            ValueError: If a check with the same name already exists
        """
        if definition.name in self._checks:
            raise ValueError(f"Check '{definition.name}' already registered")
        self._checks[definition.name] = definition

    def get(self, name: str) -> CheckDefinition:
        """Get a check by name.

        Raises:
            KeyError: If check not found
        """
        if name not in self._checks:
            raise KeyError(f"Check '{name}' not found in registry")
        return self._checks[name]

    def has(self, name: str) -> bool:
        """Check if a check is registered."""
        return name in self._checks

    def list_checks(self) -> list[CheckDefinition]:
        """List all registered checks."""
        return list(self._checks.values())

    @property
    def names(self) -> list[str]:
        """List all registered check names."""
        return list(self._checks.keys())

    async def run(self, name: str) -> CheckResult:
        """Run a check, turning top-level failures into an error result.

        Raises:
            KeyError: If check not found
        """
        definition = self.get(name)
        try:
            return await definition.run()
        except (RegistryError, ConfigError) as e:
            logger.error("Check %s failed: %s", name, e)
            return CheckResult.error(name, str(e))
