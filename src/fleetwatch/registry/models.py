"""Registry data model: machines, units and unit states."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

TEMPLATE_SEPARATOR = "@"


def unit_template(name: str) -> str:
    """Return the template part of a unit name (everything before ``@``).

    ``web@3.service`` -> ``web``; names without an instance suffix are
    their own template.
    """
    return name.split(TEMPLATE_SEPARATOR, 1)[0]


class JobState(str, Enum):
    """Scheduler-side state of a unit."""

    INACTIVE = "inactive"
    LOADED = "loaded"
    LAUNCHED = "launched"


def _job_state(value: str | None) -> JobState | None:
    if not value:
        return None
    return JobState(value)


@dataclass
class Machine:
    """A machine known to the scheduler."""

    id: str
    role: str = ""
    ip: str = ""
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Machine":
        metadata = data.get("metadata") or {}
        return cls(
            id=data["id"],
            role=metadata.get("role", ""),
            ip=data.get("primaryIP", ""),
            metadata=dict(metadata),
        )


@dataclass
class UnitOption:
    """One ``[section] name=value`` line of a unit file."""

    section: str
    name: str
    value: str


@dataclass
class Unit:
    """A unit as tracked by the scheduler."""

    name: str
    machine_id: str = ""
    desired_state: JobState | None = None
    current_state: JobState | None = None
    options: list[UnitOption] = field(default_factory=list)

    @property
    def template(self) -> str:
        return unit_template(self.name)

    @property
    def is_global(self) -> bool:
        """Whether the unit is scheduled on every machine (``[X-Fleet] Global=true``)."""
        return any(
            opt.section == "X-Fleet" and opt.name == "Global" and opt.value.lower() == "true"
            for opt in self.options
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Unit":
        return cls(
            name=data["name"],
            machine_id=data.get("machineID", ""),
            desired_state=_job_state(data.get("desiredState")),
            current_state=_job_state(data.get("currentState")),
            options=[
                UnitOption(section=o["section"], name=o["name"], value=o.get("value", ""))
                for o in data.get("options") or []
            ],
        )


@dataclass
class UnitState:
    """Systemd state of a unit as reported by the machine running it."""

    name: str
    machine_id: str = ""
    hash: str = ""
    systemd_load_state: str = ""
    systemd_active_state: str = ""
    systemd_sub_state: str = ""

    @property
    def is_failed(self) -> bool:
        return self.systemd_active_state in ("failed", "inactive") or self.systemd_sub_state in (
            "dead",
            "failed",
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "UnitState":
        return cls(
            name=data["name"],
            machine_id=data.get("machineID", ""),
            hash=data.get("hash", ""),
            systemd_load_state=data.get("systemdLoadState", ""),
            systemd_active_state=data.get("systemdActiveState", ""),
            systemd_sub_state=data.get("systemdSubState", ""),
        )
