"""Pydantic models for fleetwatch.yaml configuration."""

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, model_validator

DEFAULT_BALANCER_BLACKLIST = (
    r"(.*-backup\.service|^rabbitmq.*|^elasticsearch.*|^fleet-balancer.*)"
)
DEFAULT_UNIT_STATES_BLACKLIST = r".*-backup\.service"


def _validate_pattern(value: str) -> str:
    try:
        re.compile(value)
    except re.error as e:
        raise ValueError(f"invalid regular expression {value!r}: {e}") from e
    return value


RegexPattern = Annotated[str, AfterValidator(_validate_pattern)]


def _validate_endpoints(value: str) -> str:
    if not any(part.strip() for part in value.split(",")):
        raise ValueError("at least one etcd endpoint is required")
    return value


EndpointList = Annotated[str, AfterValidator(_validate_endpoints)]


class RegistryConfig(BaseModel):
    """Scheduler and key-value registry endpoints."""

    fleet_url: str = Field(
        default="http://127.0.0.1:49153",
        description="Fleet API endpoint (http(s):// URL or unix:// socket path)",
    )
    etcd_url: EndpointList = Field(
        default="http://127.0.0.1:2379",
        description="etcd endpoint, or several separated by commas",
        min_length=1,
    )
    namespace: str = Field(
        default="machines",
        description="etcd directory holding per-machine records",
        min_length=1,
    )
    timeout: float = Field(default=5.0, description="Per-request timeout in seconds", gt=0)


class BalancerConfig(BaseModel):
    """Load-balancing check configuration."""

    blacklist: RegexPattern = Field(
        default=DEFAULT_BALANCER_BLACKLIST,
        description="Units whose name matches this pattern are never migrated",
    )
    overload_coefficient: float = Field(
        default=1.3,
        description="Discount applied to a machine's own load before comparing it to its role average",
        ge=1.0,
    )


class UnitStatesConfig(BaseModel):
    """Unit systemd-state check configuration."""

    blacklist: RegexPattern = Field(
        default=DEFAULT_UNIT_STATES_BLACKLIST,
        description="Units whose name matches this pattern are ignored",
    )


class ClusterSizeConfig(BaseModel):
    """Cluster-size thresholds. Fewer machines than a threshold trips it."""

    warning: float = Field(default=7.0, description="Warn below this many machines", ge=0)
    error: float = Field(default=6.0, description="Fail below this many machines", ge=0)

    @model_validator(mode="after")
    def _error_below_warning(self) -> "ClusterSizeConfig":
        if self.error > self.warning:
            raise ValueError(
                f"cluster size error threshold ({self.error}) must not exceed "
                f"warning threshold ({self.warning})"
            )
        return self


class FleetwatchConfig(BaseModel):
    """Root configuration schema for fleetwatch."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    balancer: BalancerConfig = Field(default_factory=BalancerConfig)
    unit_states: UnitStatesConfig = Field(default_factory=UnitStatesConfig)
    cluster_size: ClusterSizeConfig = Field(default_factory=ClusterSizeConfig)
