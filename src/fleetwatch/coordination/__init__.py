"""Cluster load balancing and membership reconciliation."""

from fleetwatch.coordination.balancer import (
    OverloadRecord,
    find_overloaded_machines,
    select_rebalance_candidates,
)
from fleetwatch.coordination.consistency import ConsistencyChecker, resolve_concurrently
from fleetwatch.coordination.inventory import Inventory, InventorySnapshot

__all__ = [
    "Inventory",
    "InventorySnapshot",
    "OverloadRecord",
    "find_overloaded_machines",
    "select_rebalance_candidates",
    "ConsistencyChecker",
    "resolve_concurrently",
]
