"""Fleetwatch - Monitoring checks for fleet-scheduled clusters.

Fleetwatch reads a fleet scheduler and its etcd key-value store and
reports on cluster health as Sensu-style checks and metrics.

Key modules:

- :mod:`fleetwatch.registry` - Fleet and etcd clients behind a read-only gateway
- :mod:`fleetwatch.coordination` - Inventory snapshots, load balancing, membership reconciliation
- :mod:`fleetwatch.checks` - Threshold classification, check registry, fleet checks
- :mod:`fleetwatch.config` - YAML configuration with environment overrides
"""

__version__ = "0.1.0"
