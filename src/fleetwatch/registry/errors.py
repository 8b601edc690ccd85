"""Errors raised while reading the scheduler and key-value registries."""


class RegistryError(Exception):
    """A registry listing or lookup failed."""


class PartialLookupFailure(RegistryError):
    """A single key lookup failed.

    Callers resolving many keys log these and drop the affected entity
    instead of aborting.
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"lookup of {key} failed: {reason}")
