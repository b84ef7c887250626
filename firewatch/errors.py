"""
Error types for the wildfire risk map.
"""


class FirewatchError(Exception):
    """Base class for all map errors."""


class FeatureDataError(FirewatchError):
    """The county feature collection could not be fetched or parsed."""


class SessionInitError(FirewatchError):
    """The map could not be constructed; nothing was left mounted."""


class SessionStateError(FirewatchError):
    """A session was opened twice or used after teardown."""
