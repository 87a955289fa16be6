"""
Exception classes for the AnonWall client.

None of these are fatal: each one is recovered from at the component that
catches it, and the feed stays interactive while the store is unreachable.
"""


class WallError(Exception):
    """Base exception for all AnonWall client errors."""
    pass


class PersistenceUnavailable(WallError):
    """Raised when local identity/theme storage cannot be read or written."""
    pass


class FetchFailed(WallError):
    """Raised when the posts snapshot cannot be retrieved."""
    pass


class SubmitFailed(WallError):
    """Raised when a new post cannot be inserted. The message is user-facing."""
    pass


class ReactionWriteFailed(WallError):
    """Raised when a reaction tally cannot be written back to the store."""
    pass


class ValidationFailed(WallError):
    """Raised when composed text is rejected before any network call."""
    pass


class RecordInvalid(WallError):
    """Raised when a raw store record cannot be mapped into a Post."""
    pass
