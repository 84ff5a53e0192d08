"""
Error taxonomy for tournament synchronization.

The transport client raises these and never recovers from them. The sync
orchestrator decides which ones are per-item (recorded, batch continues) and
which ones end the batch.
"""


# ---------- Error Categories ----------

class SyncError(Exception):
    """Base class for synchronization errors."""
    pass


class NetworkError(SyncError):
    """No response was obtained (DNS, connection refused, timeout)."""

    def __init__(self, cause):
        self.cause = cause
        super().__init__(f"Network error: {cause}")


class NotFound(SyncError):
    """A single-resource operation answered 404."""

    def __init__(self, resource):
        self.resource = resource
        super().__init__(f"Resource not found: {resource}")


class UnexpectedStatus(SyncError):
    """The server answered with a status code the operation does not accept."""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Unexpected status code: {code}")


class DecodeError(SyncError):
    """The response body does not match the wire schema."""
    pass


class StoreError(SyncError):
    """The local tournament store failed to read or write."""
    pass
