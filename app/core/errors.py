"""Agency Portal — Error Taxonomy.

Every failure the sync path can report to a caller is one of these.
Routes translate them into HTTP responses.
"""


class PortalError(Exception):
    """Base class for portal failures."""


class ConfigurationMissing(PortalError):
    """A required credential or identifier is not configured.

    Raised before any network call is made.
    """


class MissingAccountId(ConfigurationMissing):
    """The client record has no external ad-account identifier."""

    def __init__(self, client_id: str):
        self.client_id = client_id
        super().__init__(
            f"Client {client_id} has no ad account id. "
            "Edit the client and set its ad account id."
        )


class NotFound(PortalError):
    """A referenced record does not exist."""


class UpstreamRejected(PortalError):
    """The ad platform answered with a structured error object.

    The vendor message is kept verbatim as the exception message.
    """

    def __init__(self, message: str, error_code: int = 0, status_code: int = 0):
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class TransportFailure(PortalError):
    """Network-level failure talking to the ad platform."""


class PurgeInterrupted(PortalError):
    """A purge batch failed to commit. Earlier batches stay deleted."""

    def __init__(self, deleted: int, batches: int, cause: Exception):
        self.deleted = deleted
        self.batches = batches
        super().__init__(
            f"Purge stopped after {batches} batches ({deleted} deleted): {cause}"
        )
