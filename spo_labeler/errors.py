"""Exception types raised by the service clients and the workflow."""
from typing import Optional


class LabelAdminError(Exception):
    """Base class for every failure this tool reports."""


class ServiceError(LabelAdminError):
    """A remote service answered with a non-success HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is None:
            return base
        return f"{base} (HTTP {self.status_code}): {self.body[:300]}"


class ConnectionFailedError(LabelAdminError):
    """Login or session setup against one of the remote services failed."""


class FeatureFlagError(LabelAdminError):
    """A tenant flag was still disabled after the enable call."""


class LabelResolutionError(LabelAdminError):
    """The selected label could not be resolved to its id."""


class AssignmentError(LabelAdminError):
    """Setting the library default label failed."""
