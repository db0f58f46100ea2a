"""
CSAPI client exceptions.

Specific exception types let callers tell a missing fixture apart from an
unreachable live endpoint or a response that is not a CSAPI collection.
Normalization and filtering never raise; these cover I/O only.
"""

from typing import Optional


class CSAPIError(Exception):
    """Base exception for all CSAPI client errors."""
    pass


class FixtureNotFoundError(CSAPIError):
    """Fixture JSON file does not exist in the fixture directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Fixture not found: {path}")


class ResourceNotFoundError(CSAPIError):
    """Collection or item does not exist."""
    pass


class CSAPIRequestError(CSAPIError):
    """Live endpoint returned an error status or could not be reached."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class CSAPITimeoutError(CSAPIRequestError):
    """Live endpoint did not answer within the configured timeout."""
    pass


class CSAPIResponseError(CSAPIError):
    """Response body is not JSON or not a recognized collection shape."""
    pass
