"""Exception types raised by sheetkit."""

from typing import Any, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError


class SheetsError(Exception):
    """Base class for every error raised by sheetkit."""


class SessionBuildError(SheetsError):
    """Raised when the Sheets service cannot be constructed.

    Typical causes are malformed credentials, a transport that was passed
    together with credentials, or a failure to load the discovery document.
    """


class SheetsAPIError(SheetsError):
    """Raised when a call against the Sheets API fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    @classmethod
    def from_error(cls, error: BaseException, action: str) -> "SheetsAPIError":
        status = getattr(getattr(error, "resp", None), "status", None)
        return cls(f"Failed to {action}: {error}", status=status)


class QuotaExceededError(SheetsAPIError):
    """Raised when a quota-limited call still fails after all retries."""


class TabNotFoundError(SheetsError, LookupError):
    """Raised when a tab name cannot be resolved within a spreadsheet."""

    def __init__(self, tab_name: str, spreadsheet_id: str):
        super().__init__(f"Tab '{tab_name}' not found in spreadsheet {spreadsheet_id}")
        self.tab_name = tab_name
        self.spreadsheet_id = spreadsheet_id


class CellTypeError(SheetsError, TypeError):
    """Raised when a cell does not hold the type a helper requires."""

    def __init__(self, value: Any, position: int, expected: str = "str"):
        super().__init__(
            f"Cell at flat position {position} holds {type(value).__name__} "
            f"({value!r}), expected {expected}"
        )
        self.value = value
        self.position = position


# Failures below the API layer: connection problems, timeouts and token refreshes
TRANSPORT_ERRORS = (httplib2.HttpLib2Error, GoogleAuthError, OSError)
