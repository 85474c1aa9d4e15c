"""sheetkit - a small convenience layer over the Google Sheets API."""

from .errors import (
    CellTypeError,
    QuotaExceededError,
    SessionBuildError,
    SheetsAPIError,
    SheetsError,
    TabNotFoundError,
)
from .retry import RetryPolicy
from .sheets import SheetsClient, Spreadsheet, Tab

__version__ = "0.1.0"

__all__ = [
    "SheetsClient",
    "Spreadsheet",
    "Tab",
    "RetryPolicy",
    "SheetsError",
    "SessionBuildError",
    "SheetsAPIError",
    "QuotaExceededError",
    "TabNotFoundError",
    "CellTypeError",
]
