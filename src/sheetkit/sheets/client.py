"""Google Sheets API client."""

import logging
from typing import Any, Optional, Sequence

from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiClientError
from googleapiclient.errors import HttpError

from ..config import Settings, settings as default_settings
from ..errors import (
    TRANSPORT_ERRORS,
    QuotaExceededError,
    SessionBuildError,
    SheetsAPIError,
    TabNotFoundError,
)
from ..retry import RetryPolicy, call_with_quota_retry, is_quota_error
from .models import CellValue, Spreadsheet, Tab, ValueGrid
from .requests import (
    add_sheet_request,
    delete_sheet_request,
    rename_sheet_request,
    rename_spreadsheet_request,
)
from .shaping import find_tab, flatten_values, values_as_string_map, values_as_strings

logger = logging.getLogger(__name__)


class SheetsClient:
    """Client for interacting with the Google Sheets API.

    Wraps a ``sheets``/``v4`` discovery service bound to one subject. Remote
    failures surface as ``SheetsAPIError``; writes retry quota errors
    according to ``retry_policy``.
    """

    def __init__(self, service, subject: Optional[str] = None, retry_policy: Optional[RetryPolicy] = None):
        self.service = service
        self.subject = subject
        self.retry_policy = retry_policy or RetryPolicy()

    @classmethod
    def bind(
        cls,
        credentials=None,
        subject: Optional[str] = None,
        http=None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> "SheetsClient":
        """Build the Sheets service from credentials or an authorized transport."""
        if credentials is not None and subject and hasattr(credentials, "with_subject"):
            credentials = credentials.with_subject(subject)

        kwargs: dict[str, Any] = {"cache_discovery": False}
        if credentials is not None:
            kwargs["credentials"] = credentials
        if http is not None:
            kwargs["http"] = http

        try:
            service = build("sheets", "v4", **kwargs)
        except (GoogleApiClientError, GoogleAuthError, ValueError) as e:
            logger.error(f"Failed to build Sheets service: {e}")
            raise SessionBuildError(f"Failed to build Sheets service: {e}") from e

        logger.info(f"Sheets service ready at {getattr(service, '_baseUrl', '')} as ({subject})")
        return cls(service, subject=subject, retry_policy=retry_policy)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SheetsClient":
        """Load credentials from settings and bind a client to them."""
        from .auth import load_credentials

        settings = settings or default_settings
        try:
            credentials = load_credentials(settings)
        except (GoogleAuthError, OSError, ValueError) as e:
            raise SessionBuildError(f"Failed to load Google credentials: {e}") from e
        return cls.bind(
            credentials=credentials,
            subject=settings.google_subject,
            retry_policy=settings.retry_policy(),
        )

    def _execute(self, request, action: str) -> Any:
        try:
            return request.execute()
        except (HttpError,) + TRANSPORT_ERRORS as e:
            logger.error(f"Failed to {action}: {e}")
            if is_quota_error(e):
                raise QuotaExceededError.from_error(e, action) from e
            raise SheetsAPIError.from_error(e, action) from e

    # Values

    def write_range(
        self,
        spreadsheet_id: str,
        range_notation: str,
        major_dimension: str,
        values: ValueGrid,
        overwrite: bool,
    ) -> dict:
        """Write a grid to a range, or append it below existing data.

        With ``overwrite`` the addressed range is replaced using RAW input.
        Otherwise the rows are appended after the last row of data in the
        range using USER_ENTERED input, so formulas and formatted numbers are
        interpreted by Sheets.
        """
        body = {"majorDimension": major_dimension.upper(), "values": values}
        logger.info(
            f"Spreadsheet write request: spreadsheet_id={spreadsheet_id} "
            f"range={range_notation} rows={len(values)} overwrite={overwrite}"
        )

        def send() -> dict:
            sheet_values = self.service.spreadsheets().values()
            if overwrite:
                request = sheet_values.update(
                    spreadsheetId=spreadsheet_id,
                    range=range_notation,
                    valueInputOption="RAW",
                    body=body,
                )
            else:
                request = sheet_values.append(
                    spreadsheetId=spreadsheet_id,
                    range=range_notation,
                    valueInputOption="USER_ENTERED",
                    body=body,
                    fields="*",
                )
            return request.execute()

        response = call_with_quota_retry(send, self.retry_policy, action=f"write range {range_notation}")
        if not overwrite:
            logger.info("Spreadsheet append request was successful")
        return response

    def get_values(self, spreadsheet_id: str, range_notation: str) -> ValueGrid:
        """Read the raw value grid of a range."""
        request = self.service.spreadsheets().values().get(spreadsheetId=spreadsheet_id, range=range_notation)
        result = self._execute(request, f"read range {range_notation}")
        return result.get("values", [])

    def get_column_values(self, spreadsheet_id: str, range_notation: str) -> list[CellValue]:
        """Read a range and flatten it row by row."""
        return flatten_values(self.get_values(spreadsheet_id, range_notation))

    def get_column_values_as_string(
        self, spreadsheet_id: str, range_notation: str, to_lower: bool = False
    ) -> list[str]:
        return values_as_strings(self.get_values(spreadsheet_id, range_notation), to_lower)

    def get_column_values_as_string_map(
        self, spreadsheet_id: str, range_notation: str, to_lower: bool = False
    ) -> dict[str, bool]:
        return values_as_string_map(self.get_values(spreadsheet_id, range_notation), to_lower)

    def clear_values(self, spreadsheet_id: str, range_notation: str) -> dict:
        """Clear every value in a range, keeping formatting."""
        request = (
            self.service.spreadsheets()
            .values()
            .clear(spreadsheetId=spreadsheet_id, range=range_notation, body={}, fields="*")
        )
        response = self._execute(request, f"clear range {range_notation}")
        logger.info(f"Cleared {spreadsheet_id} [{range_notation}]")
        return response

    # Spreadsheets

    def create_spreadsheet(self, title: str) -> Spreadsheet:
        """Create a spreadsheet with a single default tab."""
        body = {"properties": {"title": title}}
        request = self.service.spreadsheets().create(body=body, fields="*")
        spreadsheet = Spreadsheet.from_api(self._execute(request, f"create spreadsheet '{title}'"))
        logger.info(f"Created spreadsheet '{title}' [{spreadsheet.spreadsheet_id}] @ {spreadsheet.url}")
        return spreadsheet

    def get_spreadsheet(self, spreadsheet_id: str) -> Spreadsheet:
        request = self.service.spreadsheets().get(spreadsheetId=spreadsheet_id)
        return Spreadsheet.from_api(self._execute(request, f"get spreadsheet {spreadsheet_id}"))

    def rename_spreadsheet(self, spreadsheet_id: str, new_title: str) -> Spreadsheet:
        response = self.execute_batch_update(
            spreadsheet_id,
            [rename_spreadsheet_request(new_title)],
            include_spreadsheet_in_response=True,
        )
        spreadsheet = Spreadsheet.from_api(response["updatedSpreadsheet"])
        logger.info(f"Renamed spreadsheet {spreadsheet_id}, it is now '{spreadsheet.title}'")
        return spreadsheet

    def execute_batch_update(
        self,
        spreadsheet_id: str,
        requests: Sequence[dict],
        fields: Optional[str] = None,
        include_spreadsheet_in_response: bool = False,
    ) -> dict:
        """Send ``requests`` as one atomic batch and return the raw response."""
        body: dict[str, Any] = {"requests": list(requests)}
        if include_spreadsheet_in_response:
            body["includeSpreadsheetInResponse"] = True

        kwargs: dict[str, Any] = {"spreadsheetId": spreadsheet_id, "body": body}
        if fields is not None:
            kwargs["fields"] = fields

        request = self.service.spreadsheets().batchUpdate(**kwargs)
        return self._execute(request, f"batch update spreadsheet {spreadsheet_id}")

    # Tabs

    def get_tab_by_name(self, spreadsheet: Spreadsheet, name: str) -> Optional[Tab]:
        """Return the first tab titled ``name``, or None when there is none."""
        tab = find_tab(spreadsheet, name)
        if tab is None:
            logger.warning(f"Tab '{name}' not found in spreadsheet {spreadsheet.spreadsheet_id}")
        return tab

    def require_tab(self, spreadsheet: Spreadsheet, name: str) -> Tab:
        tab = self.get_tab_by_name(spreadsheet, name)
        if tab is None:
            raise TabNotFoundError(name, spreadsheet.spreadsheet_id)
        return tab

    def insert_tab(self, spreadsheet_id: str, name: str) -> dict:
        response = self.execute_batch_update(spreadsheet_id, [add_sheet_request(name)], fields="*")
        logger.info(f"Added tab '{name}' to spreadsheet {spreadsheet_id}")
        return response

    def rename_tab_by_id(self, spreadsheet_id: str, new_name: str, tab_id: int) -> dict:
        return self.execute_batch_update(spreadsheet_id, [rename_sheet_request(tab_id, new_name)], fields="*")

    def rename_tab_by_name(self, spreadsheet: Spreadsheet, old_name: str, new_name: str) -> dict:
        tab = self.require_tab(spreadsheet, old_name)
        return self.rename_tab_by_id(spreadsheet.spreadsheet_id, new_name, tab.sheet_id)

    def delete_tab_by_id(self, spreadsheet_id: str, tab_id: int) -> dict:
        return self.execute_batch_update(spreadsheet_id, [delete_sheet_request(tab_id)])

    def delete_tab_by_name(self, spreadsheet: Spreadsheet, name: str) -> dict:
        tab = self.require_tab(spreadsheet, name)
        return self.delete_tab_by_id(spreadsheet.spreadsheet_id, tab.sheet_id)
