"""Pytest configuration and shared fixtures."""

import copy
import json
from typing import Callable, Optional

import httplib2
import pytest
from googleapiclient.errors import HttpError

from sheetkit.retry import RetryPolicy
from sheetkit.sheets import SheetsClient


def make_http_error(status: int, message: str) -> HttpError:
    """Build an HttpError shaped like the ones the Sheets API returns."""
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


def quota_error() -> HttpError:
    return make_http_error(
        429,
        "Quota exceeded for quota metric 'Write requests' and limit "
        "'Write requests per minute per user' of service 'sheets.googleapis.com'",
    )


class FakeRequest:
    """Stands in for a googleapiclient HttpRequest."""

    def __init__(self, store: "FakeStore", handler: Callable[[], dict]):
        self.store = store
        self.handler = handler

    def execute(self):
        self.store.executions += 1
        if self.store.failures:
            raise self.store.failures.pop(0)
        return self.handler()


class FakeStore:
    """In-memory state shared by the fake resources."""

    def __init__(self):
        self.grids: dict[tuple[str, str], list[list]] = {}
        self.spreadsheets: dict[str, dict] = {}
        self.calls: list[tuple[str, dict]] = []
        self.failures: list[Exception] = []
        self.executions = 0

    def calls_named(self, name: str) -> list[dict]:
        return [kwargs for call, kwargs in self.calls if call == name]


class FakeValuesResource:
    def __init__(self, store: FakeStore):
        self.store = store

    def update(self, spreadsheetId, range, valueInputOption, body):
        self.store.calls.append(
            ("update", {"spreadsheetId": spreadsheetId, "range": range,
                        "valueInputOption": valueInputOption, "body": copy.deepcopy(body)})
        )

        def handler():
            self.store.grids[(spreadsheetId, range)] = [list(row) for row in body["values"]]
            return {"spreadsheetId": spreadsheetId, "updatedRange": range,
                    "updatedRows": len(body["values"])}

        return FakeRequest(self.store, handler)

    def append(self, spreadsheetId, range, valueInputOption, body, fields=None):
        self.store.calls.append(
            ("append", {"spreadsheetId": spreadsheetId, "range": range,
                        "valueInputOption": valueInputOption, "body": copy.deepcopy(body),
                        "fields": fields})
        )

        def handler():
            grid = self.store.grids.setdefault((spreadsheetId, range), [])
            grid.extend(list(row) for row in body["values"])
            return {"spreadsheetId": spreadsheetId, "tableRange": range,
                    "updates": {"updatedRows": len(body["values"])}}

        return FakeRequest(self.store, handler)

    def get(self, spreadsheetId, range):
        self.store.calls.append(("get", {"spreadsheetId": spreadsheetId, "range": range}))

        def handler():
            result = {"range": range, "majorDimension": "ROWS"}
            grid = self.store.grids.get((spreadsheetId, range))
            # The API omits "values" entirely for empty ranges
            if grid:
                result["values"] = copy.deepcopy(grid)
            return result

        return FakeRequest(self.store, handler)

    def clear(self, spreadsheetId, range, body, fields=None):
        self.store.calls.append(("clear", {"spreadsheetId": spreadsheetId, "range": range,
                                           "body": body, "fields": fields}))

        def handler():
            self.store.grids.pop((spreadsheetId, range), None)
            return {"spreadsheetId": spreadsheetId, "clearedRange": range}

        return FakeRequest(self.store, handler)


class FakeSpreadsheetsResource:
    def __init__(self, store: FakeStore):
        self.store = store

    def values(self):
        return FakeValuesResource(self.store)

    def create(self, body, fields=None):
        self.store.calls.append(("create", {"body": copy.deepcopy(body), "fields": fields}))

        def handler():
            spreadsheet_id = f"created-{len(self.store.spreadsheets) + 1}"
            resource = {
                "spreadsheetId": spreadsheet_id,
                "spreadsheetUrl": f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit",
                "properties": dict(body["properties"]),
                "sheets": [{"properties": {"sheetId": 0, "title": "Sheet1", "index": 0}}],
            }
            self.store.spreadsheets[spreadsheet_id] = resource
            return copy.deepcopy(resource)

        return FakeRequest(self.store, handler)

    def get(self, spreadsheetId):
        self.store.calls.append(("get_spreadsheet", {"spreadsheetId": spreadsheetId}))
        return FakeRequest(self.store, lambda: copy.deepcopy(self.store.spreadsheets[spreadsheetId]))

    def batchUpdate(self, spreadsheetId, body, fields=None):
        self.store.calls.append(
            ("batchUpdate", {"spreadsheetId": spreadsheetId, "body": copy.deepcopy(body),
                             "fields": fields})
        )

        def handler():
            resource = self.store.spreadsheets.get(spreadsheetId)
            for request in body["requests"]:
                if resource is not None and "updateSpreadsheetProperties" in request:
                    resource["properties"].update(
                        request["updateSpreadsheetProperties"]["properties"]
                    )
            response = {"spreadsheetId": spreadsheetId, "replies": [{} for _ in body["requests"]]}
            if body.get("includeSpreadsheetInResponse") and resource is not None:
                response["updatedSpreadsheet"] = copy.deepcopy(resource)
            return response

        return FakeRequest(self.store, handler)


class FakeSheetsService:
    """A minimal stand-in for the ``sheets``/``v4`` discovery service."""

    def __init__(self, store: Optional[FakeStore] = None):
        self.store = store or FakeStore()
        self._baseUrl = "https://sheets.googleapis.com/"

    def spreadsheets(self):
        return FakeSpreadsheetsResource(self.store)


@pytest.fixture
def fake_service() -> FakeSheetsService:
    """Create an in-memory Sheets service with one spreadsheet and two tabs."""
    service = FakeSheetsService()
    service.store.spreadsheets["sheet-123"] = {
        "spreadsheetId": "sheet-123",
        "spreadsheetUrl": "https://docs.google.com/spreadsheets/d/sheet-123/edit",
        "properties": {"title": "Test Sheet"},
        "sheets": [
            {"properties": {"sheetId": 0, "title": "Sheet1", "index": 0}},
            {"properties": {"sheetId": 1789, "title": "Sheet2", "index": 1}},
        ],
    }
    return service


@pytest.fixture
def client(fake_service: FakeSheetsService) -> SheetsClient:
    """Create a SheetsClient bound to the fake service."""
    return SheetsClient(fake_service, subject="robot@example.com", retry_policy=RetryPolicy())


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record retry waits instead of sleeping."""
    import time

    recorded: list[float] = []
    monkeypatch.setattr(time, "sleep", recorded.append)
    return recorded


class FakeClock:
    """A monotonic clock that only moves when something sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    """Drive retry waits and deadlines from a fake clock."""
    import time

    fake = FakeClock()
    monkeypatch.setattr(time, "monotonic", fake.monotonic)
    monkeypatch.setattr(time, "sleep", fake.sleep)
    return fake
