"""Builders for ``spreadsheets.batchUpdate`` request objects.

Each builder returns one entry of the ``requests`` list accepted by
``SheetsClient.execute_batch_update``. Several entries may be combined into a
single atomic batch.
"""


def add_sheet_request(title: str) -> dict:
    return {"addSheet": {"properties": {"title": title}}}


def rename_sheet_request(sheet_id: int, title: str) -> dict:
    return {
        "updateSheetProperties": {
            "properties": {"sheetId": sheet_id, "title": title},
            "fields": "title",
        }
    }


def delete_sheet_request(sheet_id: int) -> dict:
    return {"deleteSheet": {"sheetId": sheet_id}}


def rename_spreadsheet_request(title: str) -> dict:
    # Only the title field is masked so other properties are left untouched
    return {
        "updateSpreadsheetProperties": {
            "properties": {"title": title},
            "fields": "title",
        }
    }
