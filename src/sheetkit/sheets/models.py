"""Data models for Google Sheets resources."""

from typing import Optional, Union

from pydantic import BaseModel, Field

CellValue = Union[str, int, float, bool, None]
ValueGrid = list[list[CellValue]]

MAJOR_DIMENSIONS = ("ROWS", "COLUMNS")


class Tab(BaseModel):
    """A single tab (sheet) within a spreadsheet."""

    sheet_id: int
    title: str
    index: int = 0

    @classmethod
    def from_api(cls, sheet: dict) -> "Tab":
        """Build a Tab from a Sheets API ``Sheet`` resource."""
        properties = sheet.get("properties", {})
        return cls(
            sheet_id=properties.get("sheetId", 0),
            title=properties.get("title", ""),
            index=properties.get("index", 0),
        )


class Spreadsheet(BaseModel):
    """A spreadsheet and its ordered tabs, as returned by the API."""

    spreadsheet_id: str
    title: str = ""
    url: Optional[str] = None
    tabs: list[Tab] = Field(default_factory=list)

    @classmethod
    def from_api(cls, resource: dict) -> "Spreadsheet":
        """Build a Spreadsheet from a Sheets API ``Spreadsheet`` resource."""
        return cls(
            spreadsheet_id=resource["spreadsheetId"],
            title=resource.get("properties", {}).get("title", ""),
            url=resource.get("spreadsheetUrl"),
            tabs=[Tab.from_api(sheet) for sheet in resource.get("sheets", [])],
        )

    @property
    def tab_titles(self) -> list[str]:
        return [tab.title for tab in self.tabs]
