"""Google Sheets API integration."""

from .client import SheetsClient
from .models import CellValue, Spreadsheet, Tab, ValueGrid
from .shaping import flatten_values, values_as_string_map, values_as_strings

__all__ = [
    "SheetsClient",
    "CellValue",
    "Spreadsheet",
    "Tab",
    "ValueGrid",
    "flatten_values",
    "values_as_string_map",
    "values_as_strings",
]
