"""Helpers that reshape value grids returned by the Sheets API."""

from typing import Optional

from ..errors import CellTypeError
from .models import CellValue, Spreadsheet, Tab, ValueGrid


def flatten_values(values: ValueGrid) -> list[CellValue]:
    """Flatten a grid row by row: ``[[a, b], [c]]`` becomes ``[a, b, c]``."""
    return [cell for row in values for cell in row]


def values_as_strings(values: ValueGrid, to_lower: bool = False) -> list[str]:
    """Flatten a grid and require every cell to be a string.

    Raises:
        CellTypeError: If any cell holds a non-string value.
    """
    strings = []
    for position, cell in enumerate(flatten_values(values)):
        if not isinstance(cell, str):
            raise CellTypeError(cell, position)
        strings.append(cell.lower() if to_lower else cell)
    return strings


def values_as_string_map(values: ValueGrid, to_lower: bool = False) -> dict[str, bool]:
    """Return the distinct strings of a grid as a ``{value: True}`` mapping."""
    return {value: True for value in values_as_strings(values, to_lower)}


def find_tab(spreadsheet: Spreadsheet, name: str) -> Optional[Tab]:
    """Return the first tab whose title matches ``name`` exactly."""
    for tab in spreadsheet.tabs:
        if tab.title == name:
            return tab
    return None
