"""Cell grid access for Day Docket workbooks.

Cells are addressed the way the sheet is read by people: column letters plus
a 1-based row number (``grid.value("C", 21)``). A cell that does not exist
returns ``None``; a cell holding an empty string returns ``""``. The extractor
relies on that distinction, so adapters must not coerce one into the other.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from os import PathLike
from pathlib import Path
from typing import Any, Protocol
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.cell import coordinate_from_string
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from ..errors import LayoutError


class CellGrid(Protocol):
    """Minimal read-only view of one worksheet."""

    def value(self, column: str, row: int) -> Any | None: ...

    def cells(self) -> Iterator[tuple[str, int, Any]]:
        """Yield ``(column, row, value)`` for every populated cell."""
        ...


class MappingGrid:
    """Grid over an ``{"C21": value}`` mapping."""

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values: dict[tuple[str, int], Any] = {}
        for coordinate, value in values.items():
            column, row = coordinate_from_string(coordinate.upper())
            self._values[(column, row)] = value

    def value(self, column: str, row: int) -> Any | None:
        return self._values.get((column.upper(), row))

    def cells(self) -> Iterator[tuple[str, int, Any]]:
        for (column, row), value in sorted(self._values.items(), key=lambda kv: kv[0][1]):
            if value is not None:
                yield column, row, value


class WorksheetGrid:
    """Grid over an ``openpyxl`` worksheet.

    The worksheet is materialised once into a dict so repeated lookups do not
    create cells (openpyxl's ``ws[...]`` access creates empty cells on read).
    """

    def __init__(self, worksheet: Worksheet) -> None:
        self.title = worksheet.title
        self._values: dict[tuple[str, int], Any] = {}
        for row in worksheet.iter_rows():
            for cell in row:
                if cell.value is None:
                    continue
                self._values[(cell.column_letter, cell.row)] = cell.value

    def value(self, column: str, row: int) -> Any | None:
        return self._values.get((column.upper(), row))

    def cells(self) -> Iterator[tuple[str, int, Any]]:
        for (column, row), value in sorted(self._values.items(), key=lambda kv: kv[0][1]):
            yield column, row, value


def open_summary_sheet(path: str | PathLike[str], sheet_name: str) -> WorksheetGrid:
    """Load ``sheet_name`` from the workbook at ``path``.

    Formulas are read as their cached values. Raises :class:`LayoutError` when
    the file is not a readable workbook or the tab is missing, and
    ``InvalidFileException`` for unsupported file extensions.
    """

    p = Path(path)
    try:
        wb = load_workbook(p, data_only=True)
    except (BadZipFile, KeyError) as exc:
        # Truncated or corrupt package: not a zip, or a zip missing workbook parts.
        raise LayoutError(f"{p.name}: not a readable .xlsx workbook ({exc})") from exc
    try:
        if sheet_name not in wb.sheetnames:
            raise LayoutError(
                f"{p.name}: worksheet {sheet_name!r} not found "
                f"(available: {', '.join(wb.sheetnames) or 'none'})"
            )
        return WorksheetGrid(wb[sheet_name])
    finally:
        wb.close()


__all__ = [
    "CellGrid",
    "MappingGrid",
    "WorksheetGrid",
    "open_summary_sheet",
    "InvalidFileException",
]
