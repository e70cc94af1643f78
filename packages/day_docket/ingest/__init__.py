"""Spreadsheet ingestion: cell grid access, summary extraction, file discovery."""

from .files import discover_docket_files
from .grid import CellGrid, MappingGrid, WorksheetGrid, open_summary_sheet
from .summary import SummaryLayout, extract_summary, read_docket

__all__ = [
    "CellGrid",
    "MappingGrid",
    "WorksheetGrid",
    "open_summary_sheet",
    "SummaryLayout",
    "extract_summary",
    "read_docket",
    "discover_docket_files",
]
