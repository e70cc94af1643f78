"""Discovery of Day Docket exports in an input directory."""

from __future__ import annotations

import re
from os import PathLike
from pathlib import Path

# One file per trading day, named after the day of the month: "DD 07.xlsx".
# Legacy .xls exports must be re-saved as .xlsx before import.
DOCKET_FILE_RE = re.compile(r"^DD \d\d\.xlsx$")


def discover_docket_files(directory: str | PathLike[str]) -> list[Path]:
    """Return every Day Docket file under ``directory`` (recursive, sorted).

    Raises ``FileNotFoundError`` when ``directory`` does not exist or holds no
    docket files.
    """

    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"Input directory not found: {root}")
    files = sorted(p for p in root.rglob("DD *") if p.is_file() and DOCKET_FILE_RE.match(p.name))
    if not files:
        raise FileNotFoundError(f"No importable Day Docket files found in {root}")
    return files


__all__ = ["DOCKET_FILE_RE", "discover_docket_files"]
