"""Spreadsheet file reading and writing.

Thin pandas wrappers; the row mapping itself lives in
ledgerdesk.domain.tabular. Every cell is read as text so the field
converters see exactly what the file holds.
"""

from pathlib import Path
from typing import Any

import pandas as pd

from ledgerdesk.domain.errors import ImportFormatError
from ledgerdesk.logging_setup import get_logger

logger = get_logger("ledgerdesk.spreadsheet")

EXCEL_SUFFIXES = (".xlsx", ".xlsm", ".xls")
MAX_TAB_NAME = 31
_TAB_FORBIDDEN = str.maketrans({c: "_" for c in "[]:*?/\\"})


def tab_name(name: str) -> str:
    """Make a sheet name usable as an Excel tab name."""
    cleaned = name.translate(_TAB_FORBIDDEN).strip() or "Sheet"
    return cleaned[:MAX_TAB_NAME]


def read_table(path: Path) -> list[dict[str, Any]]:
    """Read the first table of an Excel or CSV file as row dicts.

    Args:
        path: File to read.

    Returns:
        List of rows keyed by header, all values as strings.

    Raises:
        ImportFormatError: If the file cannot be read as a table.
    """
    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(path, sheet_name=0, dtype=str, keep_default_na=False)
        elif suffix == ".csv":
            df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
        else:
            raise ImportFormatError(f"unsupported file type: {suffix or 'none'}")
    except ImportFormatError:
        raise
    except Exception as e:
        # pandas, openpyxl and xlrd each raise their own types for unreadable files
        logger.debug("read_table %s failed: %s", path, e)
        raise ImportFormatError(str(e)) from e

    df.columns = [str(c).strip() for c in df.columns]
    logger.info("read %d rows from %s", len(df), path)
    return df.to_dict(orient="records")


def write_tables(
    path: Path,
    tables: list[tuple[str, list[dict[str, Any]]]],
    columns: tuple[str, ...],
) -> None:
    """Write one or more tables to an Excel workbook or a CSV file.

    Args:
        path: Destination file; ".csv" writes a single table.
        tables: (tab name, rows) pairs in tab order. Repeated names get a
            numbered suffix so no table is lost.
        columns: Column order (used for empty tables too).

    Raises:
        ValueError: If several tables are written to a CSV file.
    """
    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)

    if suffix == ".csv":
        if len(tables) != 1:
            raise ValueError("CSV export holds a single table; use .xlsx for several sheets")
        _, rows = tables[0]
        pd.DataFrame(rows, columns=list(columns)).to_csv(path, index=False, encoding="utf-8-sig")
        return

    with pd.ExcelWriter(path, engine="openpyxl") as xw:
        used: set[str] = set()
        for name, rows in tables:
            tab = tab_name(name)
            suffix_no = 2
            while tab.casefold() in used:
                tab = tab_name(f"{name[: MAX_TAB_NAME - 3]}_{suffix_no}")
                suffix_no += 1
            used.add(tab.casefold())
            pd.DataFrame(rows, columns=list(columns)).to_excel(xw, sheet_name=tab, index=False)
    logger.info("wrote %d table(s) to %s", len(tables), path)
