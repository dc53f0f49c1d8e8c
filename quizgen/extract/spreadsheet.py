"""Spreadsheet extraction: the first sheet as CSV text."""

import io
import logging

import pandas as pd

from quizgen.errors import CorruptFileError, EmptyContentError

logger = logging.getLogger(__name__)


def sheet_marker(sheet_name: str) -> str:
    """Header written ahead of the sheet's CSV."""
    return f"--- Excel Sheet: {sheet_name} ---"


def _used_range(df: pd.DataFrame) -> pd.DataFrame:
    """Trim blank rows and columns around the cells in use; inner blanks stay."""
    filled = df.notna()
    rows = filled.any(axis=1).to_numpy().nonzero()[0]
    cols = filled.any(axis=0).to_numpy().nonzero()[0]
    if len(rows) == 0:
        return df.iloc[0:0, 0:0]
    return df.iloc[rows[0] : rows[-1] + 1, cols[0] : cols[-1] + 1]


def extract_spreadsheet_text(data: bytes) -> str:
    """
    Serialize the first sheet of a workbook to CSV.

    Every row of the used range is kept, including the first and any blank
    separator rows inside the table. Blank rows and columns outside the used
    range are dropped. Cells are read as strings so numbers are not
    reformatted.

    Args:
        data: Raw .xlsx or .xls bytes

    Returns:
        Sheet marker followed by the CSV table

    Raises:
        CorruptFileError: If the workbook cannot be decoded
        EmptyContentError: If the first sheet holds no cells
    """
    try:
        with pd.ExcelFile(io.BytesIO(data)) as workbook:
            sheet_name = workbook.sheet_names[0]
            df = workbook.parse(sheet_name, header=None, dtype=str)
    except Exception as e:
        logger.warning("Error parsing spreadsheet: %s", e, exc_info=True)
        raise CorruptFileError("Failed to parse Excel file.") from e

    df = _used_range(df)
    csv = "" if df.empty else df.to_csv(index=False, header=False, lineterminator="\n")

    if not csv.strip():
        raise EmptyContentError("Excel file appears to be empty.")

    logger.debug("Sheet %r serialized to %d rows", sheet_name, len(df))
    return f"{sheet_marker(sheet_name)}\n{csv}"
