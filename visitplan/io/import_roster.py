"""Roster import: locate the header row and key columns, derive birth date and gender."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, List, Optional, Sequence

import pandas as pd

from visitplan.domain.models import PersonRecord


HEADER_SCAN_ROWS = 15
HEADER_KEYWORDS = ["tug'ilgan", "birth", "d.o.b", "sana", "yil", "date"]
BIRTH_KEYWORDS = ["tug'ilgan", "birth", "d.o.b", "data rojdeniya", "sana"]
NAME_KEYWORDS = ["f.i.sh", "fish", "ism", "name", "familiya"]
ID_KEYWORDS = ["№", "t/r", "no", "tartib"]
# Identity document numbers must not be rendered as floats
TEXT_KEYWORDS = ["jshshir", "shaxsiy", "hujjat"]

EXCEL_EPOCH = date(1899, 12, 30)
MIN_BIRTH_YEAR = 1900


@dataclass
class Roster:
    """Parsed roster: records plus the columns the heuristics picked."""

    people: List[PersonRecord]
    headers: List[str]
    header_row: int  # 0-based row index in the sheet
    birth_column: str
    name_column: Optional[str] = None
    id_column: Optional[str] = None
    skipped_rows: List[int] = field(default_factory=list)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _cell_text(value: Any) -> str:
    return "" if _is_blank(value) else str(value).strip()


def find_header_row(grid: pd.DataFrame) -> int:
    """Index of the first of the top rows mentioning a date-like keyword (default 0)."""
    for idx in range(min(HEADER_SCAN_ROWS, len(grid))):
        cells = [_cell_text(v).lower() for v in grid.iloc[idx].tolist()]
        if any(k in cell for cell in cells for k in HEADER_KEYWORDS):
            return idx
    return 0


def find_column(headers: Sequence[str], keywords: Sequence[str]) -> Optional[str]:
    """First header containing any keyword, case-insensitive."""
    for header in headers:
        lowered = header.lower()
        if any(k in lowered for k in keywords):
            return header
    return None


def parse_birth_date(value: Any) -> Optional[date]:
    """
    Best-effort conversion of a roster cell to a birth date.

    Args:
        value: Cell value (datetime, number, or string)

    Returns:
        The date, or None when the value is not a plausible birth date.
        Numbers 1900..2100 are read as a bare year, smaller numbers are
        rejected (row counters), larger ones are Excel serial dates.
        Strings may be DD.MM.YYYY or anything pandas can parse.
    """
    if _is_blank(value) or isinstance(value, bool):
        return None

    parsed: Optional[date] = None
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, numbers.Real):
        if MIN_BIRTH_YEAR <= value <= 2100:
            parsed = date(int(value), 1, 1)
        elif value < 4000:
            return None
        else:
            # Ids and other large numbers fall outside the date range
            try:
                parsed = EXCEL_EPOCH + timedelta(days=int(value))
            except (OverflowError, ValueError):
                return None
    else:
        text = str(value).strip()
        parts = text.split(".")
        if len(parts) == 3:
            try:
                parsed = date(int(parts[2]), int(parts[1]), int(parts[0]))
            except ValueError:
                return None
        else:
            stamp = pd.to_datetime(text, errors="coerce")
            if pd.isna(stamp):
                return None
            parsed = stamp.date()

    if parsed.year < MIN_BIRTH_YEAR:
        return None
    return parsed


def infer_is_female(name: Any) -> bool:
    """Surname heuristic: the first word of the full name ends with "a"."""
    text = _cell_text(name)
    if not text:
        return False
    first_word = text.split(" ")[0]
    return first_word.lower().endswith("a")


def _as_text(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _build_headers(raw_headers: List[Any]) -> List[str]:
    headers = [_cell_text(h) or f"Col{i + 1}" for i, h in enumerate(raw_headers)]
    # Drop trailing placeholder columns
    last = len(headers)
    while last > 0 and headers[last - 1].startswith("Col") and _is_blank(raw_headers[last - 1]):
        last -= 1
    return headers[:last]


def roster_from_grid(grid: pd.DataFrame) -> Roster:
    """
    Turn a raw sheet grid (no header applied) into a Roster.

    Args:
        grid: DataFrame read with ``header=None``

    Returns:
        Roster with one PersonRecord per non-empty data row
    """
    if grid.empty:
        raise ValueError("Roster sheet is empty")

    header_row = find_header_row(grid)
    headers = _build_headers(grid.iloc[header_row].tolist())
    if not headers:
        raise ValueError("Roster header row has no column names")

    birth_column = find_column(headers, BIRTH_KEYWORDS) or headers[0]
    name_column = find_column(headers, NAME_KEYWORDS) or (headers[1] if len(headers) > 1 else None)
    id_column = find_column(headers, ID_KEYWORDS) or headers[0]
    text_columns = {h for h in headers if any(k in h.lower() for k in TEXT_KEYWORDS)}

    print(f"[INFO] Detected header row: {header_row + 1}")
    print(f"[INFO] Birth column: {birth_column!r}, name column: {name_column!r}, id column: {id_column!r}")

    people: List[PersonRecord] = []
    skipped: List[int] = []
    for offset, (_, row) in enumerate(grid.iloc[header_row + 1:].iterrows(), start=1):
        values = row.tolist()[:len(headers)]
        if all(_is_blank(v) for v in values):
            skipped.append(offset)
            continue
        fields = {}
        for header, value in zip(headers, values):
            if _is_blank(value):
                value = None
            elif header in text_columns:
                value = _as_text(value)
            elif isinstance(value, pd.Timestamp):
                value = value.to_pydatetime()
            fields[header] = value

        birth_date = parse_birth_date(fields.get(birth_column))
        if birth_date is not None:
            fields[birth_column] = birth_date
        people.append(PersonRecord(
            row_number=offset,
            fields=fields,
            birth_date=birth_date,
            is_female=infer_is_female(fields.get(name_column)) if name_column else False,
        ))

    return Roster(
        people=people,
        headers=headers,
        header_row=header_row,
        birth_column=birth_column,
        name_column=name_column,
        id_column=id_column,
        skipped_rows=skipped,
    )


def read_roster(path: str | Path) -> Roster:
    """
    Read a roster from an Excel workbook (first sheet) or a CSV file.

    Args:
        path: .xlsx/.xls/.xlsm or .csv file

    Returns:
        Parsed Roster
    """
    path = Path(path)
    if path.suffix.lower() == ".csv":
        grid = pd.read_csv(path, header=None, dtype=object, keep_default_na=False)
    else:
        grid = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
    roster = roster_from_grid(grid)
    valid = sum(1 for p in roster.people if p.birth_date is not None)
    print(f"[INFO] Imported {len(roster.people)} roster rows from {path} ({valid} with a valid birth date)")
    return roster
