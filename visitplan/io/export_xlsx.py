"""Excel export: one workbook per cohort, a consolidated workbook, and a zip archive."""

from __future__ import annotations

import calendar
import io
import time
import zipfile
from pathlib import Path
from typing import AbstractSet, Any, Dict, List, Sequence, Set

import pandas as pd
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from visitplan.domain.models import CohortResult, PersonRecord, RunResult, VisitAssignment

DATE_FORMAT = "dd.mm.yyyy"
SUMMARY_SHEET = "Summary"
CONSOLIDATED_SHEET = "Consolidated Plan"
CONSOLIDATED_FILE = "Consolidated_Plan.xlsx"
COLUMN_WIDTH = 20

_THIN = Side(style="thin")
_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)
_HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFE0E0E0")
_UNPLANNED_FILL = PatternFill(fill_type="solid", fgColor="FFFFFF00")


def cohort_filename(result: CohortResult, taken: AbstractSet[str] = frozenset()) -> str:
    """Workbook name for a cohort; repeated year ranges get a numeric suffix."""
    rule = result.rule
    stem = f"{rule.end_year}-{rule.start_year}_{rule.gender}"
    name = f"{stem}.xlsx"
    n = 2
    while name in taken:
        name = f"{stem}_{n}.xlsx"
        n += 1
    return name


def _person_row(person: PersonRecord, fields: Sequence[str], id_column: str, row_id: int) -> Dict[str, Any]:
    row = {key: person.fields.get(key) for key in fields}
    row[id_column] = row_id
    return row


def _assignment_frame(
    assignments: Sequence[VisitAssignment],
    unplanned: Sequence[PersonRecord],
    fields: List[str],
    id_column: str,
    visit_columns: List[str],
) -> pd.DataFrame:
    records = []
    for assignment in assignments:
        row = _person_row(assignment.person, fields, id_column, len(records) + 1)
        row.update(zip(visit_columns, assignment.dates))
        records.append(row)
    for person in unplanned:
        records.append(_person_row(person, fields, id_column, len(records) + 1))
    return pd.DataFrame.from_records(records, columns=fields + visit_columns)


def _style_sheet(ws: Worksheet, highlight_rows: Sequence[int] = ()) -> None:
    """Borders, bold grey header, date format; ``highlight_rows`` are 0-based data rows."""
    highlighted = {r + 2 for r in highlight_rows}
    for col_cells in ws.iter_cols(min_row=1, max_row=ws.max_row):
        ws.column_dimensions[col_cells[0].column_letter].width = COLUMN_WIDTH
        for cell in col_cells:
            cell.border = _BORDER
            if cell.row == 1:
                cell.font = Font(bold=True)
                cell.fill = _HEADER_FILL
                continue
            if cell.is_date:
                cell.number_format = DATE_FORMAT
            if cell.row in highlighted:
                cell.fill = _UNPLANNED_FILL


def _write_sheet(writer: pd.ExcelWriter, df: pd.DataFrame, name: str, highlight_rows: Sequence[int] = ()) -> None:
    df.to_excel(writer, sheet_name=name, index=False)
    _style_sheet(writer.sheets[name], highlight_rows)


def _resolve_fields(result: RunResult, field_order: List[str] | None, id_column: str) -> List[str]:
    if field_order is None:
        field_order = []
        for person in _all_people(result):
            for key in person.fields:
                if key not in field_order:
                    field_order.append(key)
    if id_column not in field_order:
        field_order = [id_column] + list(field_order)
    return list(field_order)


def _all_people(result: RunResult):
    for cohort in result.cohort_results:
        for assignment in cohort.assigned:
            yield assignment.person
        yield from cohort.unplanned


def cohort_workbook_bytes(result: CohortResult, fields: List[str], id_column: str) -> bytes:
    """
    Render one cohort as an .xlsx workbook.

    One sheet per month that has people (ids restart at 1 on each sheet),
    then a Summary sheet listing everyone in the cohort with unplanned rows
    highlighted.
    """
    buffer = io.BytesIO()
    columns = result.visit_columns
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for month, assignments in result.by_month().items():
            df = _assignment_frame(assignments, [], fields, id_column, columns)
            _write_sheet(writer, df, calendar.month_name[month])

        summary = _assignment_frame(result.assigned, result.unplanned, fields, id_column, columns)
        unplanned_rows = range(len(result.assigned), len(summary))
        _write_sheet(writer, summary, SUMMARY_SHEET, unplanned_rows)
    return buffer.getvalue()


def consolidated_workbook_bytes(result: RunResult, fields: List[str], id_column: str) -> bytes:
    df = result.plan.to_frame(field_order=fields, id_column=id_column)
    unplanned_rows = [i for i, flag in enumerate(df["unplanned"]) if flag]
    df = df.drop(columns=["Cohort", "unplanned"])
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        _write_sheet(writer, df, CONSOLIDATED_SHEET, unplanned_rows)
    return buffer.getvalue()


def write_archive(
    result: RunResult,
    out_dir: str | Path,
    field_order: List[str] | None = None,
    id_column: str | None = None,
) -> Path:
    """
    Write all cohort workbooks and the consolidated workbook into a zip archive.

    Args:
        result: Engine run result
        out_dir: Directory for the archive (created if missing)
        field_order: Roster columns to emit, in order
        id_column: Roster column that receives renumbered ids (default "No")

    Returns:
        Path of the written archive
    """
    id_column = id_column or "No"
    fields = _resolve_fields(result, field_order, id_column)
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    archive_path = out_dir / f"Schedules_{int(time.time() * 1000)}.zip"

    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        names: Set[str] = set()
        for cohort in result.cohort_results:
            if cohort.eligible_count == 0:
                continue
            name = cohort_filename(cohort, names)
            names.add(name)
            archive.writestr(name, cohort_workbook_bytes(cohort, fields, id_column))
        if result.cohort_results:
            archive.writestr(CONSOLIDATED_FILE, consolidated_workbook_bytes(result, fields, id_column))

    return archive_path
