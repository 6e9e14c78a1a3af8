"""I/O utilities for roster import and workbook export."""

from .export_xlsx import write_archive
from .import_roster import Roster, infer_is_female, parse_birth_date, read_roster

__all__ = [
    "Roster",
    "infer_is_female",
    "parse_birth_date",
    "read_roster",
    "write_archive",
]
