"""
Bulk student import from CSV text or an Excel workbook.

Both formats use one header row followed by positional columns:
Student ID, Full Name, Email, Phone.

Only rows without a name are skipped. An optional value that fails validation
is dropped (a bad code is replaced by a placeholder) and reported as a warning.
"""
import csv
import io
import secrets
import string
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from openpyxl import Workbook, load_workbook
from pydantic import ValidationError

from .schemas import StudentCreate, StudentImportFailure, StudentImportWarning

TEMPLATE_HEADERS = ("Student ID", "Full Name", "Email", "Phone")
IMPORT_MAX_ROWS = 500
PLACEHOLDER_PREFIX = "TMP"
FULL_NAME_MAX_LENGTH = 255


class ParsedRows(NamedTuple):
    students: List[StudentCreate]
    skipped: List[StudentImportFailure]
    warnings: List[StudentImportWarning]


def generate_placeholder_code() -> str:
    """Code for imported students without one, e.g. TMP-4K7Q."""
    alphabet = string.ascii_uppercase + string.digits
    return f"{PLACEHOLDER_PREFIX}-" + "".join(secrets.choice(alphabet) for _ in range(4))


# What replaces an optional value that fails validation
_FIELD_FALLBACKS: Dict[str, Callable[[], Optional[str]]] = {
    "student_code": generate_placeholder_code,
    "email": lambda: None,
    "phone": lambda: None,
}


def _cell_str(row: Sequence, col: int) -> str:
    if col >= len(row) or row[col] is None:
        return ""
    return str(row[col]).strip()


def _build_student(
    row_num: int,
    fields: Dict[str, Optional[str]],
) -> Tuple[StudentCreate, List[StudentImportWarning]]:
    warnings: List[StudentImportWarning] = []
    try:
        return StudentCreate(**fields), warnings
    except ValidationError as e:
        for err in e.errors():
            field = err["loc"][0] if err["loc"] else None
            if field not in _FIELD_FALLBACKS:
                raise
            warnings.append(
                StudentImportWarning(
                    row=row_num,
                    full_name=fields["full_name"],
                    field=field,
                    value=fields[field],
                    reason=err["msg"],
                )
            )
            fields[field] = _FIELD_FALLBACKS[field]()
    return StudentCreate(**fields), warnings


def _rows_to_students(rows: Iterable[Sequence]) -> ParsedRows:
    """Data rows (header already consumed) to candidates. Row numbers count the header as row 1."""
    parsed = ParsedRows([], [], [])
    for row_num, row in enumerate(rows, start=2):
        if row_num - 1 > IMPORT_MAX_ROWS:
            raise ValueError(f"Maximum {IMPORT_MAX_ROWS} data rows allowed")
        if not row or all(not _cell_str(row, i) for i in range(len(row))):
            continue
        full_name = _cell_str(row, 1)
        if not full_name:
            parsed.skipped.append(StudentImportFailure(row=row_num, reason="Full name is required"))
            continue
        student, warnings = _build_student(
            row_num,
            {
                "student_code": _cell_str(row, 0) or generate_placeholder_code(),
                "full_name": full_name[:FULL_NAME_MAX_LENGTH],
                "email": _cell_str(row, 2) or None,
                "phone": _cell_str(row, 3) or None,
            },
        )
        parsed.students.append(student)
        parsed.warnings.extend(warnings)
    return parsed


def parse_students_csv(text: str) -> ParsedRows:
    """Parse comma-separated text. The first line is a header and is ignored."""
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), skipinitialspace=True)
    header: Optional[List[str]] = next(reader, None)
    if header is None:
        return ParsedRows([], [], [])
    return _rows_to_students(reader)


def parse_students_excel(content: bytes) -> ParsedRows:
    """Parse the first sheet of an .xlsx workbook laid out like the CSV."""
    if not content:
        raise ValueError("File is empty")
    try:
        wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise ValueError(f"Invalid Excel file: {e}") from e
    try:
        rows_iter = wb.active.iter_rows(values_only=True)
        if next(rows_iter, None) is None:
            return ParsedRows([], [], [])
        return _rows_to_students(rows_iter)
    finally:
        wb.close()


def build_student_upload_template() -> bytes:
    """Empty workbook with the import headers and one example row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Students"
    ws.append(list(TEMPLATE_HEADERS))
    ws.append(["GM001", "John Doe", "john@example.com", "555-0100"])
    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()
