"""
Reading uploaded spreadsheets into header + row dicts.
"""
import csv
import io
import zipfile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException


class ImportFileError(ValueError):
    pass


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _header(values) -> list[str]:
    """
    Column names from the header row. Blank and repeated names become
    `Column <n>` so every column keeps its own key.
    """
    columns = []
    for i, value in enumerate(values):
        name = str(value).strip() if not _is_blank(value) else ""
        if not name or name in columns:
            name = f"Column {i + 1}"
        columns.append(name)
    return columns


def _rows(columns, records) -> list[dict]:
    out = []
    for record in records:
        values = list(record) + [None] * (len(columns) - len(record))
        if all(_is_blank(v) for v in values):
            continue
        out.append(dict(zip(columns, values)))
    return out


def read_xlsx(data: bytes) -> tuple[list[str], list[dict]]:
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise ImportFileError(f"Could not read spreadsheet: {exc}") from exc

    try:
        ws = wb.active
        records = ws.iter_rows(values_only=True)
        first = next(records, None)
        if first is None:
            return [], []
        columns = _header(first)
        return columns, _rows(columns, records)
    finally:
        wb.close()


def read_csv(data: bytes) -> tuple[list[str], list[dict]]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ImportFileError("CSV files must be UTF-8 encoded") from exc

    reader = csv.reader(io.StringIO(text))
    first = next(reader, None)
    if first is None:
        return [], []
    columns = _header(first)
    return columns, _rows(columns, reader)


def read_table(upload) -> tuple[list[str], list[dict]]:
    """
    (columns, rows) of the first sheet of an xlsx upload, or of a csv
    upload. Fully blank rows are skipped.
    """
    name = (getattr(upload, "name", "") or "").lower()
    data = upload.read()
    if not data:
        raise ImportFileError("The uploaded file is empty")
    if name.endswith(".csv"):
        return read_csv(data)
    return read_xlsx(data)
