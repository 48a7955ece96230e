import json
import logging

from django.db import transaction
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.errors import error_response, missing_fields_response
from core.employees.models import Employee
from core.iam.permissions import require_company
from core.imports.mapping import (
    DATA_TYPES,
    IMPORT_FIELDS,
    REQUIRED_TARGETS,
    CoercionError,
    LookupResolver,
    convert,
    parse_mappings,
    suggest_mapping,
)
from core.imports.parsing import ImportFileError, read_table

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 5


class RowError(Exception):
    def __init__(self, row: int, message: str, missing=None, field=None):
        super().__init__(message)
        self.row = row
        self.message = message
        self.missing = missing or []
        self.field = field


def _read_upload(request):
    upload = request.FILES.get("file")
    if not upload:
        return None, None, missing_fields_response(["file"])
    try:
        columns, rows = read_table(upload)
    except ImportFileError as exc:
        return None, None, error_response("VALIDATION_ERROR", str(exc), 400)
    return columns, rows, None


def _jsonable(value):
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def preview(request):
    """
    POST /v1/imports/employees/preview
    multipart: file (xlsx or csv)
    """
    columns, rows, err = _read_upload(request)
    if err:
        return err

    return Response({
        "columns": columns,
        "rows": [{k: _jsonable(v) for k, v in row.items()} for row in rows[:PREVIEW_ROWS]],
        "total_rows": len(rows),
        "fields": [{"name": f.name, "type": f.type, "required": f.required} for f in IMPORT_FIELDS],
        "data_types": DATA_TYPES,
        "suggested_mapping": suggest_mapping(columns),
    })


@api_view(["POST"])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def commit(request):
    """
    POST /v1/imports/employees
    multipart: file, company, mappings (JSON [{excel_column, db_column, data_type}])

    All rows are inserted in one transaction; the first bad row rolls the
    whole import back.
    """
    company, err = require_company(request)
    if err:
        return err

    raw = request.data.get("mappings")
    if not raw:
        return missing_fields_response(["mappings"])
    try:
        mappings = parse_mappings(json.loads(raw) if isinstance(raw, str) else raw)
    except json.JSONDecodeError:
        return error_response("VALIDATION_ERROR", "mappings must be valid JSON", 400)
    except CoercionError as exc:
        return error_response("VALIDATION_ERROR", str(exc), 400)

    mapped = {m.db_column for m in mappings}
    unmapped = [name for name in REQUIRED_TARGETS if name not in mapped]
    if unmapped:
        return error_response(
            "VALIDATION_ERROR",
            f"Required fields not mapped: {', '.join(unmapped)}",
            400,
            details={"missing": unmapped},
        )

    columns, rows, err = _read_upload(request)
    if err:
        return err

    unknown = sorted({m.excel_column for m in mappings} - set(columns))
    if unknown:
        return error_response(
            "VALIDATION_ERROR",
            f"Columns not found in file: {', '.join(unknown)}",
            400,
            details={"columns": unknown},
        )

    resolver = LookupResolver()
    try:
        with transaction.atomic():
            count = _insert_rows(company, rows, mappings, resolver)
    except RowError as exc:
        logger.warning("employee import rolled back company=%s row=%s: %s", company, exc.row, exc.message)
        details = {"row": exc.row}
        if exc.missing:
            details["missing"] = exc.missing
        if exc.field:
            details["field"] = exc.field
        return error_response("VALIDATION_ERROR", exc.message, 400, details=details)

    logger.info("employee import committed company=%s count=%d", company, count)
    return Response({
        "success": True,
        "message": f"Successfully imported {count} employees",
        "count": count,
    })


def _insert_rows(company, rows, mappings, resolver) -> int:
    employees = []
    # Row numbers as shown in the spreadsheet; row 1 is the header.
    for number, row in enumerate(rows, start=2):
        record = {}
        for m in mappings:
            try:
                record[m.db_column] = convert(m, row.get(m.excel_column), resolver)
            except CoercionError as exc:
                raise RowError(number, f"Row {number}: {exc}", field=m.db_column) from exc

        missing = [name for name in REQUIRED_TARGETS if record.get(name) in (None, "")]
        if missing:
            raise RowError(number, f"Row {number}: missing required fields: {', '.join(missing)}", missing=missing)

        employees.append(Employee(company=company, **record))

    Employee.objects.bulk_create(employees)
    return len(employees)
