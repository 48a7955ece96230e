"""
Target fields of the employee import and coercion of spreadsheet cells
into them.
"""
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation

from core.lookups.models import Education, Gender, ManagerialPosition, MaritalStatus, Position

DATA_TYPES = ["text", "date", "number", "boolean", "datetime"]

EXCEL_EPOCH = date(1899, 12, 30)

TRUE_WORDS = {"yes", "y", "true", "1"}
FALSE_WORDS = {"no", "n", "false", "0"}


@dataclass(frozen=True)
class ImportField:
    name: str
    type: str
    required: bool = False


IMPORT_FIELDS = [
    ImportField("full_name", "text", required=True),
    ImportField("employee_mail", "text", required=True),
    ImportField("birth_date", "date", required=True),
    ImportField("employment_date", "date", required=True),
    ImportField("termination_date", "date"),
    ImportField("position_id", "number"),
    ImportField("education_id", "number"),
    ImportField("marital_status_id", "number"),
    ImportField("gender_id", "number"),
    ImportField("managerial_position_id", "boolean"),
]

FIELDS_BY_NAME = {f.name: f for f in IMPORT_FIELDS}
REQUIRED_TARGETS = [f.name for f in IMPORT_FIELDS if f.required]

LOOKUP_TARGETS = {
    "position_id": Position,
    "education_id": Education,
    "marital_status_id": MaritalStatus,
    "gender_id": Gender,
    "managerial_position_id": ManagerialPosition,
}


class CoercionError(ValueError):
    pass


@dataclass(frozen=True)
class ColumnMapping:
    excel_column: str
    db_column: str
    data_type: str = "text"


def parse_mappings(raw) -> list[ColumnMapping]:
    """
    Validates the client's [{excel_column, db_column, data_type}] list.
    Entries without a db_column are ignored.
    """
    if not isinstance(raw, list):
        raise CoercionError("mappings must be a list")

    out = []
    seen = set()
    for item in raw:
        if not isinstance(item, dict):
            raise CoercionError("each mapping must be an object")
        target = str(item.get("db_column") or "").strip()
        column = str(item.get("excel_column") or "").strip()
        if not target or not column:
            continue
        if target not in FIELDS_BY_NAME:
            raise CoercionError(f"Unknown target field: {target}")
        if target in seen:
            raise CoercionError(f"Field mapped more than once: {target}")
        data_type = str(item.get("data_type") or FIELDS_BY_NAME[target].type).strip().lower()
        if data_type not in DATA_TYPES:
            raise CoercionError(f"Unknown data type: {data_type}")
        seen.add(target)
        out.append(ColumnMapping(excel_column=column, db_column=target, data_type=data_type))
    return out


def _normalize(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", (name or "").lower())


def suggest_mapping(columns: list[str]) -> list[dict]:
    """
    Maps columns whose normalised name matches a target, with or without
    its `_id` suffix ("Full Name" -> full_name, "Gender" -> gender_id).
    """
    targets = {}
    for f in IMPORT_FIELDS:
        targets[_normalize(f.name)] = f
        if f.name.endswith("_id"):
            targets[_normalize(f.name[:-3])] = f

    out = []
    used = set()
    for column in columns:
        f = targets.get(_normalize(column))
        if f is None or f.name in used:
            continue
        used.add(f.name)
        out.append({"excel_column": column, "db_column": f.name, "data_type": f.type})
    return out


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _from_serial(days) -> date:
    try:
        return EXCEL_EPOCH + timedelta(days=int(days))
    except (OverflowError, ValueError) as exc:
        raise CoercionError(f"Invalid date serial: {days}") from exc


def to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return _from_serial(value)
    text = str(value).strip()
    if re.fullmatch(r"\d+(\.\d+)?", text):
        return _from_serial(float(text))
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise CoercionError(f"Invalid date: {text}") from exc


def to_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        d = to_date(value)
        return datetime(d.year, d.month, d.day)


def to_number(value):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, Decimal)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CoercionError(f"Invalid number: {value}")
        return int(value) if value.is_integer() else Decimal(str(value))
    text = str(value).strip()
    try:
        number = Decimal(text)
    except InvalidOperation as exc:
        raise CoercionError(f"Invalid number: {text}") from exc
    if not number.is_finite():
        raise CoercionError(f"Invalid number: {text}")
    return int(number) if number == number.to_integral_value() else number


def to_boolean(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_WORDS:
        return True
    if text in FALSE_WORDS:
        return False
    raise CoercionError(f"Invalid boolean: {value}")


CELL_COERCERS = {
    "text": lambda v: str(v).strip() if not isinstance(v, (date, datetime)) else v,
    "date": to_date,
    "number": to_number,
    "boolean": to_boolean,
    "datetime": to_datetime,
}


def coerce_cell(value, data_type: str):
    if is_blank(value):
        return None
    return CELL_COERCERS[data_type](value)


class LookupResolver:
    """
    Resolves lookup cells given as an id or a label (case-insensitive).
    Managerial position also takes yes/no style flags.
    """

    def __init__(self):
        self._tables = {}

    def _table(self, model):
        if model not in self._tables:
            rows = list(model.objects.order_by("id"))
            self._tables[model] = (
                {r.id: r for r in rows},
                {r.name.strip().lower(): r for r in rows},
            )
        return self._tables[model]

    def _flag(self, flag: bool) -> int:
        by_id, _ = self._table(ManagerialPosition)
        for row in by_id.values():
            if row.is_manager == flag:
                return row.id
        raise CoercionError(f"No managerial position with is_manager={flag}")

    def resolve(self, target: str, value) -> int:
        model = LOOKUP_TARGETS[target]
        by_id, by_name = self._table(model)

        if target == "managerial_position_id":
            if isinstance(value, bool):
                return self._flag(value)
            text = str(value).strip().lower()
            if text in TRUE_WORDS or text in FALSE_WORDS:
                return self._flag(text in TRUE_WORDS)

        if isinstance(value, bool):
            raise CoercionError(f"Invalid {target}: {value}")
        try:
            pk = int(to_number(value))
        except (CoercionError, TypeError, ValueError):
            pk = None
        if pk is not None and pk in by_id:
            return pk

        row = by_name.get(str(value).strip().lower())
        if row is None:
            raise CoercionError(f"Unknown {model.__name__}: {value}")
        return row.id


def convert(mapping: ColumnMapping, raw, resolver: LookupResolver):
    """
    Value stored in the employee column for one mapped cell. Lookup
    targets take the raw cell (id or label); everything else goes through
    the mapping's data type first.
    """
    if is_blank(raw):
        return None
    target = mapping.db_column
    if target in LOOKUP_TARGETS:
        return resolver.resolve(target, raw)

    value = coerce_cell(raw, mapping.data_type)
    if FIELDS_BY_NAME[target].type == "date":
        return to_date(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    text = str(value).strip()
    return text or None
