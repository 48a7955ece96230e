from datetime import date

from rest_framework.exceptions import ValidationError


def int_param(request, name: str, default=None):
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: ["A valid integer is required."]})


def text_param(request, name: str) -> str:
    return (request.query_params.get(name) or "").strip()


def parse_date(value) -> date | None:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None
