from rest_framework.response import Response


def error_response(code: str, message: str, status: int, details=None, **extra) -> Response:
    body = {"error": {"code": code, "message": message}}
    if details is not None:
        body["error"]["details"] = details
    body.update(extra)
    return Response(body, status=status)


def missing_fields(data, required) -> list[str]:
    missing = []
    for field in required:
        value = data.get(field) if hasattr(data, "get") else None
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def missing_fields_response(missing: list[str]) -> Response:
    return error_response(
        "VALIDATION_ERROR",
        f"Missing required fields: {', '.join(missing)}",
        400,
        details={"missing": missing},
    )
