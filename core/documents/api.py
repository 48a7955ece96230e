import logging

from django.core.files.storage import default_storage
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.errors import error_response, missing_fields_response
from core.common.params import text_param
from core.documents.storage import (
    describe,
    document_key,
    is_pdf,
    list_documents,
    normalize_section,
    owns_key,
    save_document,
    sections,
)
from core.iam.permissions import require_company

logger = logging.getLogger(__name__)


def _invalid_section():
    return error_response(
        "VALIDATION_ERROR",
        f"Invalid section specified. Must be one of: {', '.join(sections())}",
        400,
    )


@api_view(["GET", "POST", "DELETE"])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def documents(request):
    """
    GET    /v1/documents?company=<name>&section=<section>
    POST   /v1/documents  multipart: file, company, section
    DELETE /v1/documents?company=<name>&id=<key>
    """
    company, err = require_company(request)
    if err:
        return err

    if request.method == "POST":
        return _upload(request, company)

    if request.method == "DELETE":
        return _delete(request, company)

    section = normalize_section(text_param(request, "section"))
    if not section:
        return _invalid_section()
    return Response({"items": list_documents(section, company)})


def _upload(request, company):
    upload = request.FILES.get("file")
    raw_section = request.data.get("section")
    missing = [name for name, value in (("file", upload), ("section", raw_section)) if not value]
    if missing:
        return missing_fields_response(missing)

    section = normalize_section(raw_section)
    if not section:
        return _invalid_section()

    data = upload.read()
    if not is_pdf(data):
        return error_response("VALIDATION_ERROR", "Only PDF files are allowed", 400)

    key = save_document(document_key(section, company, upload.name), data)
    logger.info("document uploaded key=%s size=%d", key, len(data))
    return Response(describe(key, section), status=201)


def _delete(request, company):
    key = text_param(request, "id")
    if not key:
        return missing_fields_response(["id"])

    if not owns_key(company, key) or not default_storage.exists(key):
        return error_response("NOT_FOUND", "Document not found", 404)

    default_storage.delete(key)
    logger.info("document deleted key=%s", key)
    return Response({"success": True, "message": "File deleted successfully"})
