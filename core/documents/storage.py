import re
from io import BytesIO

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone
from pypdf import PdfReader
from pypdf.errors import PyPdfError


def sections() -> tuple[str, ...]:
    return tuple(getattr(settings, "ESG_DOCUMENT_SECTIONS", ("environmental", "social", "governance")))


def normalize_section(value) -> str | None:
    section = str(value or "").strip().lower()
    return section if section in sections() else None


def sanitize_company(company: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", (company or "").lower())


def sanitize_filename(name: str) -> str:
    return re.sub(r"\s+", "-", (name or "").strip())


def document_prefix(section: str, company: str) -> str:
    return f"{section}/{sanitize_company(company)}/"


def document_key(section: str, company: str, filename: str, now=None) -> str:
    now = now or timezone.now()
    millis = int(now.timestamp() * 1000)
    return f"{document_prefix(section, company)}{millis}-{sanitize_filename(filename)}"


def owns_key(company: str, key: str) -> bool:
    """
    True when `key` sits directly under one of the company's section prefixes.
    """
    for section in sections():
        prefix = document_prefix(section, company)
        if key.startswith(prefix) and "/" not in key[len(prefix):] and key[len(prefix):]:
            return True
    return False


def is_pdf(data: bytes) -> bool:
    if not data:
        return False
    try:
        reader = PdfReader(BytesIO(data))
        len(reader.pages)
    except (PyPdfError, ValueError, OSError):
        return False
    return True


def size_label(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"


def describe(key: str, section: str | None = None) -> dict:
    """
    Listing entry for a stored document; the URL is signed when the
    storage backend signs URLs (S3 with AWS_QUERYSTRING_AUTH).
    """
    size = default_storage.size(key)
    modified = default_storage.get_modified_time(key)
    return {
        "id": key,
        "name": key.rsplit("/", 1)[-1],
        "url": default_storage.url(key),
        "size": size_label(size),
        "size_bytes": size,
        "upload_date": modified.isoformat() if modified else None,
        "section": section or key.split("/", 1)[0],
    }


def save_document(key: str, data: bytes) -> str:
    """
    Stores the bytes and returns the key actually used by the storage.
    """
    return default_storage.save(key, ContentFile(data))


def list_documents(section: str, company: str) -> list[dict]:
    prefix = document_prefix(section, company)
    try:
        _dirs, files = default_storage.listdir(prefix.rstrip("/"))
    except FileNotFoundError:
        return []
    keys = sorted((prefix + name for name in files), reverse=True)
    return [describe(key, section) for key in keys]
