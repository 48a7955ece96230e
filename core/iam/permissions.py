from core.common.errors import error_response
from core.iam.models import UserProfile


def user_company(user) -> str | None:
    if not user or not user.is_authenticated:
        return None
    profile = UserProfile.objects.filter(user_id=user.id).only("company").first()
    return profile.company if profile else None


def _requested_company(request) -> str:
    company = request.query_params.get("company") or ""
    if not company and request.method not in ("GET", "HEAD", "DELETE"):
        data = request.data
        if hasattr(data, "get"):
            company = data.get("company") or ""
    return str(company).strip()


def require_company(request):
    """
    Returns (company, error_response).

    The company comes from the `company` query parameter (or the body on
    writes) and must match the caller's own company, case-insensitively.
    """
    company = _requested_company(request)
    if not company:
        return None, error_response("COMPANY_REQUIRED", "Company parameter is required", 400)

    own = user_company(request.user)
    if not own or own.lower() != company.lower():
        return company, error_response("FORBIDDEN", "User does not belong to this company", 403)

    return company, None
