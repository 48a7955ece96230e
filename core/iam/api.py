from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from core.common.errors import error_response
from core.iam.auth import authenticate_with_retry
from core.iam.models import UserProfile, company_from_email
from core.iam.permissions import user_company
from core.iam.serializers import LoginSerializer, RegisterSerializer


def _user_payload(user, company):
    return {
        "id": str(user.id),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "company": company,
    }


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    """
    POST /v1/auth/login
    Body: { "email": "...", "password": "..." }
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)

    user = authenticate_with_retry(s.validated_data["email"], s.validated_data["password"])
    if not user:
        return error_response("INVALID_CREDENTIALS", "Invalid email or password", 401)

    company = user_company(user)
    refresh = RefreshToken.for_user(user)
    refresh["company"] = company or ""

    return Response({
        "access": str(refresh.access_token),
        "refresh": str(refresh),
        "user": _user_payload(user, company),
    })


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def register(request):
    """
    POST /v1/auth/register
    Body: { "email", "password", "first_name", "last_name" }
    Company is derived from the email domain.
    """
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = s.validated_data

    User = get_user_model()
    existing = User.objects.filter(email__iexact=data["email"]).first()
    if existing:
        return error_response(
            "EMAIL_EXISTS",
            "Email already registered",
            409,
            existing={"id": str(existing.id), "email": existing.email},
        )

    company = company_from_email(data["email"])
    if not company:
        return error_response("VALIDATION_ERROR", "Could not derive company from email", 400)

    with transaction.atomic():
        user = User.objects.create_user(
            username=data["email"],
            email=data["email"],
            password=data["password"],
            first_name=data["first_name"],
            last_name=data["last_name"],
        )
        UserProfile.objects.create(user=user, company=company)

    return Response({"message": "Registration successful", "user": _user_payload(user, company)}, status=201)


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def me(request):
    return Response({"user": _user_payload(request.user, user_company(request.user))})
