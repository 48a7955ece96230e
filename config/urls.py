from django.contrib import admin
from django.urls import path, include
from django.shortcuts import redirect
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from core.common.views import health_check
from core.iam.api import login, register, me

urlpatterns = [
    path("", lambda request: redirect("/api/docs/")),

    path("admin/", admin.site.urls),

    path("health/", health_check, name="health-check"),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("v1/auth/login", login, name="auth-login"),
    path("v1/auth/refresh", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("v1/auth/register", register, name="auth-register"),
    path("v1/auth/me", me, name="auth-me"),

    path("v1/", include("core.lookups.urls")),
    path("v1/", include("core.employees.urls")),
    path("v1/", include("core.fleet.urls")),
    path("v1/", include("core.utilities.urls")),
    path("v1/", include("core.reports.urls")),
    path("v1/", include("core.documents.urls")),
    path("v1/", include("core.imports.urls")),
]
