# backend/urls.py
"""
PROJECT URLS

    /api/                 index of modules + docs
    /api/health/          liveness + database probe (AllowAny)
    /api/auth/jwt/...     SimpleJWT token pair
    /api/accounting/...   ledger, fiscal periods, reports, expenses, vendors
    /api/invoicing/...    tax invoices + ZATCA QR

The Django admin is mounted at settings.ADMIN_PATH.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema, inline_serializer
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

MODULES = {
    "accounting": "/api/accounting/",
    "invoicing": "/api/invoicing/",
}


@extend_schema(
    tags=["meta"],
    responses=inline_serializer(
        name="ApiIndex",
        fields={
            "message": serializers.CharField(),
            "docs": serializers.DictField(),
            "modules": serializers.DictField(),
        },
    ),
)
@api_view(["GET"])
@permission_classes([AllowAny])
def api_index(request):
    return Response(
        {
            "message": "Cafe Accounting API is running",
            "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
            "auth": {"jwt_create": "/api/auth/jwt/create/", "jwt_refresh": "/api/auth/jwt/refresh/"},
            "modules": MODULES,
        }
    )


@extend_schema(
    tags=["meta"],
    responses={
        200: inline_serializer(
            name="Health",
            fields={"status": serializers.CharField(), "db": serializers.CharField()},
        ),
        503: inline_serializer(
            name="HealthDegraded",
            fields={
                "status": serializers.CharField(),
                "db": serializers.CharField(),
                "error": serializers.CharField(),
            },
        ),
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
def health(request):
    """The process answers and the database runs a trivial query."""
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1")
    except OperationalError as exc:
        return Response({"status": "degraded", "db": "down", "error": str(exc)}, status=503)
    return Response({"status": "ok", "db": "ok"})


admin_path = getattr(settings, "ADMIN_PATH", "admin/").strip("/") + "/"

api_patterns = [
    path("", api_index, name="api-index"),
    path("health/", health, name="health"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("accounting/", include("accounting.api.urls")),
    path("invoicing/", include("invoicing.api.urls")),
]

urlpatterns = [
    path(admin_path, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False)),
    path("api/", include(api_patterns)),
]
