"""
URL configuration for the front-desk backend project.

The `urlpatterns` list routes URLs to views.  This module includes
both the Django admin and the API routes provided by the clinic app.
OpenAPI documentation is exposed at ``/swagger/`` and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Front Desk API",
    default_version='v1',
    description="Accounts, patient records and appointment scheduling for the clinic dashboard.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    # Django admin site (audit view over soft-deleted records)
    path('admin/', admin.site.urls),
    # Include API routes from the clinic app
    path('', include('clinic.routers')),
    # Swagger and ReDoc
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

# Unknown paths and malformed identifiers answer with the JSON envelope
handler404 = 'clinic.exceptions.json_not_found'
handler500 = 'clinic.exceptions.json_server_error'
