from django.urls import path

from core.imports.api import commit, preview

urlpatterns = [
    path("imports/employees/preview", preview),
    path("imports/employees", commit),
]
