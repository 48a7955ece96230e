from django.urls import path

from core.documents.api import documents

urlpatterns = [
    path("documents", documents),
]
