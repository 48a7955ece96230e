from django.urls import path

from core.utilities.api import bills

urlpatterns = [
    path("bills", bills),
]
