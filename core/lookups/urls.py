from django.urls import path
from core.lookups.api import lookup_list

urlpatterns = [
    path("lookups/<slug:kind>", lookup_list, name="lookup-list"),
]
