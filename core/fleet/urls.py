from django.urls import path

from core.fleet.api import fleet, vehicle_detail, vehicle_logs, vehicle_routes

urlpatterns = [
    path("fleet", fleet),
    path("fleet/<int:vehicle_id>", vehicle_detail),
    path("fleet/<int:vehicle_id>/logs", vehicle_logs),
    path("fleet/<int:vehicle_id>/routes", vehicle_routes),
]
