from django.urls import path

from core.employees.api import employee_changes, employee_detail, employees

urlpatterns = [
    path("employees", employees),
    path("employees/<int:employee_id>", employee_detail),
    path("employees/<int:employee_id>/changes", employee_changes),
]
