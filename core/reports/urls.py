from django.urls import path

from core.reports import api

urlpatterns = [
    path("reports/education-distribution", api.education_distribution),
    path("reports/education-distribution/detailed", api.education_detailed),
    path("reports/education-distribution/employees", api.education_employees),
    path("reports/gender-distribution", api.gender_distribution),
    path("reports/gender-distribution/detailed", api.gender_detailed),
    path("reports/gender-distribution/employees", api.gender_employees),
    path("reports/employee-fluctuation", api.employee_fluctuation),
    path("reports/employee-fluctuation/detailed", api.fluctuation_detailed),
    path("reports/employee-fluctuation/employees", api.fluctuation_employees),
    path("reports/leave-tracking", api.leave_tracking),
    path("reports/leave-tracking/detailed", api.leave_detailed),
    path("reports/leave-tracking/employees", api.leave_employees),
    path("reports/raw-data", api.raw_data),
    path("reports/emissions", api.emissions),
    path("reports/utilities", api.utilities),
]
