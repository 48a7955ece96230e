from dataclasses import asdict

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.errors import missing_fields_response
from core.common.params import int_param, text_param
from core.employees.models import Employee
from core.fleet.emissions import emissions_report
from core.iam.permissions import require_company
from core.lookups.models import Education, Gender, ManagerialPosition, label_map
from core.reports.cohorts import (
    FLUCTUATION_CATEGORIES,
    LeaveStats,
    Workforce,
    age_at_year_end,
    age_band,
    distribution_rows,
    employee_status,
    fluctuation_rows,
    gender_manager_rows,
    is_active_in,
    leave_duration,
    leave_stats,
    percentage,
    report_years,
)
from core.reports.formatters import densify, per_employee
from core.utilities.series import utility_series


def _workforce(request):
    """
    Returns (workforce, years, error_response).
    """
    company, err = require_company(request)
    if err:
        return None, None, err
    return Workforce.load(company), report_years(), None


def _cohort_params(request):
    """
    Returns (year, category, error_response) for drill-down endpoints.
    """
    year = int_param(request, "year")
    category = text_param(request, "category")
    missing = [name for name, value in (("year", year), ("category", category)) if not value]
    if missing:
        return None, None, missing_fields_response(missing)
    return year, category, None


def _manager_ids() -> set[str]:
    return {str(pk) for pk in ManagerialPosition.objects.filter(is_manager=True).values_list("id", flat=True)}


def _brief(employee) -> dict:
    return {
        "employee_id": employee.id,
        "full_name": employee.full_name,
        "employee_mail": employee.employee_mail,
        "employment_date": employee.employment_date.isoformat(),
        "status": employee_status(employee),
    }


def _category_value(workforce, field, labels):
    def value_for(employee, year):
        if not is_active_in(employee, year):
            return None
        return workforce.label(employee, field, year, labels)
    return value_for


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def education_distribution(request):
    """
    GET /v1/reports/education-distribution?company=<name>

    data[year][education] is the percentage of categorised employees.
    """
    workforce, years, err = _workforce(request)
    if err:
        return err

    labels = label_map(Education)
    categories = list(labels.values())
    rows = distribution_rows(workforce, years, "education_id", labels)
    return Response({
        "labels": categories,
        "years": years,
        "data": densify(rows, years, categories),
        "counts": densify(rows, years, categories, attr="count"),
    })


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def education_detailed(request):
    workforce, years, err = _workforce(request)
    if err:
        return err

    value_for = _category_value(workforce, "education_id", label_map(Education))
    return Response({"years": years, "items": per_employee(workforce.employees, years, "education", value_for)})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def education_employees(request):
    """
    GET /v1/reports/education-distribution/employees?company=&year=&category=
    """
    workforce, _years, err = _workforce(request)
    if err:
        return err
    year, category, err = _cohort_params(request)
    if err:
        return err

    members = workforce.members(year, "education_id", label_map(Education), category)
    return Response({"year": year, "category": category, "items": [_brief(e) for e in members]})


# ---------------------------------------------------------------------------
# Gender
# ---------------------------------------------------------------------------

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def gender_distribution(request):
    """
    GET /v1/reports/gender-distribution?company=<name>

    data          share of each gender among categorised employees
    manager_share share of each gender's employees that are managers
    managers      share of each gender among managers
    """
    workforce, years, err = _workforce(request)
    if err:
        return err

    labels = label_map(Gender)
    categories = list(labels.values())
    rows = distribution_rows(workforce, years, "gender_id", labels)
    manager_rows = gender_manager_rows(workforce, years, labels, _manager_ids())

    counts = densify(rows, years, categories, attr="count")
    manager_counts = densify(manager_rows, years, categories, attr="count")
    manager_share = {
        year: {g: percentage(manager_counts[year][g], counts[year][g]) for g in categories}
        for year in years
    }

    return Response({
        "labels": categories,
        "years": years,
        "data": densify(rows, years, categories),
        "counts": counts,
        "manager_share": manager_share,
        "managers": densify(manager_rows, years, categories),
        "manager_counts": manager_counts,
    })


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def gender_detailed(request):
    workforce, years, err = _workforce(request)
    if err:
        return err

    labels = label_map(Gender)
    managers = _manager_ids()

    def value_for(employee, year):
        if not is_active_in(employee, year):
            return None
        gender = workforce.label(employee, "gender_id", year, labels)
        if gender is None:
            return None
        role = "Manager" if workforce.is_manager(employee, year, managers) else "Employee"
        return f"{gender} / {role}"

    return Response({"years": years, "items": per_employee(workforce.employees, years, "gender", value_for)})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def gender_employees(request):
    workforce, _years, err = _workforce(request)
    if err:
        return err
    year, category, err = _cohort_params(request)
    if err:
        return err

    managers = _manager_ids()
    members = workforce.members(year, "gender_id", label_map(Gender), category)
    items = [{**_brief(e), "is_manager": workforce.is_manager(e, year, managers)} for e in members]
    return Response({"year": year, "category": category, "items": items})


# ---------------------------------------------------------------------------
# Fluctuation
# ---------------------------------------------------------------------------

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def employee_fluctuation(request):
    """
    GET /v1/reports/employee-fluctuation?company=<name>

    Percentages are relative to all employees active in the year.
    """
    workforce, years, err = _workforce(request)
    if err:
        return err

    rows = fluctuation_rows(workforce, years, _manager_ids())
    return Response({
        "categories": FLUCTUATION_CATEGORIES,
        "years": years,
        "data": densify(rows, years, FLUCTUATION_CATEGORIES),
        "counts": densify(rows, years, FLUCTUATION_CATEGORIES, attr="count"),
    })


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def fluctuation_detailed(request):
    workforce, years, err = _workforce(request)
    if err:
        return err

    managers = _manager_ids()

    def value_for(employee, year):
        if not is_active_in(employee, year):
            return None
        band = age_band(age_at_year_end(employee.birth_date, year))
        if workforce.is_manager(employee, year, managers):
            return f"Managers {band}"
        return band

    return Response({"years": years, "items": per_employee(workforce.employees, years, "age_group", value_for)})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def fluctuation_employees(request):
    workforce, _years, err = _workforce(request)
    if err:
        return err
    year, category, err = _cohort_params(request)
    if err:
        return err

    managers = _manager_ids()
    items = []
    for employee in workforce.active(year):
        if category not in workforce.fluctuation_categories(employee, year, managers):
            continue
        items.append({
            **_brief(employee),
            "birth_date": employee.birth_date.isoformat(),
            "age_at_year": age_at_year_end(employee.birth_date, year),
            "is_manager": workforce.is_manager(employee, year, managers),
        })
    return Response({"year": year, "category": category, "items": items})


# ---------------------------------------------------------------------------
# Leave
# ---------------------------------------------------------------------------

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def leave_tracking(request):
    """
    GET /v1/reports/leave-tracking?company=<name>

    data[year][gender] = {avg_duration, leave_count, ongoing_leaves} for
    leaves starting in the year.
    """
    workforce, years, err = _workforce(request)
    if err:
        return err

    labels = label_map(Gender)
    categories = list(labels.values())
    stats = leave_stats(workforce, years, labels)
    empty = LeaveStats(avg_duration=0.0, leave_count=0, ongoing_leaves=0)
    data = {
        year: {g: asdict(stats.get((year, g), empty)) for g in categories}
        for year in years
    }
    return Response({"categories": categories, "years": years, "data": data})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def leave_detailed(request):
    workforce, years, err = _workforce(request)
    if err:
        return err

    today = timezone.localdate()

    def value_for(employee, year):
        start = employee.leave_date_start
        if not is_active_in(employee, year) or not start or start.year != year:
            return None
        return {
            "duration": leave_duration(employee, today),
            "count": 1,
            "ongoing": employee.leave_date_end is None,
        }

    return Response({"years": years, "items": per_employee(workforce.employees, years, "leave", value_for)})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def leave_employees(request):
    workforce, _years, err = _workforce(request)
    if err:
        return err
    year, category, err = _cohort_params(request)
    if err:
        return err

    today = timezone.localdate()
    items = []
    for employee in workforce.members(year, "gender_id", label_map(Gender), category):
        start = employee.leave_date_start
        if not start or start.year != year:
            continue
        items.append({
            **_brief(employee),
            "leave_date_start": start.isoformat(),
            "leave_date_end": employee.leave_date_end.isoformat() if employee.leave_date_end else None,
            "duration": leave_duration(employee, today),
            "ongoing": employee.leave_date_end is None,
        })
    return Response({"year": year, "category": category, "items": items})


# ---------------------------------------------------------------------------
# Raw data, emissions, utilities
# ---------------------------------------------------------------------------

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def raw_data(request):
    """
    GET /v1/reports/raw-data?company=<name>
    Current employee rows with lookup labels.
    """
    company, err = require_company(request)
    if err:
        return err

    qs = (
        Employee.objects.filter(company__iexact=company)
        .select_related("education", "gender", "managerial_position", "position", "marital_status")
        .order_by("id")
    )
    items = [
        {
            "employee_id": e.id,
            "full_name": e.full_name,
            "employment_date": e.employment_date.isoformat(),
            "termination_date": e.termination_date.isoformat() if e.termination_date else None,
            "education": e.education.name if e.education else None,
            "gender": e.gender.name if e.gender else None,
            "managerial_position": e.managerial_position.name if e.managerial_position else None,
            "position": e.position.name if e.position else None,
            "marital_status": e.marital_status.name if e.marital_status else None,
        }
        for e in qs
    ]
    return Response({"items": items})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def emissions(request):
    """
    GET /v1/reports/emissions?company=<name>
    """
    company, err = require_company(request)
    if err:
        return err
    return Response(emissions_report(company, report_years()))


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def utilities(request):
    """
    GET /v1/reports/utilities?company=<name>
    """
    company, err = require_company(request)
    if err:
        return err
    return Response(utility_series(company))
