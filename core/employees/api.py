import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.errors import error_response, missing_fields, missing_fields_response
from core.common.history import diff_fields, record_changes
from core.common.params import int_param, text_param
from core.employees.models import Employee, EmployeeUpdateLog
from core.employees.serializers import (
    LOOKUP_FIELDS,
    OPTIONAL_DATES,
    REQUIRED_FIELDS,
    TRACKED_FIELDS,
    EmployeeSerializer,
    EmployeeUpdateLogSerializer,
    EmployeeWriteSerializer,
    blank_to_none,
    email_suggestions,
)
from core.iam.permissions import require_company
from core.lookups.models import Education, label_map
from core.reports.cohorts import Workforce

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = OPTIONAL_DATES + list(LOOKUP_FIELDS)


def _get_employee(company, employee_id):
    return Employee.objects.filter(id=employee_id, company__iexact=company).first()


def _not_found():
    return error_response("NOT_FOUND", "Employee not found", 404)


def _email_taken(company, email, exclude_id=None):
    qs = Employee.objects.filter(company__iexact=company, employee_mail__iexact=email)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.first()


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def employees(request):
    """
    GET /v1/employees?company=<name>
      id=<int optional>              single employee
      year=<int>&education=<label>   employees holding that education at
                                     the end of the year
    POST /v1/employees
    """
    company, err = require_company(request)
    if err:
        return err

    if request.method == "POST":
        return _create_employee(request, company)

    employee_id = int_param(request, "id")
    if employee_id is not None:
        employee = _get_employee(company, employee_id)
        if not employee:
            return _not_found()
        return Response({"employee": EmployeeSerializer(employee).data})

    year = int_param(request, "year")
    education = text_param(request, "education")
    if year is not None and education:
        workforce = Workforce.load(company)
        items = workforce.members(year, "education_id", label_map(Education), education)
        return Response({"items": EmployeeSerializer(items, many=True).data})

    qs = Employee.objects.filter(company__iexact=company).order_by("full_name", "id")
    return Response({"items": EmployeeSerializer(qs, many=True).data})


def _create_employee(request, company):
    payload = blank_to_none(request.data, NULLABLE_FIELDS)
    missing = missing_fields(payload, REQUIRED_FIELDS)
    if missing:
        return missing_fields_response(missing)

    s = EmployeeWriteSerializer(data=payload)
    s.is_valid(raise_exception=True)
    data = s.validated_data

    existing = _email_taken(company, data["employee_mail"])
    if existing:
        return error_response(
            "EMAIL_EXISTS",
            "An employee with this email already exists",
            409,
            existing=EmployeeSerializer(existing).data,
            suggestions=email_suggestions(data["full_name"], data["employee_mail"]),
        )

    same_person = Employee.objects.filter(
        company__iexact=company,
        full_name__iexact=data["full_name"],
        birth_date=data["birth_date"],
    ).first()
    if same_person:
        return error_response(
            "DUPLICATE_PERSON",
            "An employee with this name and birth date already exists",
            409,
            existing=EmployeeSerializer(same_person).data,
        )

    employee = Employee.objects.create(company=company, **data)
    logger.info("employee created id=%s company=%s", employee.id, company)
    return Response({"employee": EmployeeSerializer(employee).data}, status=201)


@api_view(["GET", "PUT", "PATCH", "DELETE"])
@permission_classes([IsAuthenticated])
def employee_detail(request, employee_id: int):
    """
    GET|PUT|PATCH|DELETE /v1/employees/{employee_id}?company=<name>

    PUT and PATCH both accept a subset of fields. Every changed field is
    appended to the change log in the same transaction as the update.
    """
    company, err = require_company(request)
    if err:
        return err

    employee = _get_employee(company, employee_id)
    if not employee:
        return _not_found()

    if request.method == "GET":
        return Response({"employee": EmployeeSerializer(employee).data})

    if request.method == "DELETE":
        employee.delete()
        logger.info("employee deleted id=%s company=%s", employee_id, company)
        return Response({"success": True, "message": "Employee deleted"})

    s = EmployeeWriteSerializer(instance=employee, data=blank_to_none(request.data, NULLABLE_FIELDS), partial=True)
    s.is_valid(raise_exception=True)
    data = s.validated_data

    if "employee_mail" in data:
        taken = _email_taken(company, data["employee_mail"], exclude_id=employee.id)
        if taken:
            return error_response(
                "EMAIL_EXISTS",
                "An employee with this email already exists",
                409,
                existing=EmployeeSerializer(taken).data,
            )

    with transaction.atomic():
        employee = Employee.objects.select_for_update().get(id=employee.id)
        before = {field: getattr(employee, field) for field in TRACKED_FIELDS}
        changes = diff_fields(before, data, TRACKED_FIELDS)
        if not changes:
            return Response({"employee": EmployeeSerializer(employee).data})

        for field, _old, _new in changes:
            setattr(employee, field, data[field])
        employee.updated_at = timezone.now()
        employee.save(update_fields=[field for field, _o, _n in changes] + ["updated_at"])

        record_changes(
            EmployeeUpdateLog,
            entity_field="employee_id",
            entity_id=employee.id,
            changes=changes,
            at=employee.updated_at,
        )

    logger.info("employee updated id=%s changes=%d", employee.id, len(changes))
    return Response({"employee": EmployeeSerializer(employee).data})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def employee_changes(request, employee_id: int):
    """
    GET /v1/employees/{employee_id}/changes?company=<name>
    Newest first.
    """
    company, err = require_company(request)
    if err:
        return err

    if not _get_employee(company, employee_id):
        return _not_found()

    qs = EmployeeUpdateLog.objects.filter(employee_id=employee_id).order_by("-updated_at", "-id")
    return Response({"items": EmployeeUpdateLogSerializer(qs, many=True).data})
