import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.errors import error_response, missing_fields, missing_fields_response
from core.common.history import diff_fields, record_changes
from core.common.params import int_param
from core.employees.serializers import blank_to_none
from core.fleet.models import FleetUpdateLog, Route, Vehicle
from core.fleet.serializers import (
    OPTIONAL_DATES,
    REQUIRED_FIELDS,
    TRACKED_FIELDS,
    FleetUpdateLogSerializer,
    RouteSerializer,
    VehicleSerializer,
    VehicleWriteSerializer,
)
from core.iam.permissions import require_company

logger = logging.getLogger(__name__)


def _get_vehicle(company, vehicle_id):
    return (
        Vehicle.objects.select_related("vehicle_type")
        .filter(id=vehicle_id, company__iexact=company)
        .first()
    )


def _not_found():
    return error_response("NOT_FOUND", "Vehicle not found", 404)


def _registration_taken(company, registration_number, exclude_id=None):
    qs = Vehicle.objects.filter(company__iexact=company, registration_number__iexact=registration_number)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.select_related("vehicle_type").first()


def _duplicate(existing):
    return error_response(
        "DUPLICATE_REGISTRATION",
        "A vehicle with this registration number already exists",
        409,
        existing=VehicleSerializer(existing).data,
    )


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def fleet(request):
    """
    GET /v1/fleet?company=<name>[&id=<int>]
      With `id`, returns {"vehicle": <row or null>}.
    POST /v1/fleet
    """
    company, err = require_company(request)
    if err:
        return err

    if request.method == "POST":
        payload = blank_to_none(request.data, OPTIONAL_DATES)
        missing = missing_fields(payload, REQUIRED_FIELDS)
        if missing:
            return missing_fields_response(missing)

        s = VehicleWriteSerializer(data=payload)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        existing = _registration_taken(company, data["registration_number"])
        if existing:
            return _duplicate(existing)

        vehicle = Vehicle.objects.create(company=company, **data)
        logger.info("vehicle created id=%s company=%s", vehicle.id, company)
        vehicle = _get_vehicle(company, vehicle.id)
        return Response({"vehicle": VehicleSerializer(vehicle).data}, status=201)

    vehicle_id = int_param(request, "id")
    if vehicle_id is not None:
        vehicle = _get_vehicle(company, vehicle_id)
        return Response({"vehicle": VehicleSerializer(vehicle).data if vehicle else None})

    qs = (
        Vehicle.objects.select_related("vehicle_type")
        .filter(company__iexact=company)
        .order_by("registration_number", "id")
    )
    return Response({"items": VehicleSerializer(qs, many=True).data})


@api_view(["GET", "PUT", "PATCH", "DELETE"])
@permission_classes([IsAuthenticated])
def vehicle_detail(request, vehicle_id: int):
    """
    GET|PUT|PATCH|DELETE /v1/fleet/{vehicle_id}?company=<name>
    """
    company, err = require_company(request)
    if err:
        return err

    vehicle = _get_vehicle(company, vehicle_id)
    if not vehicle:
        return _not_found()

    if request.method == "GET":
        return Response({"vehicle": VehicleSerializer(vehicle).data})

    if request.method == "DELETE":
        vehicle.delete()
        logger.info("vehicle deleted id=%s company=%s", vehicle_id, company)
        return Response({"success": True, "message": "Vehicle deleted"})

    s = VehicleWriteSerializer(instance=vehicle, data=blank_to_none(request.data, OPTIONAL_DATES), partial=True)
    s.is_valid(raise_exception=True)
    data = s.validated_data

    if "registration_number" in data:
        taken = _registration_taken(company, data["registration_number"], exclude_id=vehicle.id)
        if taken:
            return _duplicate(taken)

    with transaction.atomic():
        locked = Vehicle.objects.select_for_update().get(id=vehicle.id)
        before = {field: getattr(locked, field) for field in TRACKED_FIELDS}
        changes = diff_fields(before, data, TRACKED_FIELDS)
        if changes:
            for field, _old, _new in changes:
                setattr(locked, field, data[field])
            locked.updated_at = timezone.now()
            locked.save(update_fields=[field for field, _o, _n in changes] + ["updated_at"])
            record_changes(
                FleetUpdateLog,
                entity_field="vehicle_id",
                entity_id=locked.id,
                changes=changes,
                null_as="",
                at=locked.updated_at,
            )

    logger.info("vehicle updated id=%s changes=%d", vehicle.id, len(changes))
    return Response({"vehicle": VehicleSerializer(_get_vehicle(company, vehicle.id)).data})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def vehicle_logs(request, vehicle_id: int):
    """
    GET /v1/fleet/{vehicle_id}/logs?company=<name>
    Newest first.
    """
    company, err = require_company(request)
    if err:
        return err

    if not _get_vehicle(company, vehicle_id):
        return _not_found()

    qs = FleetUpdateLog.objects.filter(vehicle_id=vehicle_id).order_by("-updated_at", "-id")
    return Response({"items": FleetUpdateLogSerializer(qs, many=True).data})


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def vehicle_routes(request, vehicle_id: int):
    """
    GET /v1/fleet/{vehicle_id}/routes?company=<name>
    POST /v1/fleet/{vehicle_id}/routes
    Body: { "company", "information_dt", "route_distance", "fuel_used" }
    """
    company, err = require_company(request)
    if err:
        return err

    vehicle = _get_vehicle(company, vehicle_id)
    if not vehicle:
        return _not_found()

    if request.method == "POST":
        s = RouteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        route = s.save(vehicle=vehicle)
        return Response({"route": RouteSerializer(route).data}, status=201)

    qs = Route.objects.filter(vehicle=vehicle).order_by("-information_dt", "-id")
    return Response({"items": RouteSerializer(qs, many=True).data})
