from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.errors import error_response
from core.lookups.models import (
    Education,
    Gender,
    ManagerialPosition,
    MaritalStatus,
    Position,
    Utility,
    VehicleType,
)

LOOKUPS = {
    "educations": Education,
    "genders": Gender,
    "managerial-positions": ManagerialPosition,
    "positions": Position,
    "marital-statuses": MaritalStatus,
    "vehicle-types": VehicleType,
    "utilities": Utility,
}


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def lookup_list(request, kind: str):
    """
    GET /v1/lookups/{kind}
    kind: educations | genders | managerial-positions | positions |
          marital-statuses | vehicle-types | utilities
    """
    model = LOOKUPS.get(kind)
    if model is None:
        return error_response("NOT_FOUND", f"Unknown lookup: {kind}", 404)

    items = []
    for obj in model.objects.order_by("id"):
        item = {"id": obj.id, "name": obj.name}
        if model is ManagerialPosition:
            item["is_manager"] = obj.is_manager
        if model is VehicleType:
            item["emission_factor"] = float(obj.emission_factor)
        items.append(item)

    return Response(items)
