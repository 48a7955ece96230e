import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.errors import missing_fields, missing_fields_response
from core.iam.permissions import require_company
from core.utilities.models import Bill
from core.utilities.serializers import BillSerializer

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["utility_id", "bill_date", "consumption_amt", "value_amt"]


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def bills(request):
    """
    GET /v1/bills?company=<name>
    POST /v1/bills
    Body: { "company", "utility_id", "bill_date", "consumption_amt", "value_amt" }
    """
    company, err = require_company(request)
    if err:
        return err

    if request.method == "POST":
        missing = missing_fields(request.data, REQUIRED_FIELDS)
        if missing:
            return missing_fields_response(missing)

        s = BillSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        bill = s.save(company=company)
        logger.info("bill created id=%s company=%s", bill.id, company)
        return Response({"bill": BillSerializer(bill).data}, status=201)

    qs = Bill.objects.select_related("utility").filter(company__iexact=company).order_by("-bill_date", "-id")
    return Response({"items": BillSerializer(qs, many=True).data})
