"""
Monthly utility consumption and cost, normalised per employee.
"""
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.utils import timezone

from core.common.params import parse_date
from core.employees.models import Employee
from core.lookups.models import Utility
from core.utilities.models import Bill

DEFAULT_START = date(2021, 1, 1)


def month_starts(start: date, end: date) -> list[date]:
    months = []
    current = start.replace(day=1)
    while current <= end:
        months.append(current)
        if current.month == 12:
            current = current.replace(year=current.year + 1, month=1)
        else:
            current = current.replace(month=current.month + 1)
    return months


def headcounts(company: str, months: list[date]) -> dict[date, int]:
    """
    Employees on the payroll at the first day of each month.
    """
    spans = list(
        Employee.objects.filter(company__iexact=company).values_list("employment_date", "termination_date")
    )
    return {
        month: sum(1 for hired, left in spans if hired <= month and (left is None or left > month))
        for month in months
    }


def utility_series(company: str, today: date | None = None) -> dict:
    today = today or timezone.localdate()
    start = parse_date(getattr(settings, "ESG_UTILITY_SERIES_START", None)) or DEFAULT_START
    months = month_starts(start, today)
    counts = headcounts(company, months)
    latest = counts[months[-1]] if months else 0

    totals = defaultdict(lambda: [Decimal("0"), Decimal("0")])
    bills = Bill.objects.filter(company__iexact=company, bill_date__gte=start.replace(day=1)).values_list(
        "utility_id", "bill_date", "consumption_amt", "value_amt"
    )
    for utility_id, bill_date, consumption, cost in bills:
        bucket = totals[(utility_id, bill_date.replace(day=1))]
        bucket[0] += consumption
        bucket[1] += cost

    series = {}
    for utility in Utility.objects.order_by("id"):
        points = []
        for month in months:
            consumption, cost = totals.get((utility.id, month), (Decimal("0"), Decimal("0")))
            heads = counts[month] or latest
            per_head = (cost / heads).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) if heads else Decimal("0")
            points.append({
                "month": month.strftime("%Y-%m"),
                "value": float(consumption),
                "cost": float(cost),
                "cost_per_employee": float(per_head),
            })
        series[utility.name.lower()] = points

    return {"series": series, "employee_count": latest}
