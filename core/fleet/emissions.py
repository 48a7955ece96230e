"""
Fleet size, CO2 emissions and distance per vehicle type and year.

Emissions of a route are `fuel_used * emission_factor` of its vehicle's
type; a route belongs to the year of its `information_dt`.
"""
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from core.fleet.models import Route, Vehicle
from core.lookups.models import VehicleType

CENT = Decimal("0.01")


def _round2(value: Decimal) -> float:
    return float(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def _year(ts) -> int:
    if timezone.is_aware(ts):
        ts = timezone.localtime(ts)
    return ts.year


def emissions_report(company: str, years: list[int]) -> dict:
    types = list(VehicleType.objects.order_by("id"))
    names = [t.name for t in types]
    type_names = {t.id: t.name for t in types}
    factors = {t.id: t.emission_factor for t in types}

    vehicles = list(Vehicle.objects.filter(company__iexact=company))
    fleet_data = []
    for year in years:
        row = {"year": year, **{name: 0 for name in names}}
        for vehicle in vehicles:
            if vehicle.in_service(year):
                row[type_names[vehicle.vehicle_type_id]] += 1
        fleet_data.append(row)

    emitted = defaultdict(Decimal)
    distance = defaultdict(Decimal)
    routes = Route.objects.filter(vehicle__company__iexact=company).values_list(
        "vehicle__vehicle_type_id", "information_dt", "fuel_used", "route_distance"
    )
    wanted = set(years)
    for type_id, ts, fuel, dist in routes:
        year = _year(ts)
        if year not in wanted:
            continue
        if fuel is not None:
            emitted[(year, type_id)] += fuel * factors[type_id]
        if dist is not None:
            distance[(year, type_id)] += dist

    emissions_data = {}
    yearly_emissions = []
    distance_data = {}
    for year in years:
        values = {t.name: _round2(emitted[(year, t.id)]) for t in types}
        emissions_data[year] = [{"name": name, "value": values[name]} for name in names]
        total = sum((Decimal(str(v)) for v in values.values()), Decimal("0"))
        yearly_emissions.append({"year": year, **values, "Total": _round2(total)})
        distance_data[year] = {t.name: _round2(distance[(year, t.id)]) for t in types}

    return {
        "years": years,
        "vehicle_types": names,
        "fleet_data": fleet_data,
        "emissions_data": emissions_data,
        "yearly_emissions": yearly_emissions,
        "distance_data": distance_data,
    }
