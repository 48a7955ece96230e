from __future__ import annotations

from typing import Any, Callable, Iterable

from core.reports.cohorts import CohortRow, employee_status


def densify(
    rows: Iterable[CohortRow],
    years: Iterable[int],
    categories: Iterable[str],
    attr: str = "percentage",
    default: Any = 0,
) -> dict[int, dict[str, Any]]:
    """
    {year: {category: value}} with every year/category pair present.
    Rows outside the declared years or categories are ignored.
    """
    categories = list(categories)
    out = {year: {category: default for category in categories} for year in years}
    for row in rows:
        bucket = out.get(row.year)
        if bucket is not None and row.category in bucket:
            bucket[row.category] = getattr(row, attr)
    return out


def per_employee(
    employees: Iterable,
    years: Iterable[int],
    prefix: str,
    value_for: Callable[[Any, int], Any],
) -> list[dict[str, Any]]:
    """
    One row per employee with a `<prefix>_<year>` column per year. Employees
    without a value in any year are left out.
    """
    years = list(years)
    out = []
    for employee in employees:
        values = {f"{prefix}_{year}": value_for(employee, year) for year in years}
        if all(v is None for v in values.values()):
            continue
        out.append({
            "employee_id": employee.id,
            "full_name": employee.full_name,
            "employment_date": employee.employment_date.isoformat(),
            "status": employee_status(employee),
            **values,
        })
    return out
