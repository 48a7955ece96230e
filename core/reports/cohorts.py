"""
Year-by-year cohorts of a company's workforce.

An employee is counted in year Y when hired on or before Y and not
terminated before Y. Category fields (education, gender, managerial
position) are the values they held at the end of Y, recovered from the
change log.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Iterator

from django.conf import settings
from django.utils import timezone

from core.common.history import ChangeHistory
from core.employees.models import Employee, EmployeeUpdateLog

RESOLVED_FIELDS = ("education_id", "gender_id", "managerial_position_id")

AGE_BANDS = ["Under 30", "30-50", "Over 50"]
MANAGER_BANDS = [f"Managers {band}" for band in AGE_BANDS]
LEFT_COMPANY = "Left Company"
JOINED_COMPANY = "Joined Company"
FLUCTUATION_CATEGORIES = AGE_BANDS + MANAGER_BANDS + [LEFT_COMPANY, JOINED_COMPANY]


@dataclass(frozen=True)
class CohortRow:
    year: int
    category: str
    count: int
    percentage: float


@dataclass(frozen=True)
class LeaveStats:
    avg_duration: float
    leave_count: int
    ongoing_leaves: int


def report_years(today: date | None = None) -> list[int]:
    current = (today or timezone.localdate()).year
    span = max(1, int(getattr(settings, "ESG_REPORT_WINDOW_YEARS", 4)))
    return list(range(current - span + 1, current + 1))


def percentage(count: int, total: int) -> float:
    if not total:
        return 0.0
    value = Decimal(count) * 100 / Decimal(total)
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def age_at_year_end(birth_date: date, year: int) -> int:
    end = date(year, 12, 31)
    return end.year - birth_date.year - ((end.month, end.day) < (birth_date.month, birth_date.day))


def age_band(age: int) -> str:
    if age < 30:
        return "Under 30"
    if age < 50:
        return "30-50"
    return "Over 50"


def leave_duration(employee: Employee, today: date) -> int:
    end = employee.leave_date_end or today
    return (end - employee.leave_date_start).days


def is_active_in(employee: Employee, year: int) -> bool:
    if employee.employment_date.year > year:
        return False
    return employee.termination_date is None or employee.termination_date.year >= year


def employee_status(employee: Employee) -> str:
    return employee.termination_date.isoformat() if employee.termination_date else "Active"


class Workforce:
    """
    One company's employees plus the history of their category fields.
    Loaded once per request; everything else is computed in memory.
    """

    def __init__(self, company: str, employees: list[Employee], history: ChangeHistory):
        self.company = company
        self.employees = employees
        self.history = history

    @classmethod
    def load(cls, company: str) -> "Workforce":
        employees = list(Employee.objects.filter(company__iexact=company).order_by("full_name", "id"))
        history = ChangeHistory.load(EmployeeUpdateLog, [e.id for e in employees], RESOLVED_FIELDS)
        return cls(company, employees, history)

    def active(self, year: int) -> Iterator[Employee]:
        return (e for e in self.employees if is_active_in(e, year))

    def resolve(self, employee: Employee, field: str, year: int) -> str | None:
        return self.history.resolve(employee.id, field, getattr(employee, field), year)

    def label(self, employee: Employee, field: str, year: int, labels: dict[str, str]) -> str | None:
        value = self.resolve(employee, field, year)
        if value is None:
            return None
        return labels.get(str(value).strip())

    def is_manager(self, employee: Employee, year: int, manager_ids: set[str]) -> bool:
        value = self.resolve(employee, "managerial_position_id", year)
        return value is not None and str(value).strip() in manager_ids

    def members(self, year: int, field: str, labels: dict[str, str], category: str) -> list[Employee]:
        return [e for e in self.active(year) if self.label(e, field, year, labels) == category]

    def fluctuation_categories(self, employee: Employee, year: int, manager_ids: set[str]) -> list[str]:
        band = age_band(age_at_year_end(employee.birth_date, year))
        out = [band]
        if self.is_manager(employee, year, manager_ids):
            out.append(f"Managers {band}")
        if employee.termination_date and employee.termination_date.year == year:
            out.append(LEFT_COMPANY)
        if employee.employment_date.year == year:
            out.append(JOINED_COMPANY)
        return out


def _rows(counts: Counter, totals: Counter) -> list[CohortRow]:
    return [
        CohortRow(year=year, category=category, count=n, percentage=percentage(n, totals[year]))
        for (year, category), n in sorted(counts.items())
    ]


def distribution_rows(workforce: Workforce, years: Iterable[int], field: str, labels: dict[str, str]) -> list[CohortRow]:
    """
    Share of employees per category label; the yearly total is the number
    of employees that could be categorised that year.
    """
    counts: Counter = Counter()
    totals: Counter = Counter()
    for year in years:
        for employee in workforce.active(year):
            label = workforce.label(employee, field, year, labels)
            if label is None:
                continue
            counts[(year, label)] += 1
            totals[year] += 1
    return _rows(counts, totals)


def gender_manager_rows(
    workforce: Workforce, years: Iterable[int], labels: dict[str, str], manager_ids: set[str]
) -> list[CohortRow]:
    """
    Managers per gender; percentage is the gender's share of all managers
    in the year.
    """
    counts: Counter = Counter()
    totals: Counter = Counter()
    for year in years:
        for employee in workforce.active(year):
            label = workforce.label(employee, "gender_id", year, labels)
            if label is None or not workforce.is_manager(employee, year, manager_ids):
                continue
            counts[(year, label)] += 1
            totals[year] += 1
    return _rows(counts, totals)


def fluctuation_rows(workforce: Workforce, years: Iterable[int], manager_ids: set[str]) -> list[CohortRow]:
    """
    Age bands, manager age bands, leavers and joiners; every percentage is
    relative to all employees active in the year.
    """
    counts: Counter = Counter()
    totals: Counter = Counter()
    for year in years:
        for employee in workforce.active(year):
            totals[year] += 1
            for category in workforce.fluctuation_categories(employee, year, manager_ids):
                counts[(year, category)] += 1
    return _rows(counts, totals)


def leave_stats(
    workforce: Workforce, years: Iterable[int], labels: dict[str, str], today: date | None = None
) -> dict[tuple[int, str], LeaveStats]:
    today = today or timezone.localdate()
    durations: dict[tuple[int, str], list[int]] = {}
    ongoing: Counter = Counter()
    for year in years:
        for employee in workforce.active(year):
            start = employee.leave_date_start
            if not start or start.year != year:
                continue
            label = workforce.label(employee, "gender_id", year, labels)
            if label is None:
                continue
            durations.setdefault((year, label), []).append(leave_duration(employee, today))
            if employee.leave_date_end is None:
                ongoing[(year, label)] += 1

    out = {}
    for key, items in durations.items():
        avg = Decimal(sum(items)) / Decimal(len(items))
        out[key] = LeaveStats(
            avg_duration=float(avg.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)),
            leave_count=len(items),
            ongoing_leaves=ongoing[key],
        )
    return out
