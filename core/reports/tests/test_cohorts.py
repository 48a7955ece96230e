from datetime import date, datetime

import pytest
from django.utils import timezone

from core.employees.models import EmployeeUpdateLog
from core.reports.cohorts import (
    CohortRow,
    Workforce,
    age_at_year_end,
    age_band,
    distribution_rows,
    fluctuation_rows,
    is_active_in,
    percentage,
    report_years,
)
from core.reports.formatters import densify
from core.lookups.models import Education, label_map


def test_report_years_window():
    assert report_years(date(2026, 10, 19)) == [2023, 2024, 2025, 2026]


def test_percentage_rounds_half_up():
    assert percentage(1, 3) == 33.3
    assert percentage(2, 3) == 66.7
    assert percentage(1, 8) == 12.5
    assert percentage(1, 16) == 6.3
    assert percentage(0, 0) == 0


@pytest.mark.parametrize("counts", [[1, 1, 1], [2, 1], [1] * 7, [5, 3, 3]])
def test_percentages_sum_to_about_100(counts):
    total = sum(counts)
    assert 99.9 <= round(sum(percentage(n, total) for n in counts), 6) <= 100.1


def test_age_and_bands():
    assert age_at_year_end(date(1994, 12, 31), 2023) == 29
    assert age_at_year_end(date(1993, 12, 31), 2023) == 30
    assert age_band(29) == "Under 30"
    assert age_band(30) == "30-50"
    assert age_band(49) == "30-50"
    assert age_band(50) == "Over 50"


def test_densify_fills_every_pair():
    rows = [CohortRow(2023, "A", 2, 100.0), CohortRow(2024, "B", 1, 50.0), CohortRow(2030, "A", 1, 1.0)]
    out = densify(rows, [2023, 2024], ["A", "B", "C"])

    assert out == {
        2023: {"A": 100.0, "B": 0, "C": 0},
        2024: {"A": 0, "B": 50.0, "C": 0},
    }
    assert densify(rows, [2023], ["A"], attr="count") == {2023: {"A": 2}}


@pytest.mark.django_db
def test_active_window(make_employee):
    emp = make_employee(employment_date=date(2020, 3, 1), termination_date=date(2022, 5, 1))
    assert not is_active_in(emp, 2019)
    assert is_active_in(emp, 2020)
    assert is_active_in(emp, 2022)
    assert not is_active_in(emp, 2023)


@pytest.mark.django_db
def test_education_reconstructed_per_year(make_employee, lookups):
    emp = make_employee(employment_date=date(2019, 6, 1), education=lookups.masters)
    EmployeeUpdateLog.objects.create(
        employee_id=emp.id,
        changed_field="education_id",
        old_value=str(lookups.bachelors.id),
        new_value=str(lookups.masters.id),
        updated_at=timezone.make_aware(datetime(2023, 2, 10)),
    )

    rows = distribution_rows(Workforce.load("acme"), [2021, 2022, 2023, 2024], "education_id", label_map(Education))

    assert [(r.year, r.category, r.count, r.percentage) for r in rows] == [
        (2021, "Bachelor's", 1, 100.0),
        (2022, "Bachelor's", 1, 100.0),
        (2023, "Master's", 1, 100.0),
        (2024, "Master's", 1, 100.0),
    ]


@pytest.mark.django_db
def test_unknown_category_value_is_excluded(make_employee):
    emp = make_employee()
    make_employee()
    EmployeeUpdateLog.objects.create(
        employee_id=emp.id,
        changed_field="education_id",
        old_value="999",
        new_value=str(emp.education_id),
        updated_at=timezone.make_aware(datetime(2024, 1, 10)),
    )

    rows = distribution_rows(Workforce.load("acme"), [2023], "education_id", label_map(Education))
    assert [(r.category, r.count, r.percentage) for r in rows] == [("Bachelor's", 1, 100.0)]


@pytest.mark.django_db
def test_terminated_employee_leaves_cohorts(make_employee, lookups):
    make_employee(birth_date=date(1990, 1, 1), employment_date=date(2019, 1, 1), termination_date=date(2022, 5, 1))
    make_employee(birth_date=date(1960, 1, 1), employment_date=date(2023, 3, 1), managerial_position=lookups.manager)

    rows = fluctuation_rows(Workforce.load("acme"), [2021, 2022, 2023, 2024], {str(lookups.manager.id)})
    by_year = {}
    for r in rows:
        by_year.setdefault(r.year, {})[r.category] = (r.count, r.percentage)

    assert by_year[2021] == {"30-50": (1, 100.0)}
    assert by_year[2022] == {"30-50": (1, 100.0), "Left Company": (1, 100.0)}
    assert by_year[2023] == {
        "Over 50": (1, 100.0),
        "Managers Over 50": (1, 100.0),
        "Joined Company": (1, 100.0),
    }
    assert by_year[2024] == {"Over 50": (1, 100.0), "Managers Over 50": (1, 100.0)}


@pytest.mark.django_db
def test_reports_are_idempotent(make_employee, lookups):
    make_employee()
    make_employee(education=lookups.masters)
    labels = label_map(Education)

    first = distribution_rows(Workforce.load("acme"), [2023, 2024], "education_id", labels)
    second = distribution_rows(Workforce.load("acme"), [2023, 2024], "education_id", labels)
    assert first == second
