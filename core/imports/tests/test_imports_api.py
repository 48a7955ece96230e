import io
import json
from datetime import date, datetime

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from openpyxl import Workbook

from core.employees.models import Employee
from core.imports.mapping import (
    CoercionError,
    ColumnMapping,
    LookupResolver,
    convert,
    suggest_mapping,
    to_date,
    to_number,
)
from core.imports.parsing import read_csv

HEADER = ["Full Name", "Email", "Birth Date", "Employment Date", "Education", "Gender", "Manager"]

MAPPINGS = [
    {"excel_column": "Full Name", "db_column": "full_name", "data_type": "text"},
    {"excel_column": "Email", "db_column": "employee_mail", "data_type": "text"},
    {"excel_column": "Birth Date", "db_column": "birth_date", "data_type": "date"},
    {"excel_column": "Employment Date", "db_column": "employment_date", "data_type": "date"},
    {"excel_column": "Education", "db_column": "education_id", "data_type": "text"},
    {"excel_column": "Gender", "db_column": "gender_id", "data_type": "text"},
    {"excel_column": "Manager", "db_column": "managerial_position_id", "data_type": "boolean"},
]


def xlsx_upload(rows, name="employees.xlsx"):
    wb = Workbook()
    ws = wb.active
    ws.append(HEADER)
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return SimpleUploadedFile(
        name, buf.getvalue(), content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


def csv_upload(text, name="employees.csv"):
    return SimpleUploadedFile(name, text.encode("utf-8"), content_type="text/csv")


VALID_ROWS = [
    ["Ana Horvat", "ana@acme.com", datetime(1988, 4, 2), datetime(2020, 1, 6), "Master's", "Female", "Yes"],
    ["Ivo Kovac", "ivo@acme.com", 32874, "2021-09-01", "Bachelor's", "Male", "No"],
    ["Maja Babic", "maja@acme.com", "1995-11-30", date(2022, 3, 1), None, "female", None],
]


@pytest.mark.django_db
def test_preview_returns_columns_rows_and_suggestions(auth_client, lookups):
    r = auth_client.post(
        "/v1/imports/employees/preview", {"file": xlsx_upload(VALID_ROWS)}, format="multipart"
    )
    assert r.status_code == 200
    body = r.json()

    assert body["columns"] == HEADER
    assert body["total_rows"] == 3
    assert body["rows"][0]["Full Name"] == "Ana Horvat"
    assert body["rows"][0]["Birth Date"].startswith("1988-04-02")
    assert body["data_types"] == ["text", "date", "number", "boolean", "datetime"]
    assert {"name": "full_name", "type": "text", "required": True} in body["fields"]

    suggested = {m["excel_column"]: m["db_column"] for m in body["suggested_mapping"]}
    assert suggested == {
        "Full Name": "full_name",
        "Birth Date": "birth_date",
        "Employment Date": "employment_date",
        "Education": "education_id",
        "Gender": "gender_id",
    }


@pytest.mark.django_db
def test_preview_limits_rows(auth_client):
    text = "full_name\n" + "\n".join(f"person {i}" for i in range(8))
    body = auth_client.post("/v1/imports/employees/preview", {"file": csv_upload(text)}, format="multipart").json()
    assert len(body["rows"]) == 5
    assert body["total_rows"] == 8


@pytest.mark.django_db
def test_import_commits_valid_rows(auth_client, lookups):
    r = auth_client.post(
        "/v1/imports/employees",
        {"file": xlsx_upload(VALID_ROWS), "company": "acme", "mappings": json.dumps(MAPPINGS)},
        format="multipart",
    )
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Successfully imported 3 employees", "count": 3}

    ana = Employee.objects.get(employee_mail="ana@acme.com")
    assert ana.company == "acme"
    assert ana.birth_date == date(1988, 4, 2)
    assert ana.education_id == lookups.masters.id
    assert ana.managerial_position_id == lookups.manager.id

    ivo = Employee.objects.get(employee_mail="ivo@acme.com")
    assert ivo.birth_date == date(1990, 1, 1)
    assert ivo.managerial_position_id == lookups.staff.id

    maja = Employee.objects.get(employee_mail="maja@acme.com")
    assert maja.gender_id == lookups.female.id
    assert maja.education_id is None


@pytest.mark.django_db
def test_import_rolls_back_when_a_row_misses_required_field(auth_client, lookups):
    rows = VALID_ROWS + [[None, "ghost@acme.com", "1990-01-01", "2020-01-01", None, None, None]]
    r = auth_client.post(
        "/v1/imports/employees",
        {"file": xlsx_upload(rows), "company": "acme", "mappings": json.dumps(MAPPINGS)},
        format="multipart",
    )
    assert r.status_code == 400
    error = r.json()["error"]
    assert error["details"] == {"row": 5, "missing": ["full_name"]}
    assert "full_name" in error["message"]
    assert Employee.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.parametrize(
    "birth_date, education, field",
    [
        ("31/02/1990", None, "birth_date"),
        (99999999, None, "birth_date"),
        ("1990-01-01", "Infinity", "education_id"),
    ],
)
def test_import_rolls_back_on_bad_value(auth_client, lookups, birth_date, education, field):
    rows = VALID_ROWS + [["Bad Row", "bad@acme.com", birth_date, "2020-01-01", education, None, None]]
    r = auth_client.post(
        "/v1/imports/employees",
        {"file": xlsx_upload(rows), "company": "acme", "mappings": json.dumps(MAPPINGS)},
        format="multipart",
    )
    assert r.status_code == 400
    assert r.json()["error"]["details"] == {"row": 5, "field": field}
    assert Employee.objects.count() == 0


@pytest.mark.django_db
def test_import_requires_required_targets_mapped(auth_client, lookups):
    mappings = [m for m in MAPPINGS if m["db_column"] != "employment_date"]
    r = auth_client.post(
        "/v1/imports/employees",
        {"file": xlsx_upload(VALID_ROWS), "company": "acme", "mappings": json.dumps(mappings)},
        format="multipart",
    )
    assert r.status_code == 400
    assert r.json()["error"]["details"] == {"missing": ["employment_date"]}


@pytest.mark.django_db
def test_import_rejects_unknown_target(auth_client):
    mappings = MAPPINGS + [{"excel_column": "Email", "db_column": "salary", "data_type": "number"}]
    r = auth_client.post(
        "/v1/imports/employees",
        {"file": xlsx_upload(VALID_ROWS), "company": "acme", "mappings": json.dumps(mappings)},
        format="multipart",
    )
    assert r.status_code == 400
    assert "salary" in r.json()["error"]["message"]


@pytest.mark.django_db
def test_import_from_csv(auth_client, lookups):
    text = (
        "full_name,employee_mail,birth_date,employment_date,gender\n"
        f"Ana Horvat,ana@acme.com,1988-04-02,2020-01-06,{lookups.female.id}\n"
    )
    mappings = [
        {"excel_column": "full_name", "db_column": "full_name", "data_type": "text"},
        {"excel_column": "employee_mail", "db_column": "employee_mail", "data_type": "text"},
        {"excel_column": "birth_date", "db_column": "birth_date", "data_type": "date"},
        {"excel_column": "employment_date", "db_column": "employment_date", "data_type": "date"},
        {"excel_column": "gender", "db_column": "gender_id", "data_type": "number"},
    ]
    r = auth_client.post(
        "/v1/imports/employees",
        {"file": csv_upload(text), "company": "acme", "mappings": json.dumps(mappings)},
        format="multipart",
    )
    assert r.status_code == 200
    assert Employee.objects.get().gender_id == lookups.female.id


@pytest.mark.django_db
def test_import_requires_company(auth_client):
    r = auth_client.post(
        "/v1/imports/employees",
        {"file": csv_upload("a\n1\n"), "mappings": json.dumps(MAPPINGS)},
        format="multipart",
    )
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "COMPANY_REQUIRED"


def test_excel_serial_dates():
    assert to_date(32874) == date(1990, 1, 1)
    assert to_date(32874.75) == date(1990, 1, 1)
    assert to_date("45292") == date(2024, 1, 1)
    assert to_date(datetime(2024, 1, 1, 8, 30)) == date(2024, 1, 1)


def test_suggest_mapping_matches_normalised_names():
    out = suggest_mapping(["E-mail", "employee_mail", "Birth date", "Marital Status"])
    assert {m["db_column"] for m in out} == {"employee_mail", "birth_date", "marital_status_id"}


@pytest.mark.django_db
def test_managerial_position_accepts_flags_ids_and_labels(lookups):
    resolver = LookupResolver()
    mapping = ColumnMapping("Manager", "managerial_position_id", "text")
    assert convert(mapping, "Yes", resolver) == lookups.manager.id
    assert convert(mapping, "false", resolver) == lookups.staff.id
    assert convert(mapping, 1, resolver) == lookups.manager.id
    assert convert(mapping, "  ", resolver) is None


@pytest.mark.django_db
def test_csv_import_rejects_non_finite_number(auth_client, lookups):
    text = (
        "full_name,employee_mail,birth_date,employment_date,education\n"
        "Ana Horvat,ana@acme.com,1988-04-02,2020-01-06,Infinity\n"
    )
    mappings = [
        {"excel_column": "full_name", "db_column": "full_name", "data_type": "text"},
        {"excel_column": "employee_mail", "db_column": "employee_mail", "data_type": "text"},
        {"excel_column": "birth_date", "db_column": "birth_date", "data_type": "date"},
        {"excel_column": "employment_date", "db_column": "employment_date", "data_type": "date"},
        {"excel_column": "education", "db_column": "education_id", "data_type": "number"},
    ]
    r = auth_client.post(
        "/v1/imports/employees",
        {"file": csv_upload(text), "company": "acme", "mappings": json.dumps(mappings)},
        format="multipart",
    )
    assert r.status_code == 400
    assert r.json()["error"]["details"] == {"row": 2, "field": "education_id"}
    assert Employee.objects.count() == 0


@pytest.mark.parametrize("value", ["Infinity", "-inf", "NaN", float("inf")])
def test_to_number_rejects_non_finite_values(value):
    with pytest.raises(CoercionError):
        to_number(value)


@pytest.mark.parametrize("value", [99999999, "99999999", 1e12])
def test_to_date_rejects_out_of_range_serials(value):
    with pytest.raises(CoercionError):
        to_date(value)


def test_repeated_and_blank_headers_keep_their_own_columns():
    columns, rows = read_csv(b"Name,Name,,Email\nAna,Horvat,x,ana@acme.com\n")

    assert columns == ["Name", "Column 2", "Column 3", "Email"]
    assert rows == [{"Name": "Ana", "Column 2": "Horvat", "Column 3": "x", "Email": "ana@acme.com"}]
