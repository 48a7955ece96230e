from datetime import date, datetime

import pytest
from django.utils import timezone

from core.employees.models import Employee, EmployeeUpdateLog


@pytest.mark.django_db
def test_create_employee(auth_client, employee_payload):
    r = auth_client.post("/v1/employees", employee_payload, format="json")
    assert r.status_code == 201

    body = r.json()["employee"]
    assert body["full_name"] == "Jane Doe"
    assert body["company"] == "acme"
    assert body["termination_date"] is None
    assert Employee.objects.filter(id=body["employee_id"]).exists()


@pytest.mark.django_db
def test_create_employee_with_company_in_query_string(auth_client, employee_payload):
    del employee_payload["company"]
    r = auth_client.post("/v1/employees?company=acme", employee_payload, format="json")

    assert r.status_code == 201
    assert r.json()["employee"]["company"] == "acme"


@pytest.mark.django_db
def test_create_employee_lists_missing_fields(auth_client, lookups):
    r = auth_client.post("/v1/employees", {"company": "acme", "full_name": "Jane Doe"}, format="json")
    assert r.status_code == 400

    error = r.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"].startswith("Missing required fields: employee_mail, birth_date")
    assert "gender_id" in error["details"]["missing"]
    assert "full_name" not in error["details"]["missing"]


@pytest.mark.django_db
def test_create_employee_duplicate_email(auth_client, employee_payload):
    auth_client.post("/v1/employees", employee_payload, format="json")

    employee_payload["full_name"] = "Jane Other"
    employee_payload["employee_mail"] = "JANE.DOE@acme.com"
    r = auth_client.post("/v1/employees", employee_payload, format="json")

    assert r.status_code == 409
    body = r.json()
    assert body["error"]["code"] == "EMAIL_EXISTS"
    assert body["existing"]["full_name"] == "Jane Doe"
    assert len(body["suggestions"]) == 4
    assert "jane.other@acme.com" in body["suggestions"]


@pytest.mark.django_db
def test_create_employee_duplicate_person(auth_client, employee_payload):
    auth_client.post("/v1/employees", employee_payload, format="json")

    employee_payload["employee_mail"] = "jd@acme.com"
    r = auth_client.post("/v1/employees", employee_payload, format="json")

    assert r.status_code == 409
    assert r.json()["error"]["code"] == "DUPLICATE_PERSON"
    assert Employee.objects.count() == 1


@pytest.mark.django_db
def test_create_employee_rejects_unknown_lookup(auth_client, employee_payload):
    employee_payload["education_id"] = 9999
    r = auth_client.post("/v1/employees", employee_payload, format="json")
    assert r.status_code == 400
    assert "education_id" in r.json()["error"]["details"]


@pytest.mark.django_db
def test_list_is_scoped_and_ordered(auth_client, make_employee):
    make_employee(full_name="Zoe")
    make_employee(full_name="Adam")
    make_employee(full_name="Other Co", company="globex")

    r = auth_client.get("/v1/employees?company=acme")
    assert r.status_code == 200
    assert [e["full_name"] for e in r.json()["items"]] == ["Adam", "Zoe"]


@pytest.mark.django_db
def test_get_single_employee_by_id(auth_client, make_employee):
    emp = make_employee()
    r = auth_client.get(f"/v1/employees?company=acme&id={emp.id}")
    assert r.json()["employee"]["employee_id"] == emp.id

    r = auth_client.get("/v1/employees?company=acme&id=99999")
    assert r.status_code == 404


@pytest.mark.django_db
def test_malformed_id_is_rejected(auth_client, make_employee):
    make_employee()
    r = auth_client.get("/v1/employees?company=acme&id=abc")

    assert r.status_code == 400
    error = r.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "id" in error["details"]


@pytest.mark.django_db
def test_other_company_employee_is_not_visible(auth_client, make_employee):
    emp = make_employee(company="globex")
    r = auth_client.get(f"/v1/employees/{emp.id}?company=acme")
    assert r.status_code == 404


@pytest.mark.django_db
def test_update_logs_changed_fields(auth_client, make_employee, lookups):
    emp = make_employee()
    before = emp.updated_at

    r = auth_client.patch(
        f"/v1/employees/{emp.id}",
        {"company": "acme", "education_id": lookups.masters.id, "full_name": emp.full_name},
        format="json",
    )
    assert r.status_code == 200
    assert r.json()["employee"]["education_id"] == lookups.masters.id

    logs = list(EmployeeUpdateLog.objects.filter(employee_id=emp.id))
    assert len(logs) == 1
    assert logs[0].changed_field == "education_id"
    assert logs[0].old_value == str(lookups.bachelors.id)
    assert logs[0].new_value == str(lookups.masters.id)

    emp.refresh_from_db()
    assert emp.updated_at > before


@pytest.mark.django_db
def test_update_without_changes_writes_no_log(auth_client, make_employee):
    emp = make_employee()
    r = auth_client.put(
        f"/v1/employees/{emp.id}",
        {"company": "acme", "full_name": emp.full_name, "termination_date": ""},
        format="json",
    )
    assert r.status_code == 200
    assert EmployeeUpdateLog.objects.count() == 0


@pytest.mark.django_db
def test_update_records_date_and_null_changes(auth_client, make_employee):
    emp = make_employee()
    auth_client.patch(
        f"/v1/employees/{emp.id}", {"company": "acme", "termination_date": "2024-01-31"}, format="json"
    )
    auth_client.patch(f"/v1/employees/{emp.id}", {"company": "acme", "termination_date": None}, format="json")

    values = list(
        EmployeeUpdateLog.objects.filter(employee_id=emp.id)
        .order_by("id")
        .values_list("old_value", "new_value")
    )
    assert values == [(None, "2024-01-31"), ("2024-01-31", None)]


@pytest.mark.django_db
def test_update_rejects_leave_ending_before_start(auth_client, make_employee):
    emp = make_employee(leave_date_start=date(2024, 3, 1))
    r = auth_client.patch(
        f"/v1/employees/{emp.id}", {"company": "acme", "leave_date_end": "2024-02-01"}, format="json"
    )
    assert r.status_code == 400
    assert EmployeeUpdateLog.objects.count() == 0


@pytest.mark.django_db
def test_update_rejects_taken_email(auth_client, make_employee):
    make_employee(employee_mail="taken@acme.com")
    emp = make_employee()
    r = auth_client.patch(
        f"/v1/employees/{emp.id}", {"company": "acme", "employee_mail": "Taken@acme.com"}, format="json"
    )
    assert r.status_code == 409


@pytest.mark.django_db
def test_delete_keeps_change_log(auth_client, make_employee, lookups):
    emp = make_employee()
    auth_client.patch(f"/v1/employees/{emp.id}", {"company": "acme", "gender_id": lookups.female.id}, format="json")

    r = auth_client.delete(f"/v1/employees/{emp.id}?company=acme")
    assert r.status_code == 200
    assert not Employee.objects.filter(id=emp.id).exists()
    assert EmployeeUpdateLog.objects.filter(employee_id=emp.id).count() == 1


@pytest.mark.django_db
def test_changes_are_listed_newest_first(auth_client, make_employee):
    emp = make_employee()
    EmployeeUpdateLog.objects.create(
        employee_id=emp.id, changed_field="full_name", old_value="a", new_value="b",
        updated_at=timezone.make_aware(datetime(2022, 1, 1)),
    )
    EmployeeUpdateLog.objects.create(
        employee_id=emp.id, changed_field="full_name", old_value="b", new_value="c",
        updated_at=timezone.make_aware(datetime(2024, 1, 1)),
    )

    r = auth_client.get(f"/v1/employees/{emp.id}/changes?company=acme")
    assert r.status_code == 200
    assert [c["new_value"] for c in r.json()["items"]] == ["c", "b"]


@pytest.mark.django_db
def test_list_by_education_in_past_year(auth_client, make_employee, lookups):
    emp = make_employee(education=lookups.masters)
    make_employee(education=lookups.masters)
    EmployeeUpdateLog.objects.create(
        employee_id=emp.id,
        changed_field="education_id",
        old_value=str(lookups.bachelors.id),
        new_value=str(lookups.masters.id),
        updated_at=timezone.make_aware(datetime(2023, 2, 10)),
    )

    r = auth_client.get("/v1/employees?company=acme&year=2022&education=Bachelor's")
    assert [e["employee_id"] for e in r.json()["items"]] == [emp.id]

    r = auth_client.get("/v1/employees?company=acme&year=2023&education=Bachelor's")
    assert r.json()["items"] == []
