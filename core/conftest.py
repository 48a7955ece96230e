from datetime import date
from types import SimpleNamespace

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.employees.models import Employee
from core.iam.models import UserProfile
from core.lookups.models import (
    Education,
    Gender,
    ManagerialPosition,
    MaritalStatus,
    Position,
    Utility,
    VehicleType,
)

User = get_user_model()


@pytest.fixture
def user(db):
    u = User.objects.create_user(username="owner@acme.com", email="owner@acme.com", password="pass12345")
    UserProfile.objects.create(user=u, company="acme")
    return u


@pytest.fixture
def auth_client(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")
    return client


@pytest.fixture
def lookups(db):
    call_command("seed_lookups", verbosity=0)
    return SimpleNamespace(
        primary=Education.objects.get(name="Primary"),
        bachelors=Education.objects.get(name="Bachelor's"),
        masters=Education.objects.get(name="Master's"),
        male=Gender.objects.get(name="Male"),
        female=Gender.objects.get(name="Female"),
        manager=ManagerialPosition.objects.get(name="Yes"),
        staff=ManagerialPosition.objects.get(name="No"),
        worker=Position.objects.get(name="Worker"),
        single=MaritalStatus.objects.get(name="Single"),
        diesel=VehicleType.objects.get(name="Diesel"),
        petrol=VehicleType.objects.get(name="Petrol"),
        electricity=Utility.objects.get(name="Electricity"),
        water=Utility.objects.get(name="Water"),
    )


@pytest.fixture
def make_employee(lookups):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "full_name": f"Employee {n}",
            "employee_mail": f"employee{n}@acme.com",
            "birth_date": date(1990, 1, 1),
            "employment_date": date(2019, 6, 1),
            "position": lookups.worker,
            "education": lookups.bachelors,
            "marital_status": lookups.single,
            "gender": lookups.male,
            "managerial_position": lookups.staff,
            "company": "acme",
        }
        fields.update(overrides)
        return Employee.objects.create(**fields)

    return _make


@pytest.fixture
def employee_payload(lookups):
    return {
        "company": "acme",
        "full_name": "Jane Doe",
        "employee_mail": "jane.doe@acme.com",
        "birth_date": "1990-04-12",
        "employment_date": "2019-06-01",
        "position_id": lookups.worker.id,
        "education_id": lookups.bachelors.id,
        "marital_status_id": lookups.single.id,
        "gender_id": lookups.female.id,
        "managerial_position_id": lookups.staff.id,
    }
