from decimal import Decimal

from django.core.management.base import BaseCommand

from core.lookups.models import (
    Education,
    Gender,
    ManagerialPosition,
    MaritalStatus,
    Position,
    Utility,
    VehicleType,
)

DEFAULTS = {
    Education: ["Primary", "Secondary", "Bachelor's", "Master's", "Doctorate"],
    Gender: ["Male", "Female"],
    Position: ["Worker", "Specialist", "Team Lead", "Director"],
    MaritalStatus: ["Single", "Married", "Divorced", "Widowed"],
    Utility: ["Electricity", "Water", "Gas"],
}

MANAGERIAL = [("Yes", True), ("No", False)]

# kg CO2 per litre
VEHICLE_TYPES = [
    ("Diesel", Decimal("2.68")),
    ("Petrol", Decimal("2.31")),
    ("LNG", Decimal("1.89")),
    ("Electric", Decimal("0")),
]


class Command(BaseCommand):
    help = "Idempotently create the default lookup catalogue (educations, genders, vehicle types, ...)"

    def handle(self, *args, **options):
        created = 0

        for model, names in DEFAULTS.items():
            for name in names:
                _, was_created = model.objects.get_or_create(name=name)
                created += int(was_created)

        for name, is_manager in MANAGERIAL:
            _, was_created = ManagerialPosition.objects.get_or_create(name=name, defaults={"is_manager": is_manager})
            created += int(was_created)

        for name, factor in VEHICLE_TYPES:
            _, was_created = VehicleType.objects.get_or_create(name=name, defaults={"emission_factor": factor})
            created += int(was_created)

        self.stdout.write(self.style.SUCCESS(f"Lookups ready ({created} created)"))
