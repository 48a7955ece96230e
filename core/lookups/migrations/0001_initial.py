from decimal import Decimal

from django.db import migrations, models


def _lookup(name, db_table, extra=()):
    return migrations.CreateModel(
        name=name,
        fields=[
            ("id", models.AutoField(primary_key=True, serialize=False)),
            ("name", models.CharField(max_length=120, unique=True)),
            *extra,
        ],
        options={"db_table": db_table, "ordering": ["id"], "abstract": False},
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        _lookup("Education", "education"),
        _lookup("Gender", "gender"),
        _lookup("ManagerialPosition", "managerial_position", extra=[("is_manager", models.BooleanField(default=False))]),
        _lookup("Position", "position"),
        _lookup("MaritalStatus", "marital_status"),
        _lookup(
            "VehicleType",
            "vehicle_type",
            extra=[("emission_factor", models.DecimalField(decimal_places=3, default=Decimal("0"), max_digits=6))],
        ),
        _lookup("Utility", "utility"),
    ]
