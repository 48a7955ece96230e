from django.db import migrations, models
import django.db.models.deletion
from django.utils import timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("lookups", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("registration_number", models.CharField(max_length=32)),
                ("production_date", models.DateField(blank=True, null=True)),
                ("purchase_date", models.DateField(blank=True, null=True)),
                ("sale_date", models.DateField(blank=True, null=True)),
                ("company", models.CharField(db_index=True, max_length=120)),
                ("created_at", models.DateTimeField(default=timezone.now)),
                ("updated_at", models.DateTimeField(default=timezone.now)),
                ("vehicle_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="lookups.vehicletype")),
            ],
            options={"db_table": "fleet", "ordering": ["registration_number"]},
        ),
        migrations.CreateModel(
            name="FleetUpdateLog",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("vehicle_id", models.BigIntegerField(db_index=True)),
                ("changed_field", models.CharField(max_length=64)),
                ("old_value", models.TextField(blank=True, null=True)),
                ("new_value", models.TextField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(db_index=True, default=timezone.now)),
            ],
            options={"db_table": "fleet_update_log"},
        ),
        migrations.CreateModel(
            name="Route",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("information_dt", models.DateTimeField(db_index=True)),
                ("route_distance", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("fuel_used", models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True)),
                ("vehicle", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="routes", to="fleet.vehicle")),
            ],
            options={"db_table": "routes", "ordering": ["-information_dt", "-id"]},
        ),
    ]
