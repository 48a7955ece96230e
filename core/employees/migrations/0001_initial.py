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
            name="Employee",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("full_name", models.CharField(max_length=200)),
                ("employee_mail", models.EmailField(max_length=254)),
                ("birth_date", models.DateField()),
                ("employment_date", models.DateField()),
                ("termination_date", models.DateField(blank=True, null=True)),
                ("leave_date_start", models.DateField(blank=True, null=True)),
                ("leave_date_end", models.DateField(blank=True, null=True)),
                ("company", models.CharField(db_index=True, max_length=120)),
                ("created_at", models.DateTimeField(default=timezone.now)),
                ("updated_at", models.DateTimeField(default=timezone.now)),
                ("position", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="+", to="lookups.position")),
                ("education", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="+", to="lookups.education")),
                ("marital_status", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="+", to="lookups.maritalstatus")),
                ("gender", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="+", to="lookups.gender")),
                ("managerial_position", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="+", to="lookups.managerialposition")),
            ],
            options={"db_table": "employee", "ordering": ["full_name"]},
        ),
        migrations.CreateModel(
            name="EmployeeUpdateLog",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("employee_id", models.BigIntegerField(db_index=True)),
                ("changed_field", models.CharField(db_index=True, max_length=64)),
                ("old_value", models.TextField(blank=True, null=True)),
                ("new_value", models.TextField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(db_index=True, default=timezone.now)),
            ],
            options={"db_table": "employee_update_log"},
        ),
    ]
