from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("lookups", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Bill",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("company", models.CharField(db_index=True, max_length=120)),
                ("bill_date", models.DateField(db_index=True)),
                ("consumption_amt", models.DecimalField(decimal_places=3, max_digits=14)),
                ("value_amt", models.DecimalField(decimal_places=2, max_digits=14)),
                ("utility", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="lookups.utility")),
            ],
            options={"db_table": "bills", "ordering": ["-bill_date", "-id"]},
        ),
    ]
