from django.db import models


class Bill(models.Model):
    id = models.BigAutoField(primary_key=True)
    company = models.CharField(max_length=120, db_index=True)
    utility = models.ForeignKey("lookups.Utility", on_delete=models.PROTECT, related_name="+")
    bill_date = models.DateField(db_index=True)
    consumption_amt = models.DecimalField(max_digits=14, decimal_places=3)
    value_amt = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = "bills"
        ordering = ["-bill_date", "-id"]
