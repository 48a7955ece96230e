from django.db import models
from django.utils import timezone


class Employee(models.Model):
    id = models.BigAutoField(primary_key=True)

    full_name = models.CharField(max_length=200)
    employee_mail = models.EmailField(max_length=254)
    birth_date = models.DateField()
    employment_date = models.DateField()
    termination_date = models.DateField(null=True, blank=True)
    leave_date_start = models.DateField(null=True, blank=True)
    leave_date_end = models.DateField(null=True, blank=True)

    position = models.ForeignKey("lookups.Position", on_delete=models.PROTECT, null=True, blank=True, related_name="+")
    education = models.ForeignKey("lookups.Education", on_delete=models.PROTECT, null=True, blank=True, related_name="+")
    marital_status = models.ForeignKey("lookups.MaritalStatus", on_delete=models.PROTECT, null=True, blank=True, related_name="+")
    gender = models.ForeignKey("lookups.Gender", on_delete=models.PROTECT, null=True, blank=True, related_name="+")
    managerial_position = models.ForeignKey(
        "lookups.ManagerialPosition", on_delete=models.PROTECT, null=True, blank=True, related_name="+"
    )

    company = models.CharField(max_length=120, db_index=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "employee"
        ordering = ["full_name"]

    def __str__(self) -> str:
        return self.full_name


class EmployeeUpdateLog(models.Model):
    """
    Append-only field history. One row per changed field per update.
    `employee_id` is deliberately not a foreign key: rows outlive the
    employee they describe.
    """

    id = models.BigAutoField(primary_key=True)
    employee_id = models.BigIntegerField(db_index=True)
    changed_field = models.CharField(max_length=64, db_index=True)
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)
    updated_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "employee_update_log"
