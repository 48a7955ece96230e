from django.db import models
from django.utils import timezone


class Vehicle(models.Model):
    id = models.BigAutoField(primary_key=True)

    registration_number = models.CharField(max_length=32)
    vehicle_type = models.ForeignKey("lookups.VehicleType", on_delete=models.PROTECT, related_name="+")
    production_date = models.DateField(null=True, blank=True)
    purchase_date = models.DateField(null=True, blank=True)
    sale_date = models.DateField(null=True, blank=True)

    company = models.CharField(max_length=120, db_index=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "fleet"
        ordering = ["registration_number"]

    def __str__(self) -> str:
        return self.registration_number

    def in_service(self, year: int) -> bool:
        if not self.purchase_date or self.purchase_date.year > year:
            return False
        return self.sale_date is None or self.sale_date.year >= year


class FleetUpdateLog(models.Model):
    """
    Append-only field history of vehicles. NULL values are stored as "".
    """

    id = models.BigAutoField(primary_key=True)
    vehicle_id = models.BigIntegerField(db_index=True)
    changed_field = models.CharField(max_length=64)
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)
    updated_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "fleet_update_log"


class Route(models.Model):
    id = models.BigAutoField(primary_key=True)
    vehicle = models.ForeignKey(Vehicle, on_delete=models.CASCADE, related_name="routes")
    information_dt = models.DateTimeField(db_index=True)
    route_distance = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    fuel_used = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)

    class Meta:
        db_table = "routes"
        ordering = ["-information_dt", "-id"]
