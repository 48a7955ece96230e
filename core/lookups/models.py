from decimal import Decimal

from django.db import models


class Lookup(models.Model):
    """
    Shared shape of the category tables: integer id plus a unique label.
    Report categories are these labels.
    """

    id = models.AutoField(primary_key=True)
    name = models.CharField(max_length=120, unique=True)

    class Meta:
        abstract = True
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name


class Education(Lookup):
    class Meta(Lookup.Meta):
        db_table = "education"


class Gender(Lookup):
    class Meta(Lookup.Meta):
        db_table = "gender"


class ManagerialPosition(Lookup):
    is_manager = models.BooleanField(default=False)

    class Meta(Lookup.Meta):
        db_table = "managerial_position"


class Position(Lookup):
    class Meta(Lookup.Meta):
        db_table = "position"


class MaritalStatus(Lookup):
    class Meta(Lookup.Meta):
        db_table = "marital_status"


class VehicleType(Lookup):
    # kg CO2 per litre of fuel
    emission_factor = models.DecimalField(max_digits=6, decimal_places=3, default=Decimal("0"))

    class Meta(Lookup.Meta):
        db_table = "vehicle_type"


class Utility(Lookup):
    class Meta(Lookup.Meta):
        db_table = "utility"


def label_map(model) -> dict[str, str]:
    """
    {"<id>": "<label>"}; keys are text because change-log values are text.
    """
    return {str(pk): name for pk, name in model.objects.values_list("id", "name")}
