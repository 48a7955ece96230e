from rest_framework import serializers

from core.employees.serializers import DATE_INPUT_FORMATS
from core.fleet.models import FleetUpdateLog, Route, Vehicle
from core.lookups.models import VehicleType

TRACKED_FIELDS = [
    "registration_number",
    "vehicle_type_id",
    "production_date",
    "purchase_date",
    "sale_date",
]

REQUIRED_FIELDS = ["registration_number", "vehicle_type_id"]

OPTIONAL_DATES = ["production_date", "purchase_date", "sale_date"]


class VehicleSerializer(serializers.ModelSerializer):
    vehicle_id = serializers.IntegerField(source="id", read_only=True)
    vehicle_type_id = serializers.IntegerField(read_only=True)
    vehicle_type = serializers.CharField(source="vehicle_type.name", read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            "vehicle_id",
            "registration_number",
            "vehicle_type_id",
            "vehicle_type",
            "production_date",
            "purchase_date",
            "sale_date",
            "company",
            "created_at",
            "updated_at",
        ]


class VehicleWriteSerializer(serializers.Serializer):
    registration_number = serializers.CharField(max_length=32)
    vehicle_type_id = serializers.IntegerField()
    production_date = serializers.DateField(required=False, allow_null=True, input_formats=DATE_INPUT_FORMATS)
    purchase_date = serializers.DateField(required=False, allow_null=True, input_formats=DATE_INPUT_FORMATS)
    sale_date = serializers.DateField(required=False, allow_null=True, input_formats=DATE_INPUT_FORMATS)

    def validate_registration_number(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Registration number is required")
        return value

    def validate_vehicle_type_id(self, value):
        if not VehicleType.objects.filter(id=value).exists():
            raise serializers.ValidationError(f"Unknown VehicleType id {value}")
        return value

    def validate(self, attrs):
        bought = attrs.get("purchase_date", getattr(self.instance, "purchase_date", None))
        sold = attrs.get("sale_date", getattr(self.instance, "sale_date", None))
        if bought and sold and sold < bought:
            raise serializers.ValidationError({"sale_date": "Sale is before purchase"})
        return attrs


class FleetUpdateLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = FleetUpdateLog
        fields = ["id", "vehicle_id", "changed_field", "old_value", "new_value", "updated_at"]


class RouteSerializer(serializers.ModelSerializer):
    vehicle_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Route
        fields = ["id", "vehicle_id", "information_dt", "route_distance", "fuel_used"]
        read_only_fields = ["id", "vehicle_id"]
