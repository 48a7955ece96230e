from rest_framework import serializers

from core.employees.serializers import DATE_INPUT_FORMATS
from core.lookups.models import Utility
from core.utilities.models import Bill


class BillSerializer(serializers.ModelSerializer):
    utility_id = serializers.IntegerField()
    utility = serializers.CharField(source="utility.name", read_only=True)
    bill_date = serializers.DateField(input_formats=DATE_INPUT_FORMATS)
    consumption_amt = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=0)
    value_amt = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)

    class Meta:
        model = Bill
        fields = ["id", "company", "utility_id", "utility", "bill_date", "consumption_amt", "value_amt"]
        read_only_fields = ["id", "company"]

    def validate_utility_id(self, value):
        if not Utility.objects.filter(id=value).exists():
            raise serializers.ValidationError(f"Unknown Utility id {value}")
        return value
