from rest_framework import serializers

from core.employees.models import Employee, EmployeeUpdateLog
from core.lookups.models import Education, Gender, ManagerialPosition, MaritalStatus, Position

DATE_INPUT_FORMATS = ["iso-8601", "%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ"]

LOOKUP_FIELDS = {
    "position_id": Position,
    "education_id": Education,
    "marital_status_id": MaritalStatus,
    "gender_id": Gender,
    "managerial_position_id": ManagerialPosition,
}

# Fields written through the API; every one of them is change-logged on update.
TRACKED_FIELDS = [
    "full_name",
    "employee_mail",
    "birth_date",
    "employment_date",
    "termination_date",
    "leave_date_start",
    "leave_date_end",
    "position_id",
    "education_id",
    "marital_status_id",
    "gender_id",
    "managerial_position_id",
]

REQUIRED_FIELDS = [
    "full_name",
    "employee_mail",
    "birth_date",
    "employment_date",
    "position_id",
    "education_id",
    "marital_status_id",
    "gender_id",
    "managerial_position_id",
]

OPTIONAL_DATES = ["termination_date", "leave_date_start", "leave_date_end"]


class EmployeeSerializer(serializers.ModelSerializer):
    employee_id = serializers.IntegerField(source="id", read_only=True)
    position_id = serializers.IntegerField(read_only=True)
    education_id = serializers.IntegerField(read_only=True)
    marital_status_id = serializers.IntegerField(read_only=True)
    gender_id = serializers.IntegerField(read_only=True)
    managerial_position_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Employee
        fields = [
            "employee_id",
            "full_name",
            "employee_mail",
            "birth_date",
            "employment_date",
            "termination_date",
            "leave_date_start",
            "leave_date_end",
            "position_id",
            "education_id",
            "marital_status_id",
            "gender_id",
            "managerial_position_id",
            "company",
            "created_at",
            "updated_at",
        ]


class EmployeeWriteSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=200)
    employee_mail = serializers.EmailField()
    birth_date = serializers.DateField(input_formats=DATE_INPUT_FORMATS)
    employment_date = serializers.DateField(input_formats=DATE_INPUT_FORMATS)
    termination_date = serializers.DateField(required=False, allow_null=True, input_formats=DATE_INPUT_FORMATS)
    leave_date_start = serializers.DateField(required=False, allow_null=True, input_formats=DATE_INPUT_FORMATS)
    leave_date_end = serializers.DateField(required=False, allow_null=True, input_formats=DATE_INPUT_FORMATS)
    position_id = serializers.IntegerField(allow_null=True)
    education_id = serializers.IntegerField(allow_null=True)
    marital_status_id = serializers.IntegerField(allow_null=True)
    gender_id = serializers.IntegerField(allow_null=True)
    managerial_position_id = serializers.IntegerField(allow_null=True)

    def validate(self, attrs):
        for field, model in LOOKUP_FIELDS.items():
            value = attrs.get(field)
            if value is not None and not model.objects.filter(id=value).exists():
                raise serializers.ValidationError({field: f"Unknown {model.__name__} id {value}"})

        if "full_name" in attrs:
            attrs["full_name"] = attrs["full_name"].strip()
        if "employee_mail" in attrs:
            attrs["employee_mail"] = attrs["employee_mail"].strip()

        instance = self.instance
        start = attrs.get("leave_date_start", getattr(instance, "leave_date_start", None))
        end = attrs.get("leave_date_end", getattr(instance, "leave_date_end", None))
        if start and end and end < start:
            raise serializers.ValidationError({"leave_date_end": "Leave end is before leave start"})

        hired = attrs.get("employment_date", getattr(instance, "employment_date", None))
        left = attrs.get("termination_date", getattr(instance, "termination_date", None))
        if hired and left and left < hired:
            raise serializers.ValidationError({"termination_date": "Termination is before employment"})
        return attrs


class EmployeeUpdateLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmployeeUpdateLog
        fields = ["id", "employee_id", "changed_field", "old_value", "new_value", "updated_at"]


def blank_to_none(data, fields):
    """
    Copy of request data where empty strings in `fields` become None.
    """
    out = dict(data.items()) if hasattr(data, "items") else {}
    for field in fields:
        if field in out and isinstance(out[field], str) and not out[field].strip():
            out[field] = None
    return out


def email_suggestions(full_name: str, email: str) -> list[str]:
    parts = (full_name or "").lower().split()
    domain = (email or "").rsplit("@", 1)[-1]
    if not parts or not domain:
        return []
    first, last = parts[0], parts[-1]
    return [
        f"{first}.{last}@{domain}",
        f"{first}{last}@{domain}",
        f"{first}{last}1@{domain}",
        f"{first}.{last}1@{domain}",
    ]
