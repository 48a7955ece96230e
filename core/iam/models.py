from django.conf import settings
from django.db import models
from django.utils import timezone


class UserProfile(models.Model):
    """
    Ties a login to the company (tenant) whose data it may read and write.
    """

    id = models.BigAutoField(primary_key=True)
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="esg_profile")
    company = models.CharField(max_length=120, db_index=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "user_profile"

    def __str__(self) -> str:
        return f"{self.user_id}@{self.company}"


def company_from_email(email: str) -> str:
    """
    jane@acme.example.com -> "acme"
    """
    domain = (email or "").rsplit("@", 1)[-1] if "@" in (email or "") else ""
    return domain.split(".", 1)[0].strip().lower()
