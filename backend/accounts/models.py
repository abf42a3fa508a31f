from django.contrib.auth.models import AbstractUser
from django.db import models


EXAM_TYPE_CHOICES = [
    ("IOE", "IOE"),
    ("CEE", "CEE"),
    ("none", "None"),
]

CURRENT_STANDARD_CHOICES = [
    ("10", "Grade 10"),
    ("11", "Grade 11"),
    ("12", "Grade 12"),
    ("Passout", "Passout"),
]

SERIES_ACCESS_FIELDS = {
    "IOE": "ioe_access",
    "CEE": "cee_access",
    "LIVE": "live_test_access",
}


class User(AbstractUser):
    display_name = models.CharField(max_length=200, blank=True, default="")
    photo_url = models.URLField(max_length=500, blank=True, default="")
    exam_type = models.CharField(max_length=10, choices=EXAM_TYPE_CHOICES, default="none")
    current_standard = models.CharField(max_length=10, choices=CURRENT_STANDARD_CHOICES, default="12")
    ioe_access = models.BooleanField(default=False)
    cee_access = models.BooleanField(default=False)
    live_test_access = models.BooleanField(default=False)
    college = models.CharField(max_length=200, blank=True, default="")
    district = models.CharField(max_length=100, blank=True, default="")
    province = models.CharField(max_length=100, blank=True, default="")
    phone_number = models.CharField(max_length=20, blank=True, default="")

    def save(self, *args, **kwargs):
        if not self.display_name:
            composed = f"{self.first_name} {self.last_name}".strip()
            self.display_name = composed
        super().save(*args, **kwargs)

    @property
    def name(self):
        return self.display_name or self.username

    @property
    def series_access(self):
        return {series: bool(getattr(self, field)) for series, field in SERIES_ACCESS_FIELDS.items()}

    @property
    def exam_type_preference(self):
        """IOE/CEE preference used to narrow the LIVE series, or None."""
        value = (self.exam_type or "").strip().upper()
        if value in {"IOE", "CEE"}:
            return value
        return None

    def has_series_access(self, series):
        field = SERIES_ACCESS_FIELDS.get(str(series or "").upper())
        if not field:
            return False
        return bool(getattr(self, field))
