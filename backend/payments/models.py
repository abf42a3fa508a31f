from django.conf import settings
from django.db import models


SERIES_CHOICES = [
    ("IOE", "IOE"),
    ("CEE", "CEE"),
    ("LIVE", "Live"),
]


class PaymentRequest(models.Model):
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="payment_requests")
    # Snapshot of the requester at submission time.
    user_name = models.CharField(max_length=200, blank=True)
    user_email = models.EmailField(blank=True)
    user_photo_url = models.URLField(max_length=500, blank=True)
    series_purchased = models.CharField(max_length=10, choices=SERIES_CHOICES)
    payment_proof_file_name = models.CharField(max_length=255)
    payment_proof_url = models.URLField(max_length=1000)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    requested_at = models.DateTimeField(auto_now_add=True)
    payment_amount = models.PositiveIntegerField(default=0)
    payment_method = models.CharField(max_length=40, default="eSewa")
    submission_source = models.CharField(max_length=20, default="web")
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_payment_requests",
    )
    admin_note = models.TextField(blank=True)

    class Meta:
        ordering = ["-requested_at", "-id"]
        indexes = [
            models.Index(fields=["series_purchased", "status"], name="payreq_series_status_idx"),
            models.Index(fields=["user_email"], name="payreq_user_email_idx"),
        ]
        constraints = [
            # One open request per user and series.
            models.UniqueConstraint(
                fields=["user", "series_purchased"],
                condition=models.Q(status="pending"),
                name="payreq_one_pending_per_series",
            ),
        ]

    def __str__(self):
        return f"{self.user_email or self.user_id} | {self.series_purchased} | {self.status}"
