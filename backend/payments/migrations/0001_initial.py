import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_name", models.CharField(blank=True, max_length=200)),
                ("user_email", models.EmailField(blank=True, max_length=254)),
                ("user_photo_url", models.URLField(blank=True, max_length=500)),
                (
                    "series_purchased",
                    models.CharField(choices=[("IOE", "IOE"), ("CEE", "CEE"), ("LIVE", "Live")], max_length=10),
                ),
                ("payment_proof_file_name", models.CharField(max_length=255)),
                ("payment_proof_url", models.URLField(max_length=1000)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("requested_at", models.DateTimeField(auto_now_add=True)),
                ("payment_amount", models.PositiveIntegerField(default=0)),
                ("payment_method", models.CharField(default="eSewa", max_length=40)),
                ("submission_source", models.CharField(default="web", max_length=20)),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("admin_note", models.TextField(blank=True)),
                (
                    "reviewed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reviewed_payment_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-requested_at", "-id"],
                "indexes": [
                    models.Index(fields=["series_purchased", "status"], name="payreq_series_status_idx"),
                    models.Index(fields=["user_email"], name="payreq_user_email_idx"),
                ],
            },
        ),
    ]
