"""Series access changes driven by payment requests."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models.functions import Lower, Trim
from django.utils import timezone

from accounts.models import SERIES_ACCESS_FIELDS

from .models import PaymentRequest

logger = logging.getLogger(__name__)

REVIEW_STATUSES = {
    PaymentRequest.STATUS_PENDING,
    PaymentRequest.STATUS_APPROVED,
    PaymentRequest.STATUS_REJECTED,
}


def normalized_emails(queryset):
    """Lower-cased, trimmed requester emails of a payment request queryset, as a subquery."""
    return (
        queryset.exclude(user_email="")
        .annotate(email_key=Lower(Trim("user_email")))
        .values("email_key")
    )


def live_request_emails():
    """Emails behind every LIVE request, whatever its status."""
    return normalized_emails(PaymentRequest.objects.filter(series_purchased="LIVE"))


def users_with_emails(emails):
    """Users whose email matches one of ``emails`` case-insensitively.

    ``emails`` is either a subquery from :func:`normalized_emails` or an
    iterable of lower-cased addresses. Matching is a single ``IN`` lookup, so
    the query stays flat however many requesters there are.
    """
    return (
        get_user_model()
        .objects.exclude(email="")
        .annotate(email_key=Lower("email"))
        .filter(email_key__in=emails)
    )


def _set_live_access(enabled):
    with transaction.atomic():
        users = users_with_emails(live_request_emails()).exclude(live_test_access=enabled)
        return users.update(live_test_access=enabled)


def grant_live_access():
    updated = _set_live_access(True)
    logger.info("Granted live test access to %s users", updated)
    return updated


def revoke_live_access():
    updated = _set_live_access(False)
    logger.info("Revoked live test access for %s users", updated)
    return updated


def grant_message(count):
    return f"Granted Live Test Access to {count} users."


def revoke_message(count):
    return f"Revoked Live Test Access for {count} users."


def review_payment_request(payment_request, status_value, reviewer=None, admin_note=None):
    """Set the review outcome; approval unlocks the purchased series in the same transaction."""
    if status_value not in REVIEW_STATUSES:
        raise ValueError("Invalid status")

    with transaction.atomic():
        payment_request = PaymentRequest.objects.select_for_update().get(pk=payment_request.pk)
        payment_request.status = status_value
        if admin_note is not None:
            payment_request.admin_note = str(admin_note).strip()
        if status_value == PaymentRequest.STATUS_PENDING:
            payment_request.reviewed_at = None
            payment_request.reviewed_by = None
        else:
            payment_request.reviewed_at = timezone.now()
            payment_request.reviewed_by = reviewer
        payment_request.save(update_fields=["status", "admin_note", "reviewed_at", "reviewed_by"])

        if status_value == PaymentRequest.STATUS_APPROVED:
            field = SERIES_ACCESS_FIELDS[payment_request.series_purchased]
            get_user_model().objects.filter(pk=payment_request.user_id).update(**{field: True})

    logger.info(
        "Payment request %s for %s marked %s by %s",
        payment_request.id,
        payment_request.series_purchased,
        status_value,
        getattr(reviewer, "username", "system"),
    )
    return payment_request
