from __future__ import annotations

from django.db.models import Count, Q

from .access import normalized_emails, users_with_emails
from .models import PaymentRequest

SERIES_FILTERS = ("all", "IOE", "CEE", "LIVE")

# API sort key -> row key.
SORT_FIELDS = {
    "requestedAt": "requested_at",
    "userName": "user_name",
    "userEmail": "user_email",
    "seriesPurchased": "series_purchased",
    "paymentAmount": "payment_amount",
    "accessStatus": "has_accessed",
}
DEFAULT_SORT = "requestedAt"


def filter_requests(queryset, series="all", search=""):
    if series and series != "all":
        queryset = queryset.filter(series_purchased=series)
    search = (search or "").strip()
    if search:
        condition = Q(user_name__icontains=search) | Q(user_email__icontains=search)
        if search.isdigit():
            condition |= Q(id=int(search))
        queryset = queryset.filter(condition)
    return queryset


def _users_by_email(payment_requests):
    return {user.email_key: user for user in users_with_emails(normalized_emails(payment_requests))}


def build_rows(payment_requests, serializer_class):
    users = _users_by_email(payment_requests)
    payment_requests = list(payment_requests)
    rows = []
    for payment_request in payment_requests:
        row = dict(serializer_class(payment_request).data)
        user = users.get((payment_request.user_email or "").strip().lower())
        row["has_accessed"] = bool(user and any(user.series_access.values()))
        row["last_access_date"] = user.last_login if user else None
        row["_requested_at"] = payment_request.requested_at
        rows.append(row)
    return rows


def sort_rows(rows, sort=DEFAULT_SORT, direction="desc"):
    key_name = SORT_FIELDS.get(sort, SORT_FIELDS[DEFAULT_SORT])
    if key_name == "requested_at":
        key_name = "_requested_at"

    def sort_key(row):
        value = row.get(key_name)
        if isinstance(value, str):
            return value.casefold()
        return value

    present = [row for row in rows if row.get(key_name) is not None]
    missing = [row for row in rows if row.get(key_name) is None]
    ordered = sorted(present, key=sort_key, reverse=(direction == "desc"))
    for row in ordered + missing:
        row.pop("_requested_at", None)
    return ordered + missing


def series_counts():
    totals = PaymentRequest.objects.aggregate(
        all=Count("id"),
        IOE=Count("id", filter=Q(series_purchased="IOE")),
        CEE=Count("id", filter=Q(series_purchased="CEE")),
        LIVE=Count("id", filter=Q(series_purchased="LIVE")),
        pending=Count("id", filter=Q(status=PaymentRequest.STATUS_PENDING)),
    )
    return {key: int(value or 0) for key, value in totals.items()}
