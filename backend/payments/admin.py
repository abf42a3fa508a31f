from django.contrib import admin, messages
from import_export import resources
from import_export.admin import ImportExportModelAdmin

from .access import (
    grant_live_access,
    grant_message,
    review_payment_request,
    revoke_live_access,
    revoke_message,
)
from .models import PaymentRequest


class PaymentRequestResource(resources.ModelResource):
    class Meta:
        model = PaymentRequest
        fields = (
            "id",
            "user_name",
            "user_email",
            "series_purchased",
            "payment_amount",
            "payment_method",
            "status",
            "requested_at",
            "reviewed_at",
            "payment_proof_url",
            "admin_note",
        )
        export_order = fields


@admin.register(PaymentRequest)
class PaymentRequestAdmin(ImportExportModelAdmin):
    resource_class = PaymentRequestResource
    list_display = (
        "id",
        "user_name",
        "user_email",
        "series_purchased",
        "payment_amount",
        "status",
        "requested_at",
        "reviewed_at",
    )
    list_filter = ("series_purchased", "status", "requested_at")
    search_fields = ("id", "user_name", "user_email")
    readonly_fields = ("requested_at", "reviewed_at", "reviewed_by")
    actions = ("approve_requests", "reject_requests", "grant_live_test_access", "revoke_live_test_access")

    @admin.action(description="Approve selected requests and unlock the series")
    def approve_requests(self, request, queryset):
        approved = 0
        for payment_request in queryset.exclude(status=PaymentRequest.STATUS_APPROVED):
            review_payment_request(payment_request, PaymentRequest.STATUS_APPROVED, reviewer=request.user)
            approved += 1
        self.message_user(request, f"Approved {approved} payment requests.", level=messages.INFO)

    @admin.action(description="Reject selected requests")
    def reject_requests(self, request, queryset):
        rejected = 0
        for payment_request in queryset.exclude(status=PaymentRequest.STATUS_REJECTED):
            review_payment_request(payment_request, PaymentRequest.STATUS_REJECTED, reviewer=request.user)
            rejected += 1
        self.message_user(request, f"Rejected {rejected} payment requests.", level=messages.INFO)

    @admin.action(description="Grant live test access to every LIVE requester")
    def grant_live_test_access(self, request, queryset):
        self.message_user(request, grant_message(grant_live_access()), level=messages.INFO)

    @admin.action(description="Revoke live test access from every LIVE requester")
    def revoke_live_test_access(self, request, queryset):
        self.message_user(request, revoke_message(revoke_live_access()), level=messages.INFO)
