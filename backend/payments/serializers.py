from rest_framework import serializers

from .models import PaymentRequest


class PaymentRequestSerializer(serializers.ModelSerializer):
    reviewed_by_name = serializers.SerializerMethodField()

    def get_reviewed_by_name(self, obj):
        if not obj.reviewed_by_id:
            return None
        return obj.reviewed_by.name

    class Meta:
        model = PaymentRequest
        fields = [
            "id",
            "user",
            "user_name",
            "user_email",
            "user_photo_url",
            "series_purchased",
            "payment_proof_file_name",
            "payment_proof_url",
            "status",
            "requested_at",
            "payment_amount",
            "payment_method",
            "submission_source",
            "reviewed_at",
            "reviewed_by_name",
            "admin_note",
        ]
