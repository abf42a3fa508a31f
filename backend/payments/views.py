import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from quizzes.catalog import SERIES_CHOICES, series_price

from .access import (
    REVIEW_STATUSES,
    grant_live_access,
    grant_message,
    review_payment_request,
    revoke_live_access,
    revoke_message,
)
from .dashboard import DEFAULT_SORT, SERIES_FILTERS, SORT_FIELDS, build_rows, filter_requests, series_counts, sort_rows
from .models import PaymentRequest
from .proof_upload import ProofUploadError, upload_payment_proof, validate_proof_file
from .serializers import PaymentRequestSerializer

logger = logging.getLogger(__name__)


def _duplicate_request_response(series):
    return Response(
        {"error": f"You already have a pending payment request for the {series} test series."},
        status=status.HTTP_409_CONFLICT,
    )


class PaymentRequestListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        payment_requests = PaymentRequest.objects.filter(user=request.user)
        return Response(PaymentRequestSerializer(payment_requests, many=True).data)

    def post(self, request):
        series = str(request.data.get("series") or request.data.get("series_purchased") or "").upper()
        if series not in SERIES_CHOICES:
            return Response(
                {"error": "Invalid series type selected. Please try again."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        proof = request.FILES.get("image")
        try:
            validate_proof_file(proof)
        except ValueError as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if PaymentRequest.objects.filter(
            user=request.user,
            series_purchased=series,
            status=PaymentRequest.STATUS_PENDING,
        ).exists():
            return _duplicate_request_response(series)

        try:
            proof_url, proof_file_name = upload_payment_proof(proof)
        except ProofUploadError as exc:
            return Response(
                {"error": f"Failed to submit payment information: {exc}"},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        amount = series_price(series, settings.SERIES_PRICES)
        try:
            with transaction.atomic():
                payment_request = PaymentRequest.objects.create(
                    user=request.user,
                    user_name=request.user.name,
                    user_email=request.user.email,
                    user_photo_url=request.user.photo_url,
                    series_purchased=series,
                    payment_proof_file_name=proof_file_name,
                    payment_proof_url=proof_url,
                    status=PaymentRequest.STATUS_PENDING,
                    payment_amount=amount,
                    payment_method=settings.PAYMENT_METHOD,
                    submission_source="web",
                )
        except IntegrityError:
            # A concurrent submission for the same series got in first.
            logger.warning("Duplicate pending %s request from %s", series, request.user.username)
            return _duplicate_request_response(series)
        logger.info(
            "Payment request %s submitted by %s for %s (Rs %s)",
            payment_request.id,
            request.user.email or request.user.username,
            series,
            amount,
        )
        return Response(
            {
                "message": (
                    f"Payment information submitted successfully! Your request for the {series} test series "
                    f"(Rs {amount}) is pending admin approval. You will be notified once it's processed."
                ),
                "payment_request": PaymentRequestSerializer(payment_request).data,
            },
            status=status.HTTP_201_CREATED,
        )


class AdminPaymentRequestListView(APIView):
    permission_classes = [IsAuthenticated, IsAdminUser]

    def get(self, request):
        series = request.query_params.get("series") or "all"
        if series != "all":
            series = series.upper()
        if series not in SERIES_FILTERS:
            return Response({"error": "series must be all, IOE, CEE or LIVE"}, status=status.HTTP_400_BAD_REQUEST)

        sort = request.query_params.get("sort") or DEFAULT_SORT
        if sort not in SORT_FIELDS:
            return Response({"error": "Invalid sort field"}, status=status.HTTP_400_BAD_REQUEST)
        direction = (request.query_params.get("direction") or "desc").lower()
        if direction not in {"asc", "desc"}:
            return Response({"error": "direction must be asc or desc"}, status=status.HTTP_400_BAD_REQUEST)

        queryset = filter_requests(
            PaymentRequest.objects.select_related("reviewed_by"),
            series=series,
            search=request.query_params.get("search", ""),
        )
        rows = sort_rows(build_rows(queryset, PaymentRequestSerializer), sort=sort, direction=direction)
        return Response(
            {
                "counts": series_counts(),
                "series": series,
                "sort": sort,
                "direction": direction,
                "results": rows,
            }
        )


class AdminPaymentRequestReviewView(APIView):
    permission_classes = [IsAuthenticated, IsAdminUser]

    def post(self, request, request_id):
        try:
            payment_request = PaymentRequest.objects.get(id=request_id)
        except PaymentRequest.DoesNotExist:
            return Response({"error": "Payment request not found"}, status=status.HTTP_404_NOT_FOUND)

        status_value = str(request.data.get("status") or "").lower()
        if status_value not in REVIEW_STATUSES:
            return Response({"error": "Invalid status"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            payment_request = review_payment_request(
                payment_request,
                status_value,
                reviewer=request.user,
                admin_note=request.data.get("admin_note"),
            )
        except IntegrityError:
            return _duplicate_request_response(payment_request.series_purchased)
        return Response(PaymentRequestSerializer(payment_request).data)


class AdminLiveAccessView(APIView):
    permission_classes = [IsAuthenticated, IsAdminUser]

    def post(self, request):
        action = str(request.data.get("action") or "").lower()
        if action == "grant":
            updated = grant_live_access()
            message = grant_message(updated)
        elif action == "revoke":
            updated = revoke_live_access()
            message = revoke_message(updated)
        else:
            return Response({"error": "action must be grant or revoke"}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"message": message, "updated": updated})
