from django.urls import path

from .views import (
    AdminLiveAccessView,
    AdminPaymentRequestListView,
    AdminPaymentRequestReviewView,
    PaymentRequestListCreateView,
)

urlpatterns = [
    path("requests/", PaymentRequestListCreateView.as_view()),
    # Admin endpoints
    path("admin/requests/", AdminPaymentRequestListView.as_view()),
    path("admin/requests/<int:request_id>/review/", AdminPaymentRequestReviewView.as_view()),
    path("admin/live-access/", AdminLiveAccessView.as_view()),
]
