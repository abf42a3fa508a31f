from unittest.mock import Mock, patch

import requests
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError, transaction
from django.test import TestCase
from rest_framework.test import APIClient

from .access import grant_live_access, revoke_live_access, review_payment_request
from .models import PaymentRequest
from .proof_upload import ProofUploadError, upload_payment_proof

User = get_user_model()


def _proof(name="proof.png", content_type="image/png"):
    return SimpleUploadedFile(name, b"\x89PNG\r\n\x1a\nfake-image", content_type=content_type)


def _payment_request(user, series="LIVE", email=None, **extra):
    defaults = {
        "user": user,
        "user_name": user.name,
        "user_email": user.email if email is None else email,
        "series_purchased": series,
        "payment_proof_file_name": "proof_1.png",
        "payment_proof_url": "https://uploads.test/proof_1.png",
        "payment_amount": 50 if series == "LIVE" else 100,
    }
    defaults.update(extra)
    return PaymentRequest.objects.create(**defaults)


def _many_requesters(count, series):
    User.objects.bulk_create(
        User(username=f"student{index}", email=f"Student{index}@Example.com") for index in range(count)
    )
    students = User.objects.filter(username__startswith="student")
    PaymentRequest.objects.bulk_create(
        PaymentRequest(
            user=student,
            user_name=student.username,
            user_email=student.email.lower(),
            series_purchased=series,
            payment_proof_file_name="proof.png",
            payment_proof_url="https://uploads.test/proof.png",
        )
        for student in students
    )
    return students


class ProofUploadTests(TestCase):
    def _response(self, status_code, payload=None, json_error=False):
        response = Mock(status_code=status_code)
        if json_error:
            response.json.side_effect = ValueError("not json")
        else:
            response.json.return_value = payload
        return response

    def test_successful_upload_returns_url_and_filename(self):
        response = self._response(200, {"success": True, "url": "https://uploads.test/p.png", "filename": "p.png"})
        with patch("payments.proof_upload.requests.post", return_value=response) as mocked_post:
            url, filename = upload_payment_proof(_proof())

        self.assertEqual((url, filename), ("https://uploads.test/p.png", "p.png"))
        args, kwargs = mocked_post.call_args
        self.assertEqual(args[0], "https://uploads.test/uploadpay.php")
        self.assertIn("image", kwargs["files"])
        self.assertEqual(kwargs["timeout"], 20)

    def test_error_status_prefers_remote_message(self):
        with patch("payments.proof_upload.requests.post", return_value=self._response(413, {"error": "File too large"})):
            with self.assertRaisesMessage(ProofUploadError, "File too large"):
                upload_payment_proof(_proof())

        with patch("payments.proof_upload.requests.post", return_value=self._response(500, json_error=True)):
            with self.assertRaisesMessage(ProofUploadError, "Upload failed with status: 500"):
                upload_payment_proof(_proof())

    def test_incomplete_success_payload_is_an_error(self):
        with patch("payments.proof_upload.requests.post", return_value=self._response(200, {"success": True, "url": ""})):
            with self.assertRaisesMessage(
                ProofUploadError,
                "Payment proof upload was not successful or did not return expected data.",
            ):
                upload_payment_proof(_proof())

    def test_network_failure_is_an_error(self):
        with patch("payments.proof_upload.requests.post", side_effect=requests.Timeout("timed out")):
            with self.assertRaises(ProofUploadError):
                upload_payment_proof(_proof())


class PaymentSubmissionTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="asha",
            email="asha@example.com",
            password="secret123",
            display_name="Asha Rai",
        )
        self.client.force_authenticate(self.user)

    def test_submission_creates_pending_request_after_upload(self):
        with patch(
            "payments.views.upload_payment_proof",
            return_value=("https://uploads.test/proof_9.png", "proof_9.png"),
        ):
            response = self.client.post("/api/payments/requests/", {"series": "LIVE", "image": _proof()}, format="multipart")

        self.assertEqual(response.status_code, 201)
        payment_request = PaymentRequest.objects.get()
        self.assertEqual(payment_request.status, "pending")
        self.assertEqual(payment_request.series_purchased, "LIVE")
        self.assertEqual(payment_request.payment_amount, 50)
        self.assertEqual(payment_request.payment_method, "eSewa")
        self.assertEqual(payment_request.submission_source, "web")
        self.assertEqual(payment_request.user_email, "asha@example.com")
        self.assertEqual(payment_request.payment_proof_file_name, "proof_9.png")
        self.assertIn("(Rs 50) is pending admin approval", response.data["message"])

    def test_upload_failure_writes_nothing(self):
        with patch("payments.views.upload_payment_proof", side_effect=ProofUploadError("Upload failed with status: 500")):
            response = self.client.post("/api/payments/requests/", {"series": "IOE", "image": _proof()}, format="multipart")

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.data["error"], "Failed to submit payment information: Upload failed with status: 500")
        self.assertFalse(PaymentRequest.objects.exists())

    def test_duplicate_pending_request_is_rejected(self):
        _payment_request(self.user, series="CEE", status="pending")
        with patch("payments.views.upload_payment_proof") as mocked_upload:
            response = self.client.post("/api/payments/requests/", {"series": "CEE", "image": _proof()}, format="multipart")

        self.assertEqual(response.status_code, 409)
        mocked_upload.assert_not_called()
        self.assertEqual(PaymentRequest.objects.count(), 1)

    def test_concurrent_submission_loses_to_the_first_insert(self):
        def upload_while_other_tab_submits(proof):
            _payment_request(self.user, series="IOE")
            return "https://uploads.test/proof_2.png", "proof_2.png"

        with patch("payments.views.upload_payment_proof", side_effect=upload_while_other_tab_submits):
            response = self.client.post("/api/payments/requests/", {"series": "IOE", "image": _proof()}, format="multipart")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"], "You already have a pending payment request for the IOE test series.")
        self.assertEqual(PaymentRequest.objects.filter(user=self.user, series_purchased="IOE").count(), 1)

    def test_schema_allows_one_pending_request_per_series(self):
        _payment_request(self.user, series="CEE")
        _payment_request(self.user, series="CEE", status="rejected")
        _payment_request(self.user, series="LIVE")
        with self.assertRaises(IntegrityError), transaction.atomic():
            _payment_request(self.user, series="CEE")

    def test_invalid_series_and_file_are_rejected(self):
        response = self.client.post("/api/payments/requests/", {"series": "NEB", "image": _proof()}, format="multipart")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Invalid series type selected. Please try again.")

        response = self.client.post("/api/payments/requests/", {"series": "IOE"}, format="multipart")
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/api/payments/requests/",
            {"series": "IOE", "image": _proof("notes.pdf", "application/pdf")},
            format="multipart",
        )
        self.assertEqual(response.status_code, 400)

    def test_user_lists_only_own_requests(self):
        other = User.objects.create_user(username="bina", email="bina@example.com", password="secret123")
        _payment_request(self.user, series="IOE")
        _payment_request(other, series="CEE")

        response = self.client.get("/api/payments/requests/")
        self.assertEqual([row["series_purchased"] for row in response.data], ["IOE"])


class LiveAccessToggleTests(TestCase):
    def setUp(self):
        self.mixed_case = User.objects.create_user(username="asha", email="Asha@Example.com", password="secret123")
        self.already_granted = User.objects.create_user(
            username="bina",
            email="bina@example.com",
            password="secret123",
            live_test_access=True,
        )
        self.no_request = User.objects.create_user(username="chet", email="chet@example.com", password="secret123")
        self.ioe_only = User.objects.create_user(username="dipa", email="dipa@example.com", password="secret123")

        _payment_request(self.mixed_case, email="asha@example.com", status="rejected")
        _payment_request(self.already_granted, status="approved")
        _payment_request(self.ioe_only, series="IOE")

    def test_grant_updates_only_live_requesters_without_access(self):
        self.assertEqual(grant_live_access(), 1)

        self.mixed_case.refresh_from_db()
        self.no_request.refresh_from_db()
        self.ioe_only.refresh_from_db()
        self.assertTrue(self.mixed_case.live_test_access)
        self.assertFalse(self.no_request.live_test_access)
        self.assertFalse(self.ioe_only.live_test_access)

        self.assertEqual(grant_live_access(), 0)

    def test_revoke_clears_every_live_requester(self):
        grant_live_access()
        self.assertEqual(revoke_live_access(), 2)
        self.assertFalse(User.objects.filter(live_test_access=True).exists())

    def test_grant_and_revoke_cover_thousands_of_requesters(self):
        _many_requesters(1200, "LIVE")
        self.assertEqual(grant_live_access(), 1201)
        self.assertEqual(User.objects.filter(username__startswith="student", live_test_access=False).count(), 0)
        self.assertEqual(revoke_live_access(), 1202)

    def test_no_live_requests_means_no_updates(self):
        PaymentRequest.objects.filter(series_purchased="LIVE").delete()
        self.assertEqual(grant_live_access(), 0)

    def test_admin_endpoint_reports_counts(self):
        admin_user = User.objects.create_user(username="admin", email="admin@example.com", password="secret123", is_staff=True)
        client = APIClient()
        client.force_authenticate(admin_user)

        response = client.post("/api/payments/admin/live-access/", {"action": "grant"}, format="json")
        self.assertEqual(response.data["message"], "Granted Live Test Access to 1 users.")

        response = client.post("/api/payments/admin/live-access/", {"action": "revoke"}, format="json")
        self.assertEqual(response.data["message"], "Revoked Live Test Access for 2 users.")


class PaymentReviewTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username="admin", email="admin@example.com", password="secret123", is_staff=True)
        self.student = User.objects.create_user(
            username="asha",
            email="asha@example.com",
            password="secret123",
            display_name="Asha Rai",
        )
        self.client = APIClient()
        self.client.force_authenticate(self.admin)

    def test_approval_unlocks_the_series(self):
        payment_request = _payment_request(self.student, series="IOE")
        response = self.client.post(
            f"/api/payments/admin/requests/{payment_request.id}/review/",
            {"status": "approved", "admin_note": "Verified eSewa slip"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "approved")
        self.assertEqual(response.data["reviewed_by_name"], "admin")
        self.student.refresh_from_db()
        self.assertTrue(self.student.ioe_access)
        self.assertFalse(self.student.cee_access)

    def test_rejection_and_reset(self):
        payment_request = _payment_request(self.student, series="CEE")
        review_payment_request(payment_request, "rejected", reviewer=self.admin)
        self.student.refresh_from_db()
        self.assertFalse(self.student.cee_access)

        payment_request = review_payment_request(payment_request, "pending", reviewer=self.admin)
        self.assertIsNone(payment_request.reviewed_at)
        self.assertIsNone(payment_request.reviewed_by)

    def test_reopening_clashes_with_a_newer_pending_request(self):
        rejected = _payment_request(self.student, series="CEE", status="rejected")
        _payment_request(self.student, series="CEE")
        response = self.client.post(
            f"/api/payments/admin/requests/{rejected.id}/review/",
            {"status": "pending"},
            format="json",
        )
        self.assertEqual(response.status_code, 409)
        rejected.refresh_from_db()
        self.assertEqual(rejected.status, "rejected")

    def test_invalid_status_is_rejected(self):
        payment_request = _payment_request(self.student, series="CEE")
        response = self.client.post(
            f"/api/payments/admin/requests/{payment_request.id}/review/",
            {"status": "refunded"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_missing_request_is_not_found(self):
        response = self.client.post("/api/payments/admin/requests/999/review/", {"status": "approved"}, format="json")
        self.assertEqual(response.status_code, 404)


class AdminPaymentDashboardTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username="admin", email="admin@example.com", password="secret123", is_staff=True)
        self.asha = User.objects.create_user(
            username="asha",
            email="asha@example.com",
            password="secret123",
            display_name="Asha Rai",
            ioe_access=True,
        )
        self.bina = User.objects.create_user(
            username="bina",
            email="bina@example.com",
            password="secret123",
            display_name="Bina Shah",
        )
        self.asha_ioe = _payment_request(self.asha, series="IOE")
        self.bina_live = _payment_request(self.bina, series="LIVE")
        self.bina_cee = _payment_request(self.bina, series="CEE", status="approved")
        self.client = APIClient()
        self.client.force_authenticate(self.admin)

    def test_default_listing_is_newest_first_with_counts(self):
        response = self.client.get("/api/payments/admin/requests/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [row["id"] for row in response.data["results"]],
            [self.bina_cee.id, self.bina_live.id, self.asha_ioe.id],
        )
        self.assertEqual(response.data["counts"], {"all": 3, "IOE": 1, "CEE": 1, "LIVE": 1, "pending": 2})

    def test_series_filter_and_search(self):
        response = self.client.get("/api/payments/admin/requests/?series=live")
        self.assertEqual([row["id"] for row in response.data["results"]], [self.bina_live.id])

        response = self.client.get("/api/payments/admin/requests/?search=ASHA@")
        self.assertEqual([row["id"] for row in response.data["results"]], [self.asha_ioe.id])

        response = self.client.get(f"/api/payments/admin/requests/?search={self.bina_cee.id}")
        self.assertIn(self.bina_cee.id, [row["id"] for row in response.data["results"]])

    def test_sort_by_amount_and_access_status(self):
        response = self.client.get("/api/payments/admin/requests/?sort=paymentAmount&direction=asc")
        self.assertEqual(response.data["results"][0]["id"], self.bina_live.id)

        response = self.client.get("/api/payments/admin/requests/?sort=accessStatus&direction=desc")
        first = response.data["results"][0]
        self.assertEqual(first["id"], self.asha_ioe.id)
        self.assertTrue(first["has_accessed"])

        response = self.client.get("/api/payments/admin/requests/?sort=userName&direction=asc")
        self.assertEqual(response.data["results"][0]["user_name"], "Asha Rai")

    def test_listing_handles_thousands_of_requesters(self):
        _many_requesters(1200, "IOE")
        User.objects.filter(username="student7").update(cee_access=True)

        response = self.client.get("/api/payments/admin/requests/?series=IOE")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["results"]), 1201)
        accessed = {row["user_email"] for row in response.data["results"] if row["has_accessed"]}
        self.assertEqual(accessed, {"asha@example.com", "student7@example.com"})

    def test_invalid_sort_is_rejected(self):
        response = self.client.get("/api/payments/admin/requests/?sort=phone")
        self.assertEqual(response.status_code, 400)

    def test_students_cannot_open_dashboard(self):
        client = APIClient()
        client.force_authenticate(self.bina)
        response = client.get("/api/payments/admin/requests/")
        self.assertEqual(response.status_code, 403)
