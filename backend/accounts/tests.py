from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from payments.models import PaymentRequest

User = get_user_model()


class UserModelTests(TestCase):
    def test_series_access_and_preference(self):
        user = User.objects.create_user(username="asha", password="secret123", exam_type="CEE", cee_access=True)
        self.assertEqual(user.series_access, {"IOE": False, "CEE": True, "LIVE": False})
        self.assertTrue(user.has_series_access("cee"))
        self.assertFalse(user.has_series_access("NEB"))
        self.assertEqual(user.exam_type_preference, "CEE")

        user.exam_type = "none"
        self.assertIsNone(user.exam_type_preference)

    def test_display_name_falls_back_to_full_name(self):
        user = User.objects.create_user(username="bina", password="secret123", first_name="Bina", last_name="Shah")
        self.assertEqual(user.display_name, "Bina Shah")
        self.assertEqual(user.name, "Bina Shah")


class AuthFlowTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_then_login_with_email(self):
        response = self.client.post(
            "/api/accounts/auth/register/",
            {
                "display_name": "  Asha Rai ",
                "username": "asha",
                "email": "Asha@Example.com",
                "password": "secret123",
                "exam_type": "IOE",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertIn("access", response.data["tokens"])
        self.assertEqual(response.data["user"]["display_name"], "Asha Rai")
        self.assertEqual(response.data["user"]["email"], "asha@example.com")

        response = self.client.post(
            "/api/accounts/auth/login/",
            {"identifier": "ASHA@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(User.objects.get(username="asha").last_login)

    def test_duplicate_email_is_rejected(self):
        User.objects.create_user(username="asha", email="asha@example.com", password="secret123")
        response = self.client.post(
            "/api/accounts/auth/register/",
            {"display_name": "Other", "username": "other", "email": "ASHA@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", response.data)

    def test_wrong_password_is_rejected(self):
        User.objects.create_user(username="asha", email="asha@example.com", password="secret123")
        response = self.client.post(
            "/api/accounts/auth/login/",
            {"identifier": "asha", "password": "wrong-password"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)


class ProfileTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="asha",
            email="asha@example.com",
            password="secret123",
            display_name="Asha Rai",
            live_test_access=True,
        )
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_profile_includes_access_flags_and_role(self):
        response = self.client.get("/api/accounts/auth/me/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["series_access"], {"IOE": False, "CEE": False, "LIVE": True})
        self.assertEqual(response.data["role"], "Student")
        self.assertEqual(response.data["pending_series"], [])
        self.assertEqual(response.data["quiz_attempts"], 0)

    def test_profile_lists_series_awaiting_review(self):
        for series, request_status in (("LIVE", "pending"), ("CEE", "rejected"), ("IOE", "approved"), ("IOE", "pending")):
            PaymentRequest.objects.create(
                user=self.user,
                user_email=self.user.email,
                series_purchased=series,
                payment_proof_file_name="proof.png",
                payment_proof_url="https://uploads.test/proof.png",
                status=request_status,
            )
        response = self.client.get("/api/accounts/auth/me/")
        self.assertEqual(response.data["pending_series"], ["IOE", "LIVE"])

    def test_profile_update_trims_display_name(self):
        response = self.client.patch(
            "/api/accounts/auth/me/",
            {"display_name": "  Asha K. Rai  ", "exam_type": "CEE", "current_standard": "Passout"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.display_name, "Asha K. Rai")
        self.assertEqual(self.user.exam_type, "CEE")
        self.assertEqual(self.user.current_standard, "Passout")

    def test_blank_display_name_is_rejected(self):
        response = self.client.patch("/api/accounts/auth/me/", {"display_name": "   "}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Display name is required")
        self.user.refresh_from_db()
        self.assertEqual(self.user.display_name, "Asha Rai")

    def test_anonymous_profile_is_unauthorized(self):
        response = APIClient().get("/api/accounts/auth/me/")
        self.assertIn(response.status_code, (401, 403))
