import logging

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)


def _build_tokens_for_user(user):
    refresh = RefreshToken.for_user(user)
    return {
        "refresh": str(refresh),
        "access": str(refresh.access_token),
    }


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = User.objects.create_user(
            username=data["username"],
            email=data["email"],
            password=data["password"],
            display_name=data["display_name"],
            exam_type=data["exam_type"],
            current_standard=data["current_standard"],
            phone_number=data.get("phone_number", ""),
        )
        logger.info("Registered user %s", user.username)

        tokens = _build_tokens_for_user(user)
        return Response(
            {
                "message": "Registration successful.",
                "tokens": tokens,
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])

        tokens = _build_tokens_for_user(user)
        return Response(
            {
                "message": "Login successful.",
                "tokens": tokens,
                "user": UserSerializer(user).data,
            }
        )


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user_data = UserSerializer(request.user).data
        user_data["series_access"] = request.user.series_access
        user_data["role"] = "Admin" if request.user.is_staff else "Student"
        # Series awaiting admin review, so the client can show "pending" instead of "buy".
        user_data["pending_series"] = sorted(
            set(request.user.payment_requests.filter(status="pending").values_list("series_purchased", flat=True))
        )
        user_data["quiz_attempts"] = request.user.quiz_results.count()
        return Response(user_data)

    def patch(self, request):
        serializer = ProfileUpdateSerializer(instance=request.user, data=request.data, partial=True)
        if not serializer.is_valid():
            errors = serializer.errors
            if "display_name" in errors:
                return Response({"error": str(errors["display_name"][0])}, status=status.HTTP_400_BAD_REQUEST)
            return Response({"error": errors}, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
        logger.info("Profile updated for user %s", request.user.username)
        return Response(UserSerializer(request.user).data)
