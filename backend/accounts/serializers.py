from django.contrib.auth import authenticate
from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework import serializers

from .models import CURRENT_STANDARD_CHOICES, EXAM_TYPE_CHOICES

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "display_name",
            "photo_url",
            "exam_type",
            "current_standard",
            "ioe_access",
            "cee_access",
            "live_test_access",
            "college",
            "district",
            "province",
            "phone_number",
            "is_staff",
            "date_joined",
            "last_login",
        ]


class RegisterSerializer(serializers.Serializer):
    display_name = serializers.CharField(max_length=200)
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    exam_type = serializers.ChoiceField(choices=[choice[0] for choice in EXAM_TYPE_CHOICES], default="none")
    current_standard = serializers.ChoiceField(
        choices=[choice[0] for choice in CURRENT_STANDARD_CHOICES],
        default="12",
    )
    phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")

    def validate_display_name(self, value):
        normalized = value.strip()
        if not normalized:
            raise serializers.ValidationError("Display name is required")
        return normalized

    def validate_username(self, value):
        normalized = value.strip()
        if not normalized:
            raise serializers.ValidationError("Username is required.")
        if User.objects.filter(username__iexact=normalized).exists():
            raise serializers.ValidationError("This username is already in use.")
        return normalized

    def validate_email(self, value):
        normalized = value.strip().lower()
        if User.objects.filter(email__iexact=normalized).exists():
            raise serializers.ValidationError("This email is already in use.")
        return normalized


class LoginSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = (attrs.get("identifier") or "").strip()
        password = attrs.get("password") or ""

        user = User.objects.filter(Q(username__iexact=identifier) | Q(email__iexact=identifier)).first()
        if not user:
            raise serializers.ValidationError("Invalid username/email or password.")

        authenticated = authenticate(username=user.username, password=password)
        if not authenticated:
            raise serializers.ValidationError("Invalid username/email or password.")

        attrs["user"] = authenticated
        return attrs


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "display_name",
            "exam_type",
            "current_standard",
            "college",
            "district",
            "province",
            "phone_number",
        ]

    def validate_display_name(self, value):
        normalized = (value or "").strip()
        if not normalized:
            raise serializers.ValidationError("Display name is required")
        return normalized
