from django.contrib.auth import password_validation
from rest_framework import serializers

from synergysphere.users.models import User


class UserSerializer(serializers.ModelSerializer[User]):
    id = serializers.IntegerField(read_only=True)
    initials = serializers.CharField(read_only=True)

    # Make username & email explicitly read-only; both are fixed at signup
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "name",
            "email",
            "initials",
        ]


class UserSummarySerializer(serializers.ModelSerializer[User]):
    """Compact user shape embedded in task payloads."""

    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_email(self, value: str) -> str:
        email = value.strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            msg = "A user with this email already exists."
            raise serializers.ValidationError(msg)
        return email

    def validate(self, attrs):
        candidate = User(
            username=attrs["email"],
            email=attrs["email"],
            name=attrs["name"],
        )
        password_validation.validate_password(attrs["password"], user=candidate)
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["email"],
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data["name"].strip(),
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
