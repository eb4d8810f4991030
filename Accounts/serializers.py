# Accounts/serializers.py
from rest_framework import serializers
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


class RegisterSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(min_length=2, max_length=255)
    password = serializers.CharField(write_only=True, min_length=6)
    confirm_password = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = (
            "full_name",
            "email",
            "password",
            "confirm_password",
        )

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("An account with this email already exists")
        return value

    def validate(self, data):
        if data["password"] != data["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match"})
        return data

    def create(self, validated_data):
        validated_data.pop("confirm_password")
        password = validated_data.pop("password")
        # Self-registration never grants admin
        return User.objects.create_user(
            password=password,
            role=User.ROLE_USER,
            **validated_data
        )


class ProfileSerializer(serializers.ModelSerializer):
    role_label = serializers.CharField(source="get_role_display", read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "email",
            "full_name",
            "avatar_url",
            "role",
            "role_label",
            "initials",
            "is_active",
            "created_at",
        )
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(min_length=2, max_length=255, required=False)

    class Meta:
        model = User
        fields = ["full_name", "email"]

    def validate_email(self, value):
        value = value.strip().lower()
        taken = User.objects.filter(email__iexact=value).exclude(pk=self.instance.pk)
        if taken.exists():
            raise serializers.ValidationError("An account with this email already exists")
        return value


class AvatarUploadSerializer(serializers.Serializer):
    avatar = serializers.ImageField()


class UserFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)


class LoginSerializer(TokenObtainPairSerializer):

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        token["email"] = user.email
        return token

    def validate(self, attrs):
        data = super().validate(attrs)

        data["user"] = {
            "id": self.user.id,
            "role": self.user.role,
            "full_name": self.user.full_name,
            "email": self.user.email,
            "avatar_url": self.user.avatar_url or None,
            "is_admin": self.user.is_admin,
        }
        return data
