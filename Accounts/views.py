# Accounts/views.py
from django.shortcuts import get_object_or_404
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView

from . import services
from .context import ActorContext
from .models import User
from .permissions import IsAdminRole
from .serializers import (
    AvatarUploadSerializer,
    LoginSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserFilterSerializer,
)


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.save()
        refresh = RefreshToken.for_user(user)

        return Response({
            "status": "success",
            "message": "Account created successfully",
            "data": {
                "user": ProfileSerializer(user).data,
                "access": str(refresh.access_token),
                "refresh": str(refresh),
            }
        }, status=status.HTTP_201_CREATED)


class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = LoginSerializer


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = ProfileSerializer(request.user)
        return Response({
            "status": "success",
            "data": serializer.data
        }, status=status.HTTP_200_OK)

    def patch(self, request):
        serializer = ProfileUpdateSerializer(
            request.user, data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response({
            "status": "success",
            "message": "Profile updated successfully",
            "data": ProfileSerializer(user).data
        }, status=status.HTTP_200_OK)


class AvatarUploadView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = AvatarUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = services.replace_avatar(
            request.user,
            serializer.validated_data["avatar"],
            build_url=request.build_absolute_uri,
        )

        return Response({
            "status": "success",
            "avatar_url": user.avatar_url,
        }, status=status.HTTP_200_OK)


# ----------------------------------
# ADMIN: USER MANAGEMENT
# ----------------------------------
class AdminUserListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        filters = UserFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        users = services.list_profiles(search=filters.validated_data.get("search"))

        return Response({
            "status": "success",
            "stats": services.profile_stats(),
            "data": ProfileSerializer(users, many=True).data,
        })


class AdminUserToggleRoleView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request, user_id):
        user = get_object_or_404(User, id=user_id)
        user = services.toggle_role(ActorContext.from_request(request), user)

        message = (
            "User promoted to administrator"
            if user.is_admin
            else "User removed from administration"
        )
        return Response({
            "status": "success",
            "message": message,
            "data": ProfileSerializer(user).data,
        })
