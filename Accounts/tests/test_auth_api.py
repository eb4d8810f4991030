"""API tests for registration, login, profiles and user administration."""

from unittest.mock import patch

from django.core.files.storage import FileSystemStorage
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from Accounts.models import User
from Spaces.tests.helpers import make_admin, make_image, make_user


class AuthAPITests(APITestCase):
    def test_register_returns_tokens_and_plain_user_role(self):
        payload = {
            "full_name": "Maria Lima",
            "email": "Maria@Example.com",
            "password": "secret123",
            "confirm_password": "secret123",
        }

        response = self.client.post(reverse("register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        data = response.data["data"]
        self.assertIn("access", data)
        self.assertIn("refresh", data)
        self.assertEqual(data["user"]["email"], "maria@example.com")
        self.assertEqual(data["user"]["role"], User.ROLE_USER)
        self.assertEqual(data["user"]["initials"], "ML")

    def test_register_ignores_requested_admin_role(self):
        payload = {
            "full_name": "Eve Admin",
            "email": "eve@example.com",
            "password": "secret123",
            "confirm_password": "secret123",
            "role": User.ROLE_ADMIN,
        }

        self.client.post(reverse("register"), payload, format="json")

        self.assertEqual(User.objects.get(email="eve@example.com").role, User.ROLE_USER)

    def test_register_validation(self):
        make_user(email="taken@example.com")
        cases = [
            {"full_name": "A", "email": "a@example.com", "password": "secret123", "confirm_password": "secret123"},
            {"full_name": "Ana", "email": "a@example.com", "password": "123", "confirm_password": "123"},
            {"full_name": "Ana", "email": "a@example.com", "password": "secret123", "confirm_password": "other123"},
            {"full_name": "Ana", "email": "TAKEN@example.com", "password": "secret123", "confirm_password": "secret123"},
        ]

        for payload in cases:
            response = self.client.post(reverse("register"), payload, format="json")
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, payload)

    def test_login_token_carries_role(self):
        make_admin(email="boss@example.com")

        response = self.client.post(
            reverse("login"),
            {"email": "boss@example.com", "password": "secret123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["user"]["is_admin"])
        self.assertEqual(AccessToken(response.data["access"])["role"], User.ROLE_ADMIN)

    def test_login_with_wrong_password_fails(self):
        make_user(email="ana@example.com")

        response = self.client.post(
            reverse("login"),
            {"email": "ana@example.com", "password": "wrong-pass"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ProfileAPITests(APITestCase):
    def setUp(self):
        self.user = make_user()
        self.client.force_authenticate(self.user)

    def test_get_profile(self):
        response = self.client.get(reverse("profile"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["role_label"], "User")

    def test_update_name_and_email(self):
        response = self.client.patch(
            reverse("profile"),
            {"full_name": "Ana Maria", "email": "ana.maria@example.com"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.full_name, "Ana Maria")
        self.assertEqual(self.user.email, "ana.maria@example.com")

    def test_profile_update_cannot_change_role(self):
        self.client.patch(reverse("profile"), {"role": User.ROLE_ADMIN}, format="json")

        self.user.refresh_from_db()
        self.assertEqual(self.user.role, User.ROLE_USER)

    def test_avatar_upload(self):
        response = self.client.post(
            reverse("profile-avatar"), {"avatar": make_image()}, format="multipart"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertIn(f"/avatars/{self.user.id}/", self.user.avatar_url)

    def test_avatar_replaced_even_when_old_file_cannot_be_deleted(self):
        url = reverse("profile-avatar")
        self.client.post(url, {"avatar": make_image()}, format="multipart")
        self.user.refresh_from_db()
        first_url = self.user.avatar_url

        with patch.object(FileSystemStorage, "delete", side_effect=OSError("disk offline")):
            response = self.client.post(url, {"avatar": make_image("new.png")}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertNotEqual(self.user.avatar_url, first_url)
        self.assertEqual(self.user.avatar_url, response.data["avatar_url"])

    def test_failed_avatar_upload_keeps_current_avatar(self):
        with patch.object(FileSystemStorage, "save", side_effect=OSError("disk full")):
            response = self.client.post(
                reverse("profile-avatar"), {"avatar": make_image()}, format="multipart"
            )

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.user.refresh_from_db()
        self.assertEqual(self.user.avatar_url, "")


class AdminUserAPITests(APITestCase):
    def setUp(self):
        self.admin = make_admin()
        self.user = make_user(full_name="Bruno Costa", email="bruno@example.com")
        self.client.force_authenticate(self.admin)

    def test_list_users_with_stats(self):
        response = self.client.get(reverse("admin-user-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["stats"]["total"], 2)
        self.assertEqual(response.data["stats"]["admins"], 1)
        self.assertEqual(response.data["stats"]["users"], 1)
        self.assertEqual(response.data["stats"]["new_this_month"], 2)

    def test_search_users(self):
        response = self.client.get(reverse("admin-user-list"), {"search": "bruno"})

        self.assertEqual([u["id"] for u in response.data["data"]], [self.user.id])

    def test_toggle_role_promotes_and_demotes(self):
        url = reverse("admin-user-toggle-role", kwargs={"user_id": self.user.id})

        promoted = self.client.post(url)
        demoted = self.client.post(url)

        self.assertEqual(promoted.data["data"]["role"], User.ROLE_ADMIN)
        self.assertEqual(demoted.data["data"]["role"], User.ROLE_USER)

    def test_admin_cannot_demote_themselves(self):
        url = reverse("admin-user-toggle-role", kwargs={"user_id": self.admin.id})

        response = self.client.post(url)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.role, User.ROLE_ADMIN)

    def test_regular_users_cannot_manage_users(self):
        self.client.force_authenticate(self.user)

        response = self.client.get(reverse("admin-user-list"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
