# Accounts/models.py

from django.db import models
from django.contrib.auth.models import (
    AbstractBaseUser,
    PermissionsMixin,
    BaseUserManager,
)


# ----------------------------------
# CUSTOM USER MANAGER
# ----------------------------------
# Email is the login identifier; superusers always carry the admin role.
class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")

        email = self.normalize_email(email)
        extra_fields.setdefault("role", User.ROLE_USER)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ROLE_ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email, password, **extra_fields)


# ----------------------------------
# CUSTOM USER MODEL (PROFILE)
# ----------------------------------
class User(AbstractBaseUser, PermissionsMixin):

    ROLE_USER = "user"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = (
        (ROLE_USER, "User"),
        (ROLE_ADMIN, "Administrator"),
    )

    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=255)

    # Public URL of the uploaded avatar (storage bucket "avatars")
    avatar_url = models.CharField(max_length=500, blank=True)

    # Role drives every admin capability check
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_USER
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = UserManager()

    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["full_name"]

    class Meta:
        ordering = ["-created_at"]

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def initials(self):
        return "".join(part[0] for part in self.full_name.split()).upper() or "U"

    def __str__(self):
        return self.email
