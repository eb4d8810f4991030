import logging

from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from Spaces.utils import AVATARS_BUCKET, discard_replaced_file, storage_path_from_url, upload_file

from .models import User

logger = logging.getLogger(__name__)


def list_profiles(search=None):
    qs = User.objects.order_by("-created_at")
    if search:
        qs = qs.filter(Q(full_name__icontains=search) | Q(email__icontains=search))
    return qs


def profile_stats(now=None):
    now = timezone.localtime(now or timezone.now())
    users = User.objects.all()

    return {
        "total": users.count(),
        "admins": users.filter(role=User.ROLE_ADMIN).count(),
        "users": users.filter(role=User.ROLE_USER).count(),
        "new_this_month": users.filter(
            created_at__year=now.year,
            created_at__month=now.month,
        ).count(),
    }


def update_profile_role(ctx, user, role):
    if not ctx.can_administer:
        raise PermissionDenied("Only administrators can change roles.")
    if role not in dict(User.ROLE_CHOICES):
        raise ValidationError("Invalid role")
    if user.pk == ctx.user_id and role != User.ROLE_ADMIN:
        raise ValidationError("Administrators cannot remove their own admin role")

    previous = user.role
    user.role = role
    user.save(update_fields=["role"])

    logger.info(f"User {user.id} role {previous} -> {role} by user {ctx.user_id}")
    return user


def toggle_role(ctx, user):
    new_role = User.ROLE_USER if user.role == User.ROLE_ADMIN else User.ROLE_ADMIN
    return update_profile_role(ctx, user, new_role)


def replace_avatar(user, image, build_url=None):
    """
    Upload a new avatar under avatars/<user id>/ and drop the old file.
    """
    previous = storage_path_from_url(user.avatar_url)

    url = upload_file(AVATARS_BUCKET, str(user.id), image)
    user.avatar_url = build_url(url) if build_url else url
    user.save(update_fields=["avatar_url"])

    if previous:
        discard_replaced_file(AVATARS_BUCKET, previous)

    return user
