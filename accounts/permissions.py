from __future__ import annotations

from typing import Iterable

from django.contrib.auth import get_user_model
from rest_framework.permissions import BasePermission

UserModel = get_user_model()


def _fetch_persisted_role(user: UserModel) -> str | None:
    """Load the role from the database instead of trusting token claims."""
    cached = getattr(user, "_cached_role", None)
    if cached is not None:
        return cached

    role = user.__class__.objects.filter(pk=user.pk).values_list("role", flat=True).first()
    setattr(user, "_cached_role", role)
    return role


def user_has_role(user: UserModel, *required: str) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    return _fetch_persisted_role(user) in required


class RoleRequired(BasePermission):
    """Base permission that enforces required roles after DB re-validation."""

    required_roles: Iterable[str] = ()

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return False

        required = tuple(self.required_roles)
        if not required:
            return True
        return user_has_role(user, *required)


class CustomerRequired(RoleRequired):
    required_roles = ("customer",)


class ProviderRequired(RoleRequired):
    required_roles = ("provider",)
