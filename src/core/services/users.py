"""
Usuarios del back office. El hash de contraseña y el username viven en
django.contrib.auth.User; rol, accesos y sucursales en StaffProfile.
"""
import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone

from authentication.models import ALL_ACCESS_OPTIONS, StaffProfile
from core import errors
from core.models import Branch

logger = logging.getLogger(__name__)


def get_profile(code) -> StaffProfile:
    try:
        return StaffProfile.objects.select_related("user").get(code=code)
    except StaffProfile.DoesNotExist:
        raise errors.NotFoundError("User not found")


def _check_username(username, exclude_user=None):
    qs = User.objects.filter(username__iexact=username)
    if exclude_user is not None:
        qs = qs.exclude(pk=exclude_user.pk)
    if qs.exists():
        raise errors.ConflictError("Username already exists")


def _clean_accesses(accesses):
    if not isinstance(accesses, list):
        raise errors.ValidationError("accesses must be a list")
    unknown = [a for a in accesses if a not in ALL_ACCESS_OPTIONS]
    if unknown:
        raise errors.ValidationError(f"Unknown accesses: {', '.join(map(str, unknown))}")
    return accesses


def _branches(names):
    if not isinstance(names, list):
        raise errors.ValidationError("assignedBranches must be a list")
    found = list(Branch.objects.filter(name__in=names))
    missing = set(names) - {b.name for b in found}
    if missing:
        raise errors.NotFoundError(f"Branch not found: {', '.join(sorted(missing))}")
    return found


def list_users():
    return [p.to_dict() for p in StaffProfile.objects.select_related("user").prefetch_related("assigned_branches")]


@transaction.atomic
def create_user(data) -> StaffProfile:
    username = (data.get("username") or "").strip()
    full_name = (data.get("fullName") or "").strip()
    password = data.get("password") or ""
    if not username or not full_name or not password:
        raise errors.ValidationError("Required fields missing")

    _check_username(username)
    accesses = _clean_accesses(data.get("accesses") or [])
    branches = _branches(data.get("assignedBranches") or [])
    role = data.get("role") or StaffProfile.ROLE_CUSTOM
    if role not in (StaffProfile.ROLE_ADMIN, StaffProfile.ROLE_CUSTOM):
        raise errors.ValidationError(f"Invalid role: {role}")

    user = User.objects.create_user(username=username, password=password)
    profile = StaffProfile.objects.create(
        user=user,
        code=StaffProfile.next_code(),
        full_name=full_name,
        role=role,
        accesses=accesses,
    )
    profile.assigned_branches.set(branches)
    logger.info("Usuario creado: %s (%s)", profile.code, username)
    return profile


@transaction.atomic
def update_user(code, data) -> StaffProfile:
    profile = get_profile(code)
    username = (data.get("username") or "").strip()
    full_name = (data.get("fullName") or "").strip()
    if not username or not full_name:
        raise errors.ValidationError("Required fields missing")

    user = profile.user
    _check_username(username, exclude_user=user)
    user.username = username
    if data.get("password"):
        user.set_password(data["password"])
    user.save()

    profile.full_name = full_name
    if data.get("status"):
        _set_status(profile, data["status"])
    # los admin tienen todo implícito: no se guardan listas
    if not profile.is_admin:
        profile.accesses = _clean_accesses(data.get("accesses") or [])
        profile.assigned_branches.set(_branches(data.get("assignedBranches") or []))
    profile.save()
    logger.info("Usuario actualizado: %s", profile.code)
    return profile


def _set_status(profile, status):
    if status not in (StaffProfile.STATUS_ACTIVE, StaffProfile.STATUS_INACTIVE):
        raise errors.ValidationError(f"Invalid status: {status}")
    if profile.is_admin and status == StaffProfile.STATUS_INACTIVE:
        raise errors.ValidationError("Admin users cannot be deactivated")
    profile.status = status


def change_status(code, status) -> StaffProfile:
    profile = get_profile(code)
    _set_status(profile, status)
    profile.save(update_fields=["status"])
    logger.info("Usuario %s -> %s", profile.code, status)
    return profile


@transaction.atomic
def delete_user(code):
    profile = get_profile(code)
    if profile.is_admin:
        raise errors.ValidationError("Admin users cannot be deleted")
    profile.user.delete()  # cascade al perfil
    logger.info("Usuario eliminado: %s", code)


def login(data) -> StaffProfile:
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    if not username or not password:
        raise errors.ValidationError("Username and password are required")

    invalid = errors.ValidationError("Invalid username or password")
    user = User.objects.filter(username__iexact=username).first()
    if user is None or not user.check_password(password):
        raise invalid
    try:
        profile = user.staff_profile
    except StaffProfile.DoesNotExist:
        raise invalid
    if profile.status != StaffProfile.STATUS_ACTIVE:
        raise errors.ValidationError("User account is inactive")

    now = timezone.now()
    profile.last_login = now
    profile.save(update_fields=["last_login"])
    user.last_login = now
    user.save(update_fields=["last_login"])
    logger.info("Login: %s", profile.code)
    return profile
