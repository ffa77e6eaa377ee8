import pytest
from django.contrib.auth.models import User

from authentication.models import ALL_ACCESS_OPTIONS, StaffProfile
from core import errors
from core.services import users

pytestmark = pytest.mark.django_db


def _create(**extra):
    data = {"username": "ana", "fullName": "Ana Pérez", "password": "s3cret",
            "accesses": ["Reports"], "assignedBranches": []}
    data.update(extra)
    return users.create_user(data)


def test_create_assigns_sequential_codes(branch_x):
    first = _create(assignedBranches=["BranchX"])
    second = _create(username="luis")

    assert first.code == "U001"
    assert second.code == "U002"
    assert first.to_dict()["assignedBranches"] == ["BranchX"]
    assert first.user.check_password("s3cret")


def test_username_is_unique_ignoring_case():
    _create()
    with pytest.raises(errors.ConflictError):
        _create(username="ANA")


def test_unknown_access_and_branch_are_rejected():
    with pytest.raises(errors.ValidationError):
        _create(accesses=["Everything"])
    with pytest.raises(errors.NotFoundError):
        _create(assignedBranches=["Nowhere"])


def test_admin_gets_everything(branch_x, branch_y):
    admin = _create(role="admin", accesses=[])
    data = admin.to_dict()
    assert data["accesses"] == ALL_ACCESS_OPTIONS
    assert data["assignedBranches"] == ["BranchX", "BranchY"]


def test_login_checks_password_and_status():
    profile = _create()

    assert users.login({"username": "Ana", "password": "s3cret"}).code == profile.code
    assert StaffProfile.objects.get(pk=profile.pk).last_login is not None

    with pytest.raises(errors.ValidationError, match="Invalid username or password"):
        users.login({"username": "ana", "password": "nope"})

    users.change_status(profile.code, "Inactive")
    with pytest.raises(errors.ValidationError, match="inactive"):
        users.login({"username": "ana", "password": "s3cret"})


def test_admin_cannot_be_deactivated_or_deleted():
    admin = _create(role="admin")
    with pytest.raises(errors.ValidationError):
        users.change_status(admin.code, "Inactive")
    with pytest.raises(errors.ValidationError):
        users.delete_user(admin.code)


def test_update_and_delete(branch_x):
    profile = _create()
    updated = users.update_user(profile.code, {
        "username": "ana.p", "fullName": "Ana P.", "accesses": ["Reports", "Dashboard"],
        "assignedBranches": ["BranchX"],
    })
    assert updated.user.username == "ana.p"
    assert updated.accesses == ["Reports", "Dashboard"]

    users.delete_user(profile.code)
    with pytest.raises(errors.NotFoundError):
        users.get_profile(profile.code)


def test_next_code_orders_numerically():
    for n, code in enumerate(["U998", "U999", "U1000"]):
        user = User.objects.create_user(username=f"seed{n}", password="x")
        StaffProfile.objects.create(user=user, code=code, full_name=f"Seed {n}")
    StaffProfile.objects.create(user=User.objects.create_user(username="legacy", password="x"),
                                code="ADMIN", full_name="Legacy")

    assert StaffProfile.next_code() == "U1001"
    assert _create().code == "U1001"
