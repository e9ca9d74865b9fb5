# pawconnect/api/pets/test_permissions.py
import pytest

from pawconnect.api.pets.permissions import ensure_owner, is_owner
from pawconnect.core.errors import ForbiddenError
from pawconnect.models.pet import Pet, PetType


def _pet(owner_id):
    return Pet(pet_id="p1", owner_id=owner_id, name="Milo", type=PetType.CAT, breed="Persian", age=1)


def test_is_owner_normalizes_ids():
    assert is_owner("user-1", "user-1")
    assert is_owner(" user-1 ", "user-1")
    assert not is_owner("user-2", "user-1")
    assert not is_owner(None, "user-1")
    assert not is_owner("", "")


def test_ensure_owner_allows_owner():
    ensure_owner("user-1", _pet("user-1"))


def test_ensure_owner_rejects_other_user():
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_owner("user-2", _pet("user-1"))
    assert exc_info.value.status_code == 403
    assert exc_info.value.error_code == "FORBIDDEN"
