# pawconnect/api/pets/permissions.py
from pawconnect.core.errors import ForbiddenError
from pawconnect.models.pet import Pet


def is_owner(caller_id, owner_id) -> bool:
    """두 ID를 같은 문자열 형태로 맞춰 비교합니다."""
    if caller_id is None or owner_id is None:
        return False
    caller, owner = str(caller_id).strip(), str(owner_id).strip()
    return bool(caller) and caller == owner


def ensure_owner(caller_id, pet: Pet) -> None:
    """
    수정/삭제 요청자가 반려동물의 소유자인지 확인합니다.
    존재 여부 확인(404)은 호출 전에 끝나 있어야 합니다.

    :raises ForbiddenError: 요청자가 소유자가 아닌 경우
    """
    if not is_owner(caller_id, pet.owner_id):
        raise ForbiddenError("Not authorized to modify this pet")
