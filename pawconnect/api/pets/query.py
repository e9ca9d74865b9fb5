# pawconnect/api/pets/query.py
"""
반려동물 목록 조회 엔진

- 동등 조건(입양 상태, 종류, 크기, 접종 여부, 소유자)은 Firestore where 절로 내려보냅니다.
- Firestore가 지원하지 않는 부분 문자열/범위 조건(품종, 도시, 나이, 키워드)은 메모리에서 적용합니다.
- 필터링 후 created_at 내림차순 정렬, 전체 개수 계산, 페이지 슬라이스, 소유자 결합 순으로 처리합니다.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pawconnect.models.pet import Pet, PetWithOwner, AdoptionStatus
from pawconnect.models.user import User
from pawconnect.utils.datetime_utils import DateTimeUtils

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
TRUTHY_FLAGS = ('true', '1', 'yes')


def parse_int(value: Any) -> Optional[int]:
    """정수로 해석할 수 없는 값은 None(조건 없음)으로 취급합니다."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle.lower() in haystack.lower()


def page_count(total: int, limit: int) -> int:
    if total <= 0 or limit <= 0:
        return 0
    return math.ceil(total / limit)


@dataclass
class PetQuery:
    """목록 조회 조건. 모든 조건은 AND로 결합됩니다."""
    type: Optional[str] = None
    breed: Optional[str] = None
    city: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    size: Optional[str] = None
    vaccinated_only: bool = False
    keyword: Optional[str] = None
    owner_id: Optional[str] = None
    available_only: bool = True
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_args(cls, args: Mapping[str, Any], default_limit: int = DEFAULT_PAGE_SIZE,
                  max_limit: int = MAX_PAGE_SIZE) -> 'PetQuery':
        """
        쿼리 스트링으로부터 조회 조건을 만듭니다.
        빈 문자열과 해석할 수 없는 숫자는 무시하고, page/limit은 유효 범위로 보정합니다.
        """
        page = parse_int(args.get('page'))
        limit = parse_int(args.get('limit'))
        if limit is None or limit < 1:
            limit = default_limit

        vaccinated = _clean(args.get('vaccinated'))
        return cls(
            type=_clean(args.get('type')),
            breed=_clean(args.get('breed')),
            city=_clean(args.get('city')),
            min_age=parse_int(_clean(args.get('minAge'))),
            max_age=parse_int(_clean(args.get('maxAge'))),
            size=_clean(args.get('size')),
            vaccinated_only=bool(vaccinated) and vaccinated.lower() in TRUTHY_FLAGS,
            keyword=_clean(args.get('q')),
            page=page if page and page > 0 else 1,
            limit=min(limit, max_limit)
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def equality_filters(self) -> List[Tuple[str, str, Any]]:
        filters = []
        if self.available_only:
            filters.append(('adoption_status', '==', AdoptionStatus.AVAILABLE.value))
        if self.type:
            filters.append(('type', '==', self.type))
        if self.size:
            filters.append(('size', '==', self.size))
        if self.vaccinated_only:
            filters.append(('health_info.vaccinated', '==', True))
        if self.owner_id:
            filters.append(('owner_id', '==', self.owner_id))
        return filters

    def matches(self, pet: Pet) -> bool:
        # 동등 조건도 다시 확인하므로 저장소가 where를 무시해도 결과가 같습니다.
        if self.available_only and pet.adoption_status != AdoptionStatus.AVAILABLE:
            return False
        if self.type and pet.type.value != self.type:
            return False
        if self.size and (pet.size is None or pet.size.value != self.size):
            return False
        if self.vaccinated_only and not pet.health_info.vaccinated:
            return False
        if self.owner_id and pet.owner_id.strip() != self.owner_id.strip():
            return False
        if self.breed and not _contains(pet.breed, self.breed):
            return False
        if self.city and not _contains(pet.location.city, self.city):
            return False
        if self.min_age is not None and pet.age < self.min_age:
            return False
        if self.max_age is not None and pet.age > self.max_age:
            return False
        if self.keyword:
            fields = [pet.name, pet.breed, pet.description] + list(pet.tags)
            if not any(_contains(f, self.keyword) for f in fields):
                return False
        return True


@dataclass
class PageResult:
    items: List[PetWithOwner]
    total: int
    pages: int
    page: int
    limit: int


class ListingQueryEngine:
    """pets/users 컬렉션 참조를 받아 조회 조건을 실행합니다."""

    def __init__(self, pets_ref, users_ref):
        self.pets_ref = pets_ref
        self.users_ref = users_ref

    def _fetch(self, query: PetQuery) -> List[Pet]:
        ref = self.pets_ref
        for field_path, op, value in query.equality_filters():
            ref = ref.where(field_path, op, value)

        pets = []
        for doc in ref.stream():
            data = doc.to_dict()
            data.setdefault('pet_id', doc.id)
            pets.append(Pet.from_dict(data))
        return pets

    def find(self, query: PetQuery) -> List[Pet]:
        """조건에 맞는 모든 반려동물을 최신 등록순으로 반환합니다."""
        matched = [pet for pet in self._fetch(query) if query.matches(pet)]
        matched.sort(key=lambda pet: DateTimeUtils.sort_key(pet.created_at), reverse=True)
        return matched

    def run(self, query: PetQuery) -> PageResult:
        matched = self.find(query)
        total = len(matched)
        page_items = matched[query.offset:query.offset + query.limit]
        return PageResult(
            items=self.expand_owners(page_items),
            total=total,
            pages=page_count(total, query.limit),
            page=query.page,
            limit=query.limit
        )

    def expand_owners(self, pets: Iterable[Pet]) -> List[PetWithOwner]:
        """소유자 문서를 한 번씩만 조회해 결합합니다. 삭제된 소유자는 None이 됩니다."""
        pets = list(pets)
        owners: Dict[str, Optional[User]] = {}
        for owner_id in {pet.owner_id for pet in pets if pet.owner_id}:
            doc = self.users_ref.document(owner_id).get()
            if doc.exists:
                data = doc.to_dict()
                data.setdefault('user_id', doc.id)
                owners[owner_id] = User.from_dict(data)
            else:
                owners[owner_id] = None
        return [PetWithOwner(pet=pet, owner=owners.get(pet.owner_id)) for pet in pets]
