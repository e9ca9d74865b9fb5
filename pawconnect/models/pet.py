# pawconnect/models/pet.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pawconnect.models.location import Location
from pawconnect.models.review import Review
from pawconnect.models.user import User
from pawconnect.utils.datetime_utils import DateTimeUtils


class PetType(Enum):
    DOG = "dog"
    CAT = "cat"
    RABBIT = "rabbit"
    BIRD = "bird"
    OTHER = "other"


class PetSize(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class PetGender(Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"


class AdoptionStatus(Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    ADOPTED = "adopted"


def _enum_or_default(enum_cls, value, default=None):
    if value is None or value == "":
        return default
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass
class HealthInfo:
    vaccinated: bool = False
    neutered: bool = False
    medical_history: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'HealthInfo':
        data = data or {}
        return cls(
            vaccinated=bool(data.get('vaccinated', False)),
            neutered=bool(data.get('neutered', False)),
            medical_history=data.get('medical_history') or ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vaccinated": self.vaccinated,
            "neutered": self.neutered,
            "medical_history": self.medical_history
        }


@dataclass
class Pet:
    """
    Firestore 'pets' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    owner_id는 생성 이후 변경되지 않습니다.
    """
    pet_id: str
    owner_id: str
    name: str
    type: PetType
    breed: str
    age: int
    size: Optional[PetSize] = None
    color: str = ""
    gender: Optional[PetGender] = None
    description: str = ""
    image_url: str = ""
    images: List[str] = field(default_factory=list)
    location: Location = field(default_factory=Location)
    adoption_status: AdoptionStatus = AdoptionStatus.AVAILABLE
    adoption_requirements: str = ""
    tags: List[str] = field(default_factory=list)
    health_info: HealthInfo = field(default_factory=HealthInfo)
    reviews: List[Review] = field(default_factory=list)
    views: int = 0
    favorite_count: int = 0
    adoption_requests: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Pet':
        try:
            age = int(data.get('age') or 0)
        except (TypeError, ValueError):
            age = 0
        return cls(
            pet_id=data['pet_id'],
            owner_id=str(data.get('owner_id') or ""),
            name=data.get('name') or "",
            type=_enum_or_default(PetType, data.get('type'), PetType.OTHER),
            breed=data.get('breed') or "",
            age=age,
            size=_enum_or_default(PetSize, data.get('size')),
            color=data.get('color') or "",
            gender=_enum_or_default(PetGender, data.get('gender')),
            description=data.get('description') or "",
            image_url=data.get('image_url') or "",
            images=list(data.get('images') or []),
            location=Location.from_dict(data.get('location')),
            adoption_status=_enum_or_default(AdoptionStatus, data.get('adoption_status'), AdoptionStatus.AVAILABLE),
            adoption_requirements=data.get('adoption_requirements') or "",
            tags=list(data.get('tags') or []),
            health_info=HealthInfo.from_dict(data.get('health_info')),
            reviews=[Review.from_dict(r) for r in data.get('reviews') or []],
            views=data.get('views') or 0,
            favorite_count=data.get('favorite_count') or 0,
            adoption_requests=data.get('adoption_requests') or 0,
            created_at=DateTimeUtils.from_firestore(data.get('created_at')) or DateTimeUtils.now(),
            updated_at=DateTimeUtils.from_firestore(data.get('updated_at')) or DateTimeUtils.now()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pet_id": self.pet_id,
            "owner_id": self.owner_id,
            "name": self.name,
            "type": self.type.value,
            "breed": self.breed,
            "age": self.age,
            "size": self.size.value if self.size else None,
            "color": self.color,
            "gender": self.gender.value if self.gender else None,
            "description": self.description,
            "image_url": self.image_url,
            "images": list(self.images),
            "location": self.location.to_dict(),
            "adoption_status": self.adoption_status.value,
            "adoption_requirements": self.adoption_requirements,
            "tags": list(self.tags),
            "health_info": self.health_info.to_dict(),
            "reviews": [r.to_dict() for r in self.reviews],
            "views": self.views,
            "favorite_count": self.favorite_count,
            "adoption_requests": self.adoption_requests,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }


@dataclass
class PetWithOwner:
    """
    목록/상세 조회 응답용 프로젝션.
    저장된 Pet에 소유자 공개 정보를 결합한 형태이며, 소유자 문서가 없으면 owner는 None입니다.
    """
    pet: Pet
    owner: Optional[User] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.pet.to_dict()
        data['owner'] = self.owner.to_dict() if self.owner else None
        return data
