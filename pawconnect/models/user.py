# pawconnect/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pawconnect.models.location import Location
from pawconnect.models.review import Review
from pawconnect.utils.datetime_utils import DateTimeUtils

DEFAULT_USER_COUNTRY = "India"


class UserType(Enum):
    ADOPTER = "adopter"
    PET_OWNER = "pet_owner"
    BOTH = "both"


@dataclass
class Ratings:
    """사용자가 받은 평점 집계."""
    average: float = 0
    count: int = 0
    reviews: List[Review] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Ratings':
        data = data or {}
        return cls(
            average=data.get('average') or 0,
            count=data.get('count') or 0,
            reviews=[Review.from_dict(r) for r in data.get('reviews') or []]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average": self.average,
            "count": self.count,
            "reviews": [r.to_dict() for r in self.reviews]
        }


@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    password_hash는 Google 계정으로 가입한 경우 None입니다.
    """
    user_id: str
    name: str
    email: str
    password_hash: Optional[str] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
    bio: str = ""
    location: Location = field(default_factory=lambda: Location(country=DEFAULT_USER_COUNTRY))
    user_type: UserType = UserType.BOTH
    favorites: List[str] = field(default_factory=list)
    ratings: Ratings = field(default_factory=Ratings)
    is_google_auth: bool = False
    google_id: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        try:
            user_type = UserType(data.get('user_type') or UserType.BOTH.value)
        except ValueError:
            user_type = UserType.BOTH
        return cls(
            user_id=data['user_id'],
            name=data.get('name') or "",
            email=data.get('email') or "",
            password_hash=data.get('password_hash'),
            phone=data.get('phone'),
            profile_picture=data.get('profile_picture'),
            bio=data.get('bio') or "",
            location=Location.from_dict(data.get('location'), default_country=DEFAULT_USER_COUNTRY),
            user_type=user_type,
            favorites=[str(f) for f in data.get('favorites') or []],
            ratings=Ratings.from_dict(data.get('ratings')),
            is_google_auth=bool(data.get('is_google_auth', False)),
            google_id=data.get('google_id'),
            created_at=DateTimeUtils.from_firestore(data.get('created_at')) or DateTimeUtils.now(),
            updated_at=DateTimeUtils.from_firestore(data.get('updated_at')) or DateTimeUtils.now()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리. password_hash를 포함하므로 응답에 직접 사용하지 않습니다."""
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "password_hash": self.password_hash,
            "phone": self.phone,
            "profile_picture": self.profile_picture,
            "bio": self.bio,
            "location": self.location.to_dict(),
            "user_type": self.user_type.value,
            "favorites": list(self.favorites),
            "ratings": self.ratings.to_dict(),
            "is_google_auth": self.is_google_auth,
            "google_id": self.google_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }

    def has_favorite(self, pet_id: str) -> bool:
        return str(pet_id) in self.favorites
