# pawconnect/models/review.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from pawconnect.utils.datetime_utils import DateTimeUtils


@dataclass
class Review:
    """
    반려동물 문서의 reviews, 사용자 문서의 ratings.reviews에 내장되는 후기 구조.
    review_id가 있으므로 같은 내용의 후기도 서로 다른 항목으로 저장됩니다.
    """
    reviewer: str
    rating: int
    comment: str
    review_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Review':
        return cls(
            reviewer=str(data.get('reviewer') or ""),
            rating=int(data.get('rating') or 0),
            comment=data.get('comment') or "",
            review_id=data.get('review_id') or str(uuid.uuid4()),
            created_at=DateTimeUtils.from_firestore(data.get('created_at')) or DateTimeUtils.now()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "review_id": self.review_id,
            "reviewer": self.reviewer,
            "rating": self.rating,
            "comment": self.comment,
            "created_at": self.created_at
        }
