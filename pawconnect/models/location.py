# pawconnect/models/location.py
from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class Location:
    """사용자/반려동물 문서에 내장되는 지역 정보."""
    city: str = ""
    state: str = ""
    country: str = ""

    @classmethod
    def from_dict(cls, data: Any, default_country: str = "") -> 'Location':
        # 초기 데이터는 location을 단일 문자열로 저장했으므로 도시명으로 취급합니다.
        if isinstance(data, str):
            return cls(city=data, country=default_country)
        if not isinstance(data, dict):
            return cls(country=default_country)
        return cls(
            city=data.get('city') or "",
            state=data.get('state') or "",
            country=data.get('country') or default_country
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
