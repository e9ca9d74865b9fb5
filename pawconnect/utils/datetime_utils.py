# pawconnect/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간/날짜 처리를 위한 유틸리티 모듈

- 모든 시간은 UTC timezone-aware datetime으로 다룹니다.
- Firestore 저장/조회 시 변환 규칙을 한 곳에 모읍니다.
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any, Optional
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

# 정렬 시 created_at이 없는 문서를 가장 오래된 것으로 취급하기 위한 기준값
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 UTC datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO datetime 형식입니다: {iso_string}")

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, date) and not isinstance(obj, datetime):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        elif isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 값을 timezone-aware datetime으로 정규화

        DatetimeWithNanoseconds는 datetime의 하위 클래스이므로 같은 규칙으로 처리됩니다.
        문자열로 저장된 값은 ISO 포맷으로 파싱을 시도합니다.
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, str):
            try:
                return DateTimeUtils.parse_iso_datetime(obj)
            except ValueError:
                return None
        return None

    @staticmethod
    def sort_key(value: Optional[datetime]) -> datetime:
        """정렬용 키. 값이 없으면 EPOCH를 반환합니다."""
        return DateTimeUtils.from_firestore(value) or EPOCH


# 서비스 모듈에서 쓰는 단축 함수
def for_firestore(obj: Any) -> Any:
    """Firestore 저장용 변환"""
    return DateTimeUtils.for_firestore(obj)
