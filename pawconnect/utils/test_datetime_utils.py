# pawconnect/utils/test_datetime_utils.py
"""
시간 유틸리티 테스트

사용법: python -m pytest pawconnect/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone

import pawconnect.utils
from pawconnect.utils.datetime_utils import DateTimeUtils, EPOCH


def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc  # UTC로 정규화되어야 함

    assert DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00+09:00").hour == 1


def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'adopted_on': date(2020, 1, 15),
        'created_at': datetime(2024, 1, 15, 10, 30),
        'reviews': [
            {'created_at': datetime(2024, 1, 1)}
        ],
        'views': 3
    }

    converted = DateTimeUtils.for_firestore(test_data)

    # date는 datetime으로 변환되어야 함
    assert isinstance(converted['adopted_on'], datetime)
    assert converted['adopted_on'].tzinfo == timezone.utc
    assert converted['created_at'].tzinfo == timezone.utc
    assert converted['reviews'][0]['created_at'].tzinfo == timezone.utc
    assert converted['views'] == 3


def test_package_exports_firestore_helpers_only():
    assert pawconnect.utils.__all__ == ['DateTimeUtils', 'for_firestore']
    assert pawconnect.utils.for_firestore({'d': date(2020, 1, 15)}) == {
        'd': datetime(2020, 1, 15, tzinfo=timezone.utc)
    }


def test_from_firestore_normalizes_values():
    naive = datetime(2024, 1, 15, 10, 30)
    assert DateTimeUtils.from_firestore(naive) == naive.replace(tzinfo=timezone.utc)
    assert DateTimeUtils.from_firestore("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert DateTimeUtils.from_firestore("not a date") is None
    assert DateTimeUtils.from_firestore(None) is None


def test_sort_key_treats_missing_as_oldest():
    assert DateTimeUtils.sort_key(None) == EPOCH
    assert DateTimeUtils.sort_key(datetime(2024, 1, 1)) > EPOCH


def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")
