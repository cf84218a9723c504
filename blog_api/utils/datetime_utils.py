# blog_api/utils/datetime_utils.py
"""
게시글/댓글/사용자 문서의 시간 필드를 일관되게 다루기 위한 유틸리티 모듈

- 백엔드의 모든 시간은 UTC timezone-aware datetime으로 통일합니다.
- Firestore 저장 전/조회 후 변환을 한 곳에서 처리합니다.
"""

from datetime import datetime, date, timezone, time
from typing import Any


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {key: DateTimeUtils.for_firestore(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터를 Python 객체로 정규화합니다.
        DatetimeWithNanoseconds는 일반 UTC datetime으로 변환됩니다.
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                obj = obj.replace(tzinfo=timezone.utc)
            return datetime.fromtimestamp(obj.timestamp(), tz=timezone.utc)
        if isinstance(obj, dict):
            return {key: DateTimeUtils.from_firestore(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj

