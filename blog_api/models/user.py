# blog_api/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from blog_api.utils.datetime_utils import DateTimeUtils

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    user_id: str
    email: str
    full_name: str
    password_hash: str
    avatar_url: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
