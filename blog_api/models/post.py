# blog_api/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from blog_api.utils.datetime_utils import DateTimeUtils

@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    post_id는 문서 ID와 같으며 저장소가 생성합니다.
    """
    title: str
    text: str
    user: str                   # 작성자 user_id (조회 시 사용자 정보로 확장)
    image_url: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    views_count: int = 0
    comments: List[Dict[str, Any]] = field(default_factory=list)
    comment_ids: List[str] = field(default_factory=list)  # array_contains 조회용
    post_id: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
