# blog_api/models/comment.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from blog_api.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    Post 문서의 'comments' 배열에 내장되는 댓글 구조.
    독립된 컬렉션이 없으며 게시글 업데이트로만 생성/삭제됩니다.
    """
    text: str
    user: str  # 댓글 작성자 user_id
    comment_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created: datetime = field(default_factory=DateTimeUtils.now)
