# blog_api/services/firestore_service.py
import logging
from typing import Optional, Dict, Any, List, Iterable

from firebase_admin import firestore
from google.api_core.exceptions import NotFound

from blog_api.utils.datetime_utils import DateTimeUtils


class PostStore:
    """
    'posts' 컬렉션에 대한 Firestore 접근을 담당하는 저장소 어댑터.
    - 조회수 증가, 댓글 추가/삭제는 모두 단일 문서에 대한 원자적 연산으로 처리합니다.
    - 여러 문서에 걸친 트랜잭션은 사용하지 않습니다.
    """
    def __init__(self, db):
        self.db = db
        self.posts_ref = self.db.collection('posts')

    @staticmethod
    def _to_dict(doc) -> Dict[str, Any]:
        data = DateTimeUtils.from_firestore(doc.to_dict())
        data['post_id'] = doc.id
        return data

    def _document(self, post_id: str):
        """
        post_id에 해당하는 문서 참조를 반환합니다.
        'a/b'처럼 문서 ID로 쓸 수 없는 값이면 Firestore가 ValueError를 내므로 None을 반환합니다.
        """
        try:
            return self.posts_ref.document(post_id)
        except ValueError:
            logging.warning(f"유효하지 않은 게시글 ID입니다: {post_id!r}")
            return None

    def find_all(self) -> List[Dict[str, Any]]:
        """저장소 기본 순서(문서 ID 순)로 모든 게시글을 반환합니다."""
        return [self._to_dict(doc) for doc in self.posts_ref.stream()]

    def find_by_id(self, post_id: str) -> Optional[Dict[str, Any]]:
        post_ref = self._document(post_id)
        if post_ref is None:
            return None
        doc = post_ref.get()
        if not doc.exists:
            return None
        return self._to_dict(doc)

    def find_one_and_increment_views(self, post_id: str) -> Optional[Dict[str, Any]]:
        """
        트랜잭션 안에서 게시글을 읽고 views_count를 1 증가시킨 뒤,
        증가가 반영된 게시글 데이터를 반환합니다.
        동시 요청으로 충돌하면 Firestore가 트랜잭션을 재시도하므로 누락 없이 집계됩니다.
        """
        post_ref = self._document(post_id)
        if post_ref is None:
            return None
        transaction = self.db.transaction()

        @firestore.transactional
        def _increment_in_transaction(transaction, post_ref):
            snapshot = post_ref.get(transaction=transaction)
            if not snapshot.exists:
                return None
            transaction.update(post_ref, {'views_count': firestore.Increment(1)})
            data = self._to_dict(snapshot)
            data['views_count'] = data.get('views_count', 0) + 1
            return data

        return _increment_in_transaction(transaction, post_ref)

    def insert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """자동 생성 ID로 새 문서를 저장하고, post_id가 채워진 데이터를 반환합니다."""
        doc_ref = self.posts_ref.document()
        data = dict(data, post_id=doc_ref.id)
        doc_ref.set(DateTimeUtils.for_firestore({k: v for k, v in data.items() if k != 'post_id'}))
        logging.info(f"게시글 저장 성공 (post_id: {doc_ref.id})")
        return data

    def update_one(self, post_id: str, fields: Dict[str, Any]) -> bool:
        """
        지정한 필드만 덮어씁니다. 일치하는 문서가 없으면 False를 반환합니다.
        Firestore의 update()는 문서가 없으면 NotFound를 발생시키므로 이를 매칭 실패로 해석합니다.
        """
        post_ref = self._document(post_id)
        if post_ref is None:
            return False
        try:
            post_ref.update(DateTimeUtils.for_firestore(fields))
            return True
        except NotFound:
            return False

    def delete_one(self, post_id: str) -> int:
        """문서를 삭제하고 삭제된 문서 수(0 또는 1)를 반환합니다."""
        post_ref = self._document(post_id)
        if post_ref is None:
            return 0
        transaction = self.db.transaction()

        @firestore.transactional
        def _delete_in_transaction(transaction, post_ref):
            snapshot = post_ref.get(transaction=transaction)
            if not snapshot.exists:
                return 0
            transaction.delete(post_ref)
            return 1

        return _delete_in_transaction(transaction, post_ref)

    def push_comment(self, post_id: str, comment: Dict[str, Any]) -> bool:
        """
        comments 배열 끝에 댓글을 추가합니다.
        comments와 comment_ids를 한 번의 update로 함께 변경하여 단일 문서 원자성을 유지합니다.
        """
        fields = {
            'comments': firestore.ArrayUnion([DateTimeUtils.for_firestore(comment)]),
            'comment_ids': firestore.ArrayUnion([comment['comment_id']]),
            'updated_at': DateTimeUtils.now(),
        }
        post_ref = self._document(post_id)
        if post_ref is None:
            return False
        try:
            post_ref.update(fields)
            return True
        except NotFound:
            return False

    def pull_comment(self, post_id: str, comment_id: str) -> Optional[int]:
        """
        comment_id와 일치하는 모든 댓글을 제거합니다.
        게시글이 없으면 None, 있으면 제거된 댓글 수를 반환합니다.
        ArrayRemove는 요소 전체가 일치해야 하므로 트랜잭션 안에서 읽고 다시 씁니다.
        """
        post_ref = self._document(post_id)
        if post_ref is None:
            return None
        transaction = self.db.transaction()

        @firestore.transactional
        def _pull_in_transaction(transaction, post_ref):
            snapshot = post_ref.get(transaction=transaction)
            if not snapshot.exists:
                return None
            comments = (snapshot.to_dict() or {}).get('comments') or []
            remaining = [c for c in comments if c.get('comment_id') != comment_id]
            removed = len(comments) - len(remaining)
            if removed:
                transaction.update(post_ref, {
                    'comments': remaining,
                    'comment_ids': [c.get('comment_id') for c in remaining],
                    'updated_at': DateTimeUtils.now(),
                })
            return removed

        return _pull_in_transaction(transaction, post_ref)

    def find_by_comment_id(self, comment_id: str) -> List[Dict[str, Any]]:
        """comments 배열에 해당 ID의 댓글을 가진 모든 게시글을 반환합니다."""
        docs = self.posts_ref.where('comment_ids', 'array_contains', comment_id).stream()
        return [self._to_dict(doc) for doc in docs]


class UserStore:
    """'users' 컬렉션에 대한 Firestore 접근을 담당하는 저장소 어댑터."""
    def __init__(self, db):
        self.db = db
        self.users_ref = self.db.collection('users')

    @staticmethod
    def _to_dict(doc) -> Dict[str, Any]:
        data = DateTimeUtils.from_firestore(doc.to_dict())
        data['user_id'] = doc.id
        return data

    def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            return None
        return self._to_dict(doc)

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        query = self.users_ref.where('email', '==', email).limit(1).stream()
        user_doc = next(query, None)
        if not user_doc:
            return None
        return self._to_dict(user_doc)

    def find_many(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """여러 사용자를 한 번에 조회하여 {user_id: user} 형태로 반환합니다."""
        refs = [self.users_ref.document(user_id) for user_id in set(user_ids) if user_id]
        if not refs:
            return {}
        return {doc.id: self._to_dict(doc) for doc in self.db.get_all(refs) if doc.exists}

    def insert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user_id = data['user_id']
        self.users_ref.document(user_id).set(
            DateTimeUtils.for_firestore({k: v for k, v in data.items() if k != 'user_id'})
        )
        logging.info(f"사용자 저장 성공 (user_id: {user_id})")
        return data
