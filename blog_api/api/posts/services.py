# blog_api/api/posts/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from blog_api.models.post import Post
from blog_api.models.comment import Comment
from blog_api.services.storage_service import StorageService
from blog_api.utils.datetime_utils import DateTimeUtils


class PostService:
    """
    게시글 및 게시글에 내장된 댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 저장소 어댑터(PostStore, UserStore)와 이미지 저장소는 blog_api/__init__.py에서 주입됩니다.
    - 게시글이 없을 때는 None/False를 반환하고, 저장소 오류는 로그를 남긴 뒤 그대로 전파합니다.
    """
    def __init__(self, post_store, user_store, storage_service: Optional[StorageService] = None):
        self.post_store = post_store
        self.user_store = user_store
        self.storage_service = storage_service

    # --- 작성자 정보 확장 ---
    def _populate_users(self, posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """게시글과 댓글의 user 필드를 user_id에서 사용자 정보로 바꿉니다. 없는 사용자는 None입니다."""
        user_ids = {post.get('user') for post in posts}
        user_ids.update(c.get('user') for post in posts for c in post.get('comments', []))
        users = self.user_store.find_many(uid for uid in user_ids if uid)

        for post in posts:
            post['user'] = users.get(post.get('user'))
            post['comments'] = [dict(c, user=users.get(c.get('user'))) for c in post.get('comments', [])]
        return posts

    # --- 게시글 CRUD ---
    def get_all(self) -> List[Dict[str, Any]]:
        """모든 게시글을 작성자 정보와 함께 반환합니다."""
        try:
            return self._populate_users(self.post_store.find_all())
        except Exception as e:
            logging.error(f"게시글 목록 조회 실패: {e}", exc_info=True)
            raise

    def get_one(self, post_id: str) -> Optional[Dict[str, Any]]:
        """
        조회수를 1 증가시키고 증가된 게시글을 반환합니다.
        증가와 조회는 저장소의 단일 문서 트랜잭션으로 함께 처리됩니다.
        """
        try:
            post = self.post_store.find_one_and_increment_views(post_id)
            if not post:
                return None
            return self._populate_users([post])[0]
        except Exception as e:
            logging.error(f"게시글 조회 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise

    def get_tags(self) -> List[List[str]]:
        """게시글별 태그 목록을 반환합니다. (중복 제거나 평탄화는 하지 않습니다)"""
        try:
            return [list(post.get('tags') or []) for post in self.post_store.find_all()]
        except Exception as e:
            logging.error(f"태그 목록 조회 실패: {e}", exc_info=True)
            raise

    def get_comments(self) -> List[List[Dict[str, Any]]]:
        """게시글별 댓글 목록을 댓글 작성자 정보와 함께 반환합니다."""
        try:
            posts = self._populate_users(self.post_store.find_all())
            return [post.get('comments', []) for post in posts]
        except Exception as e:
            logging.error(f"댓글 목록 조회 실패: {e}", exc_info=True)
            raise

    def create_post(self, user_id: str, title: str, text: str,
                    image_url: Optional[str] = None, tags: Optional[List[str]] = None) -> Dict[str, Any]:
        """새로운 게시글을 빈 댓글 목록, 조회수 0으로 생성합니다."""
        try:
            new_post = Post(title=title, text=text, user=user_id, image_url=image_url, tags=list(tags or []))
            data = asdict(new_post)
            data.pop('post_id')
            stored = self.post_store.insert(data)
            return self._populate_users([stored])[0]
        except Exception as e:
            logging.error(f"게시글 생성 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise

    def update_post(self, post_id: str, user_id: str, title: str, text: str,
                    image_url: Optional[str] = None, tags: Optional[List[str]] = None) -> bool:
        """
        제목/본문/이미지/태그/작성자 필드를 덮어씁니다. 댓글과 조회수는 변경하지 않습니다.
        일치하는 게시글이 없으면 False를 반환합니다.
        """
        update_data = {
            "title": title,
            "text": text,
            "image_url": image_url,
            "tags": list(tags or []),
            "user": user_id,
            "updated_at": DateTimeUtils.now(),
        }
        try:
            return self.post_store.update_one(post_id, update_data)
        except Exception as e:
            logging.error(f"게시글 수정 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise

    def delete_post(self, post_id: str) -> bool:
        """
        게시글을 삭제합니다. 이미지가 있으면 문서 삭제 전에 저장소에서 먼저 지웁니다.
        - 이미 없는 이미지 파일은 무시합니다.
        - 그 외의 파일 삭제 오류가 나면 게시글은 삭제하지 않고 예외를 전파합니다.
        """
        try:
            post = self.post_store.find_by_id(post_id)
            if not post:
                return False

            image_url = post.get('image_url')
            if image_url and self.storage_service:
                self.storage_service.delete_file(image_url)

            deleted_count = self.post_store.delete_one(post_id)
            if not deleted_count:
                return False
            logging.info(f"게시글 삭제 완료 (post_id: {post_id})")
            return True
        except Exception as e:
            logging.error(f"게시글 삭제 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise

    # --- 내장 댓글 ---
    def add_comment(self, post_id: str, user_id: str, text: str) -> Optional[Dict[str, Any]]:
        """
        게시글의 comments 배열 끝에 댓글을 원자적으로 추가합니다.
        게시글이 없으면 None을 반환합니다.
        """
        try:
            comment = asdict(Comment(text=text, user=user_id))
            if not self.post_store.push_comment(post_id, comment):
                return None
            return comment
        except Exception as e:
            logging.error(f"댓글 추가 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise

    def delete_comment(self, post_id: str, comment_id: str) -> bool:
        """
        게시글에서 comment_id와 일치하는 댓글을 제거합니다.
        게시글이 없거나 일치하는 댓글이 없으면 False를 반환합니다.
        """
        try:
            removed = self.post_store.pull_comment(post_id, comment_id)
            return bool(removed)
        except Exception as e:
            logging.error(f"댓글 삭제 실패 (post_id: {post_id}, comment_id: {comment_id}): {e}", exc_info=True)
            raise

    def get_posts_by_comment_id(self, comment_id: str) -> List[Dict[str, Any]]:
        """해당 댓글을 포함한 게시글 목록을 반환합니다. 없으면 빈 리스트입니다."""
        try:
            return self._populate_users(self.post_store.find_by_comment_id(comment_id))
        except Exception as e:
            logging.error(f"댓글 ID로 게시글 조회 실패 (comment_id: {comment_id}): {e}", exc_info=True)
            raise
