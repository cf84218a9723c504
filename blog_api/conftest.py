# blog_api/conftest.py
"""
테스트 공용 픽스처

Firestore 대신 PostStore/UserStore와 같은 인터페이스를 가진 메모리 저장소를 주입하여
외부 서비스 없이 서비스/라우트 동작을 검증합니다.

사용법: python -m pytest -v
"""

import copy
import threading
import uuid
from dataclasses import asdict

import pytest
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from blog_api import create_app
from blog_api.models.user import User
from blog_api.services.storage_service import LocalStorageService


class InMemoryPostStore:
    """PostStore와 같은 메서드를 제공하는 메모리 저장소. 문서 단위 연산은 락으로 원자성을 보장합니다."""

    def __init__(self):
        self.docs = {}
        self.lock = threading.Lock()

    def _copy(self, post_id):
        return dict(copy.deepcopy(self.docs[post_id]), post_id=post_id)

    def find_all(self):
        with self.lock:
            return [self._copy(post_id) for post_id in self.docs]

    def find_by_id(self, post_id):
        with self.lock:
            return self._copy(post_id) if post_id in self.docs else None

    def find_one_and_increment_views(self, post_id):
        with self.lock:
            if post_id not in self.docs:
                return None
            self.docs[post_id]['views_count'] += 1
            return self._copy(post_id)

    def insert(self, data):
        post_id = uuid.uuid4().hex[:20]
        with self.lock:
            self.docs[post_id] = copy.deepcopy(data)
        return dict(data, post_id=post_id)

    def update_one(self, post_id, fields):
        with self.lock:
            if post_id not in self.docs:
                return False
            self.docs[post_id].update(copy.deepcopy(fields))
            return True

    def delete_one(self, post_id):
        with self.lock:
            return 1 if self.docs.pop(post_id, None) is not None else 0

    def push_comment(self, post_id, comment):
        with self.lock:
            if post_id not in self.docs:
                return False
            self.docs[post_id]['comments'].append(copy.deepcopy(comment))
            self.docs[post_id]['comment_ids'].append(comment['comment_id'])
            return True

    def pull_comment(self, post_id, comment_id):
        with self.lock:
            if post_id not in self.docs:
                return None
            doc = self.docs[post_id]
            remaining = [c for c in doc['comments'] if c['comment_id'] != comment_id]
            removed = len(doc['comments']) - len(remaining)
            doc['comments'] = remaining
            doc['comment_ids'] = [c['comment_id'] for c in remaining]
            return removed

    def find_by_comment_id(self, comment_id):
        with self.lock:
            return [self._copy(post_id) for post_id, doc in self.docs.items() if comment_id in doc['comment_ids']]


class InMemoryUserStore:
    """UserStore와 같은 메서드를 제공하는 메모리 저장소."""

    def __init__(self):
        self.docs = {}

    def find_by_id(self, user_id):
        return copy.deepcopy(self.docs.get(user_id))

    def find_by_email(self, email):
        for user in self.docs.values():
            if user['email'] == email:
                return copy.deepcopy(user)
        return None

    def find_many(self, user_ids):
        return {uid: copy.deepcopy(self.docs[uid]) for uid in set(user_ids) if uid in self.docs}

    def insert(self, data):
        self.docs[data['user_id']] = copy.deepcopy(data)
        return data


@pytest.fixture
def post_store():
    return InMemoryPostStore()


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def author(user_store):
    """게시글/댓글 작성자로 사용할 기본 사용자"""
    user = User(
        user_id='user-1',
        email='writer@example.com',
        full_name='Blog Writer',
        password_hash=generate_password_hash('secret123'),
    )
    return user_store.insert(asdict(user))


@pytest.fixture
def local_storage(tmp_path):
    storage = LocalStorageService()
    storage.upload_folder = str(tmp_path / 'uploads')
    return storage


@pytest.fixture
def app(post_store, user_store, tmp_path):
    app = create_app('testing', stores={'posts': post_store, 'users': user_store})
    app.services['storage'].upload_folder = str(tmp_path / 'uploads')
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app, author):
    with app.app_context():
        token = create_access_token(identity=author['user_id'])
    return {'Authorization': f'Bearer {token}'}
