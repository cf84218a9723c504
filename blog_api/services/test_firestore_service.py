# blog_api/services/test_firestore_service.py
"""
Firestore 저장소 어댑터 테스트 (Firestore 클라이언트는 MagicMock으로 대체)

사용법: python -m pytest blog_api/services/test_firestore_service.py -v
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from google.api_core.exceptions import NotFound

from blog_api.services import firestore_service
from blog_api.services.firestore_service import PostStore, UserStore


def _snapshot(doc_id, data, exists=True):
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = exists
    snapshot.to_dict.return_value = data
    return snapshot


@pytest.fixture(autouse=True)
def plain_transactions(monkeypatch):
    """트랜잭션 재시도 래퍼 없이 내부 함수를 그대로 실행"""
    monkeypatch.setattr(firestore_service.firestore, "transactional", lambda fn: fn)


@pytest.fixture
def db():
    return MagicMock()


@pytest.fixture
def store(db):
    return PostStore(db)


def test_find_all_sets_post_id(store, db):
    created = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    db.collection.return_value.stream.return_value = [
        _snapshot("p1", {"title": "one", "created_at": created}),
        _snapshot("p2", {"title": "two", "created_at": created}),
    ]
    posts = store.find_all()
    assert [p['post_id'] for p in posts] == ["p1", "p2"]
    assert posts[0]['created_at'] == created


def test_increment_views_updates_inside_transaction(store, db):
    post_ref = db.collection.return_value.document.return_value
    post_ref.get.return_value = _snapshot("p1", {"title": "one", "views_count": 4})
    transaction = db.transaction.return_value

    post = store.find_one_and_increment_views("p1")

    assert post['views_count'] == 5
    post_ref.get.assert_called_once_with(transaction=transaction)
    args = transaction.update.call_args[0]
    assert args[0] is post_ref
    assert set(args[1]) == {'views_count'}


def test_increment_views_missing_post(store, db):
    db.collection.return_value.document.return_value.get.return_value = _snapshot("p1", None, exists=False)
    assert store.find_one_and_increment_views("p1") is None
    db.transaction.return_value.update.assert_not_called()


def test_insert_uses_generated_id(store, db):
    doc_ref = db.collection.return_value.document.return_value
    doc_ref.id = "generated"

    stored = store.insert({"title": "t", "comments": []})

    assert stored['post_id'] == "generated"
    saved = doc_ref.set.call_args[0][0]
    assert 'post_id' not in saved
    assert saved['title'] == "t"


def test_update_one_missing_document(store, db):
    db.collection.return_value.document.return_value.update.side_effect = NotFound("no document")
    assert store.update_one("missing", {"title": "x"}) is False


def test_update_one_success(store, db):
    assert store.update_one("p1", {"title": "x"}) is True
    db.collection.return_value.document.assert_called_with("p1")


def test_delete_one_reports_count(store, db):
    post_ref = db.collection.return_value.document.return_value
    transaction = db.transaction.return_value

    post_ref.get.return_value = _snapshot("p1", {"title": "one"})
    assert store.delete_one("p1") == 1
    transaction.delete.assert_called_once_with(post_ref)

    post_ref.get.return_value = _snapshot("p1", None, exists=False)
    assert store.delete_one("p1") == 0


def test_push_comment_updates_comments_and_ids_together(store, db):
    post_ref = db.collection.return_value.document.return_value
    comment = {"comment_id": "c1", "text": "hi", "user": "u1", "created": datetime(2024, 1, 1)}

    assert store.push_comment("p1", comment) is True
    post_ref.update.assert_called_once()
    fields = post_ref.update.call_args[0][0]
    assert {'comments', 'comment_ids', 'updated_at'} <= set(fields)


def test_push_comment_missing_post(store, db):
    db.collection.return_value.document.return_value.update.side_effect = NotFound("no document")
    assert store.push_comment("missing", {"comment_id": "c1"}) is False


def test_pull_comment_removes_matching(store, db):
    post_ref = db.collection.return_value.document.return_value
    post_ref.get.return_value = _snapshot("p1", {"comments": [
        {"comment_id": "c1", "text": "a"},
        {"comment_id": "c2", "text": "b"},
    ]})
    transaction = db.transaction.return_value

    assert store.pull_comment("p1", "c1") == 1
    fields = transaction.update.call_args[0][1]
    assert fields['comments'] == [{"comment_id": "c2", "text": "b"}]
    assert fields['comment_ids'] == ["c2"]


def test_pull_comment_unknown_comment_does_not_write(store, db):
    db.collection.return_value.document.return_value.get.return_value = _snapshot("p1", {"comments": []})
    assert store.pull_comment("p1", "c9") == 0
    db.transaction.return_value.update.assert_not_called()


def test_pull_comment_missing_post(store, db):
    db.collection.return_value.document.return_value.get.return_value = _snapshot("p1", None, exists=False)
    assert store.pull_comment("p1", "c1") is None


def test_find_by_comment_id_queries_comment_ids(store, db):
    query = db.collection.return_value.where.return_value
    query.stream.return_value = [_snapshot("p1", {"comment_ids": ["c1"]})]

    posts = store.find_by_comment_id("c1")

    db.collection.return_value.where.assert_called_once_with('comment_ids', 'array_contains', 'c1')
    assert [p['post_id'] for p in posts] == ["p1"]


def test_user_store_find_many(db):
    users = UserStore(db)
    db.get_all.return_value = [
        _snapshot("u1", {"email": "a@example.com"}),
        _snapshot("u2", None, exists=False),
    ]
    result = users.find_many(["u1", "u2", None])
    assert list(result) == ["u1"]
    assert result["u1"]['user_id'] == "u1"


def test_user_store_find_many_empty(db):
    assert UserStore(db).find_many([]) == {}
    db.get_all.assert_not_called()


def test_user_store_find_by_email(db):
    users = UserStore(db)
    db.collection.return_value.where.return_value.limit.return_value.stream.return_value = iter([
        _snapshot("u1", {"email": "a@example.com"}),
    ])
    assert users.find_by_email("a@example.com")['user_id'] == "u1"

    db.collection.return_value.where.return_value.limit.return_value.stream.return_value = iter([])
    assert users.find_by_email("b@example.com") is None


def test_invalid_post_id_is_treated_as_missing(store, db):
    """'a/b'처럼 문서 ID로 쓸 수 없는 값은 오류 대신 '게시글 없음'으로 처리되어야 함"""
    db.collection.return_value.document.side_effect = ValueError("A document must have an even number of path elements")

    assert store.find_by_id("a/b") is None
    assert store.find_one_and_increment_views("a/b") is None
    assert store.update_one("a/b", {"title": "x"}) is False
    assert store.delete_one("a/b") == 0
    assert store.push_comment("a/b", {"comment_id": "c1"}) is False
    assert store.pull_comment("a/b", "c1") is None
    db.transaction.assert_not_called()
