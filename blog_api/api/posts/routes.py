# blog_api/api/posts/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from blog_api.api.posts.schemas import PostCreateSchema, PostResponseSchema
from blog_api.api.comments.schemas import CommentIdSchema


posts_bp = Blueprint('posts_bp', __name__)


@posts_bp.route('/posts', methods=['GET'])
def get_posts():
    """
    모든 게시글을 작성자 정보와 함께 조회합니다.
    """
    post_service = current_app.services['posts']
    try:
        posts = post_service.get_all()
        return jsonify(PostResponseSchema(many=True).dump(posts)), 200
    except Exception as e:
        logging.error(f"게시글 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시글 목록을 가져오지 못했습니다."}), 500


@posts_bp.route('/posts/<string:post_id>', methods=['GET'])
def get_post(post_id: str):
    """
    특정 게시글의 상세 정보를 조회합니다. 조회할 때마다 조회수가 1 증가합니다.
    """
    post_service = current_app.services['posts']
    try:
        post = post_service.get_one(post_id)
        if not post:
            return jsonify({"error_code": "POST_NOT_FOUND", "message": "게시글을 찾을 수 없습니다."}), 404
        return jsonify(PostResponseSchema().dump(post)), 200
    except Exception as e:
        logging.error(f"게시글 조회 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시글을 가져오지 못했습니다."}), 500


@posts_bp.route('/posts', methods=['POST'])
@jwt_required()
def create_post():
    """
    새로운 게시글을 생성합니다.
    - 요청 본문은 PostCreateSchema에 따라 유효성을 검사합니다.
    - 성공 시, 생성된 게시글 정보를 반환합니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    data = PostCreateSchema().load(request.get_json(silent=True) or {})
    try:
        new_post = post_service.create_post(
            user_id, data['title'], data['text'],
            image_url=data.get('image_url'), tags=data.get('tags'),
        )
        return jsonify(PostResponseSchema().dump(new_post)), 201
    except Exception as e:
        logging.error(f"게시글 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "POST_CREATION_FAILED", "message": "게시글을 생성하지 못했습니다."}), 500


@posts_bp.route('/posts/<string:post_id>', methods=['PATCH'])
@jwt_required()
def update_post(post_id: str):
    """
    게시글의 제목/본문/이미지/태그를 수정합니다. 댓글과 조회수는 유지됩니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    data = PostCreateSchema().load(request.get_json(silent=True) or {})
    try:
        updated = post_service.update_post(
            post_id, user_id, data['title'], data['text'],
            image_url=data.get('image_url'), tags=data.get('tags'),
        )
        if not updated:
            return jsonify({"error_code": "POST_NOT_FOUND", "message": "게시글을 찾을 수 없습니다."}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logging.error(f"게시글 수정 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_UPDATE_FAILED", "message": "게시글을 수정하지 못했습니다."}), 500


@posts_bp.route('/posts/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """
    게시글을 삭제합니다. 연결된 업로드 이미지도 함께 삭제합니다.
    """
    post_service = current_app.services['posts']
    try:
        deleted = post_service.delete_post(post_id)
        if not deleted:
            return jsonify({"error_code": "POST_NOT_FOUND", "message": "게시글을 찾을 수 없습니다."}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logging.error(f"게시글 삭제 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_DELETION_FAILED", "message": "게시글을 삭제하지 못했습니다."}), 500


@posts_bp.route('/tags', methods=['GET'])
def get_tags():
    """게시글별 태그 목록을 조회합니다."""
    post_service = current_app.services['posts']
    try:
        return jsonify(post_service.get_tags()), 200
    except Exception as e:
        logging.error(f"태그 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "태그 목록을 가져오지 못했습니다."}), 500


@posts_bp.route('/postByComment', methods=['POST'])
def get_posts_by_comment():
    """요청 본문의 댓글 ID('id')를 포함한 게시글 목록을 조회합니다."""
    post_service = current_app.services['posts']
    data = CommentIdSchema().load(request.get_json(silent=True) or {})
    try:
        posts = post_service.get_posts_by_comment_id(data['comment_id'])
        return jsonify(PostResponseSchema(many=True).dump(posts)), 200
    except Exception as e:
        logging.error(f"댓글 ID로 게시글 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시글을 가져오지 못했습니다."}), 500
