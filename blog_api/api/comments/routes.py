# blog_api/api/comments/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from blog_api.api.comments.schemas import CommentCreateSchema, CommentIdSchema
from blog_api.api.posts.schemas import CommentResponseSchema


comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/comments', methods=['GET'])
def get_comments():
    """
    게시글별 댓글 목록을 조회합니다. 댓글 작성자 정보가 함께 포함됩니다.
    """
    post_service = current_app.services['posts']
    try:
        comments = post_service.get_comments()
        return jsonify([CommentResponseSchema(many=True).dump(items) for items in comments]), 200
    except Exception as e:
        logging.error(f"댓글 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "댓글 목록을 가져오지 못했습니다."}), 500


@comments_bp.route('/comments', methods=['POST'])
@jwt_required()
def add_comment():
    """
    요청 본문의 게시글 ID('id')에 새 댓글을 추가합니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    data = CommentCreateSchema().load(request.get_json(silent=True) or {})
    try:
        comment = post_service.add_comment(data['post_id'], user_id, data['text'])
        if not comment:
            return jsonify({"error_code": "POST_NOT_FOUND", "message": "댓글을 작성할 게시글이 없습니다."}), 404
        return jsonify({"success": True, "comment_id": comment['comment_id']}), 200
    except Exception as e:
        logging.error(f"댓글 추가 중 오류 발생 (post_id: {data['post_id']}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_CREATION_FAILED", "message": "댓글을 추가하지 못했습니다."}), 500


@comments_bp.route('/comments/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(post_id: str):
    """
    게시글(post_id)에서 요청 본문의 댓글 ID('id')와 일치하는 댓글을 삭제합니다.
    """
    post_service = current_app.services['posts']
    data = CommentIdSchema().load(request.get_json(silent=True) or {})
    try:
        deleted = post_service.delete_comment(post_id, data['comment_id'])
        if not deleted:
            return jsonify({"error_code": "COMMENT_NOT_FOUND", "message": "댓글을 찾을 수 없습니다."}), 404
        return jsonify({"success": True}), 200
    except Exception as e:
        logging.error(f"댓글 삭제 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_DELETION_FAILED", "message": "댓글을 삭제하지 못했습니다."}), 500
