# blog_api/api/comments/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE


class CommentCreateSchema(Schema):
    """
    POST /comments
    댓글을 추가할 게시글 ID('id')와 댓글 내용('text')을 검사합니다.
    """
    class Meta:
        unknown = EXCLUDE

    post_id = fields.Str(data_key='id', required=True, validate=validate.Length(min=1))
    text = fields.Str(required=True, validate=validate.Length(min=1, error="댓글 내용을 입력해주세요."))


class CommentIdSchema(Schema):
    """
    DELETE /comments/{post_id}, POST /postByComment
    요청 본문의 댓글 ID('id')를 검사합니다.
    """
    class Meta:
        unknown = EXCLUDE

    comment_id = fields.Str(data_key='id', required=True, validate=validate.Length(min=1))
