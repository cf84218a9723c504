# blog_api/api/posts/schemas.py
from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

from blog_api.api.auth.schemas import UserResponseSchema


class TagListField(fields.List):
    """태그 목록. 'a, b' 같은 쉼표 구분 문자열도 리스트로 받아들입니다."""
    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str):
            value = [tag.strip() for tag in value.split(',') if tag.strip()]
        return super()._deserialize(value, attr, data, **kwargs)


# --- API 요청 스키마 ---

class PostCreateSchema(Schema):
    """POST /posts, PATCH /posts/{post_id} 요청 본문의 유효성을 검사합니다."""
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=3, error="제목은 3자 이상 입력해주세요."))
    text = fields.Str(required=True, validate=validate.Length(min=3, error="본문은 3자 이상 입력해주세요."))
    tags = TagListField(fields.Str(), load_default=list)
    image_url = fields.Str(data_key='imageUrl', allow_none=True, load_default=None)

    @pre_load
    def drop_empty_image_url(self, data, **kwargs):
        if isinstance(data, dict) and data.get('imageUrl') == '':
            data = dict(data, imageUrl=None)
        return data


# --- API 응답 스키마 ---

class CommentResponseSchema(Schema):
    """게시글에 내장된 댓글의 응답 형식."""
    id = fields.Str(attribute='comment_id', dump_only=True)
    legacy_id = fields.Str(attribute='comment_id', data_key='_id', dump_only=True)
    text = fields.Str(required=True)
    created = fields.DateTime(required=True)
    # 조회 시 작성자 정보로 확장되며, 탈퇴 등으로 없으면 null
    user = fields.Nested(UserResponseSchema, allow_none=True)


class PostResponseSchema(Schema):
    """게시글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    id = fields.Str(attribute='post_id', dump_only=True)
    legacy_id = fields.Str(attribute='post_id', data_key='_id', dump_only=True)
    title = fields.Str(required=True)
    text = fields.Str(required=True)
    image_url = fields.Str(data_key='imageUrl', allow_none=True)
    tags = fields.List(fields.Str(), required=True)
    views_count = fields.Int(data_key='viewsCount', required=True)
    user = fields.Nested(UserResponseSchema, allow_none=True)
    comments = fields.List(fields.Nested(CommentResponseSchema), required=True)
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')
