# blog_api/api/auth/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE


class RegisterSchema(Schema):
    """회원가입 요청의 유효성을 검사하는 스키마"""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, error_messages={"invalid": "이메일 형식이 올바르지 않습니다."})
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=5, error="비밀번호는 5자 이상이어야 합니다."))
    full_name = fields.Str(data_key='fullName', required=True, validate=validate.Length(min=3, error="이름은 3자 이상이어야 합니다."))
    avatar_url = fields.URL(data_key='avatarUrl', allow_none=True, load_default=None)


class LoginSchema(Schema):
    """로그인 요청의 유효성을 검사하는 스키마"""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, error_messages={"invalid": "이메일 형식이 올바르지 않습니다."})
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=5, error="비밀번호는 5자 이상이어야 합니다."))


class UserResponseSchema(Schema):
    """
    사용자 정보 응답 스키마.
    게시글/댓글 작성자 확장에도 재사용되며, password_hash는 포함하지 않습니다.
    """
    id = fields.Str(attribute='user_id', dump_only=True)
    legacy_id = fields.Str(attribute='user_id', data_key='_id', dump_only=True)
    email = fields.Email(required=True)
    full_name = fields.Str(data_key='fullName', required=True)
    avatar_url = fields.Str(data_key='avatarUrl', allow_none=True)
    created_at = fields.DateTime(data_key='createdAt')
    updated_at = fields.DateTime(data_key='updatedAt')
