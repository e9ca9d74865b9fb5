# pawconnect/api/auth/schemas.py
from marshmallow import Schema, fields, validate, validates, ValidationError, EXCLUDE, pre_load

from pawconnect.models.user import UserType
from pawconnect.schemas.user_schema import LocationSchema

USER_TYPES = [e.value for e in UserType]


def _strip_email(data):
    if isinstance(data, dict) and isinstance(data.get('email'), str):
        data = dict(data)
        data['email'] = data['email'].strip().lower()
    return data


class RegisterSchema(Schema):
    """POST /api/auth/register 회원가입 요청 스키마."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6, max=128))
    phone = fields.Str(load_default=None, allow_none=True)
    user_type = fields.Str(data_key='userType', load_default=UserType.BOTH.value, validate=validate.OneOf(USER_TYPES))
    location = fields.Nested(LocationSchema, load_default=None, allow_none=True)

    @pre_load
    def normalize_email(self, data, **kwargs):
        return _strip_email(data)

    @validates('name')
    def validate_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("이름은 공백일 수 없습니다.")


class LoginSchema(Schema):
    """POST /api/auth/login 로그인 요청 스키마."""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)

    @pre_load
    def normalize_email(self, data, **kwargs):
        return _strip_email(data)


class GoogleLoginSchema(Schema):
    """POST /api/auth/google 소셜 로그인 요청 스키마."""
    class Meta:
        unknown = EXCLUDE

    auth_code = fields.Str(
        data_key='code',
        required=True,
        validate=validate.Length(min=1),
        metadata={"description": "Google OAuth 2.0 인증 코드"}
    )


class ProfileUpdateSchema(Schema):
    """PUT /api/auth/profile 프로필 수정 스키마 (부분 업데이트용)."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(validate=validate.Length(min=1, max=100))
    phone = fields.Str(allow_none=True)
    bio = fields.Str(validate=validate.Length(max=500))
    location = fields.Nested(LocationSchema)
    profile_picture = fields.Str(data_key='profilePicture', allow_none=True)
    user_type = fields.Str(data_key='userType', validate=validate.OneOf(USER_TYPES))

    @validates('name')
    def validate_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("이름은 공백일 수 없습니다.")
