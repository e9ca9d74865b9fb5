# pawconnect/schemas/user_schema.py
from marshmallow import Schema, fields, validate, EXCLUDE


class LocationSchema(Schema):
    """사용자/반려동물 공통 지역 정보 스키마."""
    class Meta:
        unknown = EXCLUDE

    city = fields.Str(load_default="", validate=validate.Length(max=100))
    state = fields.Str(load_default="", validate=validate.Length(max=100))
    country = fields.Str(load_default="", validate=validate.Length(max=100))


class ReviewSchema(Schema):
    """반려동물 후기 및 사용자 평점 후기 응답 스키마."""
    id = fields.Str(attribute='review_id', dump_only=True)
    reviewer = fields.Str(dump_only=True)
    rating = fields.Int(dump_only=True)
    comment = fields.Str(dump_only=True)
    created_at = fields.DateTime(data_key='createdAt', dump_only=True)


class RatingsSchema(Schema):
    average = fields.Float(dump_only=True)
    count = fields.Int(dump_only=True)
    reviews = fields.List(fields.Nested(ReviewSchema), dump_only=True)


class OwnerSchema(Schema):
    """반려동물 응답에 결합되는 소유자 공개 정보. 비밀번호 해시 등 민감 정보는 포함하지 않습니다."""
    name = fields.Str(dump_only=True)
    email = fields.Email(dump_only=True)
    phone = fields.Str(allow_none=True, dump_only=True)
    profile_picture = fields.Str(data_key='profilePicture', allow_none=True, dump_only=True)
    location = fields.Nested(LocationSchema, dump_only=True)
    ratings = fields.Nested(RatingsSchema, dump_only=True)


class UserProfileResponseSchema(OwnerSchema):
    """본인 프로필 응답 스키마. 소유자 공개 정보에 계정 정보를 더합니다."""
    id = fields.Str(attribute='user_id', dump_only=True)
    bio = fields.Str(dump_only=True)
    user_type = fields.Str(data_key='userType', dump_only=True)
    favorites = fields.List(fields.Str(), dump_only=True)
    is_google_auth = fields.Bool(data_key='isGoogleAuth', dump_only=True)
    created_at = fields.DateTime(data_key='createdAt', dump_only=True)
    updated_at = fields.DateTime(data_key='updatedAt', dump_only=True)
