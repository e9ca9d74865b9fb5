# pawconnect/api/pets/schemas.py
from marshmallow import Schema, fields, validate, validates, pre_load, ValidationError, EXCLUDE

from pawconnect.models.pet import PetType, PetSize, PetGender, AdoptionStatus
from pawconnect.schemas.user_schema import LocationSchema, ReviewSchema, OwnerSchema

_OPTIONAL_ENUM_FIELDS = ('size', 'gender')


class HealthInfoSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    vaccinated = fields.Bool(load_default=False)
    neutered = fields.Bool(load_default=False)
    medical_history = fields.Str(data_key='medicalHistory', load_default="")


class PetCreateSchema(Schema):
    """POST /api/pets 반려동물 등록 요청 스키마. 소유자는 요청 본문이 아니라 인증된 사용자로 정해집니다."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    type = fields.Str(required=True, validate=validate.OneOf([e.value for e in PetType]))
    breed = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    age = fields.Int(required=True, validate=validate.Range(min=0, max=100))
    size = fields.Str(allow_none=True, validate=validate.OneOf([e.value for e in PetSize]))
    color = fields.Str(validate=validate.Length(max=50))
    gender = fields.Str(allow_none=True, validate=validate.OneOf([e.value for e in PetGender]))
    description = fields.Str(validate=validate.Length(max=2000))
    image_url = fields.Str(data_key='imageUrl', allow_none=True)
    images = fields.List(fields.Str())
    location = fields.Nested(LocationSchema)
    adoption_requirements = fields.Str(data_key='adoptionRequirements')
    tags = fields.List(fields.Str())
    health_info = fields.Nested(HealthInfoSchema, data_key='healthInfo')

    @pre_load
    def blank_enums_to_none(self, data, **kwargs):
        # 폼에서 선택하지 않은 항목은 빈 문자열로 전송됩니다.
        if isinstance(data, dict):
            data = dict(data)
            for key in _OPTIONAL_ENUM_FIELDS:
                if data.get(key) == "":
                    data[key] = None
        return data

    @validates('name')
    def validate_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("이름은 공백일 수 없습니다.")


class PetUpdateSchema(PetCreateSchema):
    """PUT /api/pets/<pet_id> 부분 업데이트 스키마. partial=True로 로드합니다."""
    adoption_status = fields.Str(data_key='adoptionStatus', validate=validate.OneOf([e.value for e in AdoptionStatus]))


class ReviewCreateSchema(Schema):
    """POST /api/pets/<pet_id>/review 후기 작성 스키마."""
    class Meta:
        unknown = EXCLUDE

    rating = fields.Int(required=True, validate=validate.Range(min=1, max=5))
    comment = fields.Str(required=True, validate=validate.Length(max=1000))

    @validates('comment')
    def validate_comment(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("후기 내용은 공백일 수 없습니다.")


class PetResponseSchema(Schema):
    """반려동물 응답 스키마. owner에는 소유자 공개 정보만 담깁니다."""
    id = fields.Str(attribute='pet_id', dump_only=True)
    owner_id = fields.Str(data_key='ownerId', dump_only=True)
    owner = fields.Nested(OwnerSchema, allow_none=True, dump_only=True)
    name = fields.Str(dump_only=True)
    type = fields.Str(dump_only=True)
    breed = fields.Str(dump_only=True)
    age = fields.Int(dump_only=True)
    size = fields.Str(allow_none=True, dump_only=True)
    color = fields.Str(dump_only=True)
    gender = fields.Str(allow_none=True, dump_only=True)
    description = fields.Str(dump_only=True)
    image_url = fields.Str(data_key='imageUrl', dump_only=True)
    images = fields.List(fields.Str(), dump_only=True)
    location = fields.Nested(LocationSchema, dump_only=True)
    adoption_status = fields.Str(data_key='adoptionStatus', dump_only=True)
    adoption_requirements = fields.Str(data_key='adoptionRequirements', dump_only=True)
    tags = fields.List(fields.Str(), dump_only=True)
    health_info = fields.Nested(HealthInfoSchema, data_key='healthInfo', dump_only=True)
    reviews = fields.List(fields.Nested(ReviewSchema), dump_only=True)
    views = fields.Int(dump_only=True)
    favorite_count = fields.Int(data_key='favoriteCount', dump_only=True)
    adoption_requests = fields.Int(data_key='adoptionRequests', dump_only=True)
    created_at = fields.DateTime(data_key='createdAt', dump_only=True)
    updated_at = fields.DateTime(data_key='updatedAt', dump_only=True)
