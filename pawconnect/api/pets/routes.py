# pawconnect/api/pets/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, current_user

from pawconnect.api.pets.schemas import PetCreateSchema, PetUpdateSchema, ReviewCreateSchema, PetResponseSchema

pets_bp = Blueprint('pets_bp', __name__)


def _pet_service():
    return current_app.services['pets']


def _dump(listing):
    return PetResponseSchema().dump(listing.to_dict())


def _dump_many(listings):
    return PetResponseSchema(many=True).dump([listing.to_dict() for listing in listings])


@pets_bp.route('/', methods=['GET'])
def list_pets():
    """필터/페이지 조건에 맞는 입양 가능한 반려동물 목록을 반환합니다."""
    result = _pet_service().list_pets(request.args)
    return jsonify({
        "pets": _dump_many(result.items),
        "total": result.total,
        "pages": result.pages,
        "currentPage": result.page,
        "limit": result.limit
    }), 200


@pets_bp.route('/', methods=['POST'])
@jwt_required()
def create_pet():
    data = PetCreateSchema().load(request.get_json(silent=True) or {})
    listing = _pet_service().create_pet(current_user, data)
    return jsonify(_dump(listing)), 201


@pets_bp.route('/search', methods=['GET'])
def search_pets():
    listings = _pet_service().search_pets(request.args.get('q', ''))
    return jsonify(_dump_many(listings)), 200


@pets_bp.route('/mypets', methods=['GET'])
@jwt_required()
def get_my_pets():
    return jsonify(_dump_many(_pet_service().get_my_pets(current_user))), 200


@pets_bp.route('/favorites', methods=['GET'])
@jwt_required()
def get_favorites():
    return jsonify(_dump_many(_pet_service().get_favorites(current_user))), 200


@pets_bp.route('/<string:pet_id>', methods=['GET'])
def get_pet(pet_id):
    """상세 조회. 호출할 때마다 조회수가 1 증가합니다."""
    return jsonify(_dump(_pet_service().get_pet_detail(pet_id))), 200


@pets_bp.route('/<string:pet_id>', methods=['PUT'])
@jwt_required()
def update_pet(pet_id):
    data = PetUpdateSchema().load(request.get_json(silent=True) or {}, partial=True)
    listing = _pet_service().update_pet(pet_id, current_user, data)
    return jsonify(_dump(listing)), 200


@pets_bp.route('/<string:pet_id>', methods=['DELETE'])
@jwt_required()
def delete_pet(pet_id):
    _pet_service().delete_pet(pet_id, current_user)
    return jsonify({"message": "Pet removed"}), 200


@pets_bp.route('/<string:pet_id>/favorite', methods=['POST'])
@jwt_required()
def add_favorite(pet_id):
    pet = _pet_service().add_favorite(current_user, pet_id)
    return jsonify({"message": "Added to favorites", "favoriteCount": pet.favorite_count}), 200


@pets_bp.route('/<string:pet_id>/favorite', methods=['DELETE'])
@jwt_required()
def remove_favorite(pet_id):
    pet = _pet_service().remove_favorite(current_user, pet_id)
    return jsonify({"message": "Removed from favorites", "favoriteCount": pet.favorite_count}), 200


@pets_bp.route('/<string:pet_id>/review', methods=['POST'])
@jwt_required()
def add_review(pet_id):
    """후기를 추가하고 갱신된 반려동물 정보를 반환합니다."""
    data = ReviewCreateSchema().load(request.get_json(silent=True) or {})
    listing = _pet_service().add_review(pet_id, current_user, data['rating'], data['comment'])
    return jsonify(_dump(listing)), 201
