# pawconnect/api/pets/services.py
import uuid
import logging
from typing import Any, Dict, List, Mapping
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from marshmallow import ValidationError

from pawconnect.api.pets.permissions import ensure_owner
from pawconnect.api.pets.query import ListingQueryEngine, PetQuery, PageResult
from pawconnect.core.errors import NotFoundError, AlreadyFavoriteError
from pawconnect.models.location import Location
from pawconnect.models.pet import Pet, PetWithOwner, PetType, PetSize, PetGender, HealthInfo
from pawconnect.models.review import Review
from pawconnect.models.user import User
from pawconnect.utils.datetime_utils import DateTimeUtils, for_firestore


def _pet_not_found(pet_id: str) -> NotFoundError:
    return NotFoundError(f"Pet not found: {pet_id}", error_code="PET_NOT_FOUND")


class PetService:
    """
    Firestore 'pets' 컬렉션을 다루는 반려동물 저장소 서비스입니다.
    등록/수정/삭제, 목록/상세 조회, 관심 목록과 후기 처리를 담당합니다.
    """

    def __init__(self, db=None, default_image_url: str = '/placeholder-pet.jpg',
                 default_page_size: int = 10, max_page_size: int = 100, search_limit: int = 20):
        self.db = db or firestore.client()
        self.pets_ref = self.db.collection('pets')
        self.users_ref = self.db.collection('users')
        self.query_engine = ListingQueryEngine(self.pets_ref, self.users_ref)
        self.default_image_url = default_image_url
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.search_limit = search_limit

    # --- 조회 ---
    def get_pet(self, pet_id: str) -> Pet:
        doc = self.pets_ref.document(pet_id).get()
        if not doc.exists:
            raise _pet_not_found(pet_id)
        data = doc.to_dict()
        data.setdefault('pet_id', doc.id)
        return Pet.from_dict(data)

    def get_listing(self, pet_id: str) -> PetWithOwner:
        """조회수 변경 없이 소유자가 결합된 반려동물 정보를 반환합니다."""
        return self.query_engine.expand_owners([self.get_pet(pet_id)])[0]

    def get_pet_detail(self, pet_id: str) -> PetWithOwner:
        """상세 조회. 조회수를 서버 측 증가 연산으로 1 올린 뒤 최신 문서를 반환합니다."""
        try:
            self.pets_ref.document(pet_id).update({'views': firestore.Increment(1)})
        except google_exceptions.NotFound:
            raise _pet_not_found(pet_id)
        return self.get_listing(pet_id)

    def list_pets(self, args: Mapping[str, Any]) -> PageResult:
        query = PetQuery.from_args(args, default_limit=self.default_page_size, max_limit=self.max_page_size)
        return self.query_engine.run(query)

    def search_pets(self, keyword: str) -> List[PetWithOwner]:
        """입양 가능한 반려동물 중 키워드가 포함된 항목을 최신순으로 최대 search_limit개 반환합니다."""
        query = PetQuery(keyword=(keyword or "").strip() or None, limit=self.search_limit)
        return self.query_engine.run(query).items

    def get_my_pets(self, owner: User) -> List[PetWithOwner]:
        """요청자의 모든 반려동물을 입양 상태와 관계없이 반환합니다."""
        query = PetQuery(owner_id=owner.user_id, available_only=False)
        return self.query_engine.expand_owners(self.query_engine.find(query))

    def get_favorites(self, user: User) -> List[PetWithOwner]:
        """관심 목록의 반려동물을 저장된 순서대로 반환합니다. 삭제된 항목은 건너뜁니다."""
        pets = []
        for pet_id in user.favorites:
            try:
                pets.append(self.get_pet(pet_id))
            except NotFoundError:
                logging.info(f"Skipping missing favorite {pet_id} for user {user.user_id}")
        return self.query_engine.expand_owners(pets)

    # --- 등록/수정/삭제 ---
    def create_pet(self, owner: User, pet_data: Dict[str, Any]) -> PetWithOwner:
        images = list(pet_data.get('images') or [])
        pet = Pet(
            pet_id=str(uuid.uuid4()),
            owner_id=owner.user_id,
            name=pet_data['name'].strip(),
            type=PetType(pet_data['type']),
            breed=pet_data['breed'].strip(),
            age=pet_data['age'],
            size=PetSize(pet_data['size']) if pet_data.get('size') else None,
            color=pet_data.get('color') or "",
            gender=PetGender(pet_data['gender']) if pet_data.get('gender') else None,
            description=pet_data.get('description') or "",
            image_url=pet_data.get('image_url') or (images[0] if images else self.default_image_url),
            images=images,
            location=Location.from_dict(pet_data.get('location')),
            adoption_requirements=pet_data.get('adoption_requirements') or "",
            tags=list(pet_data.get('tags') or []),
            health_info=HealthInfo.from_dict(pet_data.get('health_info'))
        )
        self.pets_ref.document(pet.pet_id).set(for_firestore(pet.to_dict()))
        logging.info(f"Pet created: {pet.pet_id} by {owner.user_id}")
        return PetWithOwner(pet=pet, owner=owner)

    def update_pet(self, pet_id: str, caller: User, update_data: Dict[str, Any]) -> PetWithOwner:
        """
        소유자만 수정할 수 있습니다. 전달된 필드만 덮어쓰며 owner_id는 바뀌지 않습니다.
        location/health_info는 기존 값과 병합합니다.
        """
        pet = self.get_pet(pet_id)
        ensure_owner(caller.user_id, pet)
        if not update_data:
            raise ValidationError({"_schema": ["수정할 데이터가 없습니다."]})

        payload = dict(update_data)
        if 'location' in payload:
            payload['location'] = {**pet.location.to_dict(), **payload['location']}
        if 'health_info' in payload:
            payload['health_info'] = {**pet.health_info.to_dict(), **payload['health_info']}
        if 'name' in payload:
            payload['name'] = payload['name'].strip()
        if 'images' in payload and 'image_url' not in payload:
            payload['image_url'] = payload['images'][0] if payload['images'] else self.default_image_url
        payload['updated_at'] = DateTimeUtils.now()

        try:
            self.pets_ref.document(pet_id).update(for_firestore(payload))
        except google_exceptions.NotFound:
            raise _pet_not_found(pet_id)
        logging.info(f"Pet updated: {pet_id} ({', '.join(sorted(update_data))})")
        return self.get_listing(pet_id)

    def delete_pet(self, pet_id: str, caller: User) -> None:
        pet = self.get_pet(pet_id)
        ensure_owner(caller.user_id, pet)
        self.pets_ref.document(pet_id).delete()
        logging.info(f"Pet deleted: {pet_id} by {caller.user_id}")

    # --- 관심 목록 ---
    def add_favorite(self, user: User, pet_id: str) -> Pet:
        """
        관심 목록에 추가하고 favorite_count를 1 올립니다.
        사용자 문서와 반려동물 문서는 하나의 일괄 쓰기로 함께 반영됩니다.

        :raises AlreadyFavoriteError: 이미 관심 목록에 있는 경우
        """
        self.get_pet(pet_id)
        if user.has_favorite(pet_id):
            raise AlreadyFavoriteError("Pet already in favorites")

        self._commit_favorite(user, pet_id, firestore.ArrayUnion([pet_id]), firestore.Increment(1))
        logging.info(f"Favorite added: {pet_id} by {user.user_id}")
        return self.get_pet(pet_id)

    def remove_favorite(self, user: User, pet_id: str) -> Pet:
        """관심 목록에서 제거합니다. 실제로 있던 경우에만 favorite_count를 줄이며 0 미만으로 내려가지 않습니다."""
        pet = self.get_pet(pet_id)
        if not user.has_favorite(pet_id):
            return pet

        self._commit_favorite(user, pet_id, firestore.ArrayRemove([pet_id]), max(0, pet.favorite_count - 1))
        logging.info(f"Favorite removed: {pet_id} by {user.user_id}")
        return self.get_pet(pet_id)

    def _commit_favorite(self, user: User, pet_id: str, favorites_change, favorite_count) -> None:
        batch = self.db.batch()
        batch.update(self.users_ref.document(user.user_id), {
            'favorites': favorites_change,
            'updated_at': DateTimeUtils.now()
        })
        batch.update(self.pets_ref.document(pet_id), {'favorite_count': favorite_count})
        try:
            batch.commit()
        except google_exceptions.NotFound:
            raise _pet_not_found(pet_id)

    # --- 후기 ---
    def add_review(self, pet_id: str, reviewer: User, rating: int, comment: str) -> PetWithOwner:
        """후기를 추가합니다. 같은 사용자의 중복 후기도 허용됩니다."""
        self.get_pet(pet_id)
        review = Review(reviewer=reviewer.user_id, rating=rating, comment=comment.strip())
        try:
            self.pets_ref.document(pet_id).update({
                'reviews': firestore.ArrayUnion([for_firestore(review.to_dict())]),
                'updated_at': DateTimeUtils.now()
            })
        except google_exceptions.NotFound:
            raise _pet_not_found(pet_id)
        logging.info(f"Review added: {review.review_id} on {pet_id} by {reviewer.user_id}")
        return self.get_listing(pet_id)
