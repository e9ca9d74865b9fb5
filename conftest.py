# conftest.py
"""
테스트 공용 픽스처

- FakeFirestore: users/pets 컬렉션에 필요한 만큼만 구현한 메모리 Firestore
  (document get/set/update/delete, 동등 where, limit, stream, batch, Increment/ArrayUnion/ArrayRemove)
- MagicMock 기반 Storage 버킷
- create_app('testing')으로 만든 앱과 테스트 클라이언트
"""

import copy
import uuid
from unittest.mock import MagicMock

import pytest
from firebase_admin import firestore
from google.api_core.exceptions import NotFound

from pawconnect import create_app

_MISSING = object()
TEST_PUBLIC_URL = "https://storage.googleapis.com/pawconnect-testing.appspot.com/pet_images/test.jpg"


def _resolve(data, field_path):
    for part in field_path.split('.'):
        if not isinstance(data, dict) or part not in data:
            return _MISSING
        data = data[part]
    return data


def _apply_update(doc, field_path, value):
    *parents, leaf = field_path.split('.')
    target = doc
    for part in parents:
        target = target.setdefault(part, {})

    if isinstance(value, firestore.Increment):
        target[leaf] = (target.get(leaf) or 0) + value.value
    elif isinstance(value, firestore.ArrayUnion):
        current = list(target.get(leaf) or [])
        for item in value.values:
            if item not in current:
                current.append(copy.deepcopy(item))
        target[leaf] = current
    elif isinstance(value, firestore.ArrayRemove):
        target[leaf] = [item for item in target.get(leaf) or [] if item not in value.values]
    else:
        target[leaf] = copy.deepcopy(value)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = copy.deepcopy(data) if data is not None else None

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, store, doc_id):
        self._store = store
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._store.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._store:
            for key, value in data.items():
                _apply_update(self._store[self.id], key, value)
        else:
            self._store[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._store:
            raise NotFound(f"No document to update: {self.id}")
        for key, value in data.items():
            _apply_update(self._store[self.id], key, value)

    def delete(self):
        self._store.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, filters=(), limit_count=None):
        self._store = store
        self._filters = tuple(filters)
        self._limit = limit_count

    def where(self, field_path=None, op_string=None, value=None):
        if op_string != '==':
            raise NotImplementedError(f"FakeQuery supports only '==' (got {op_string})")
        return FakeQuery(self._store, self._filters + ((field_path, value),), self._limit)

    def limit(self, count):
        return FakeQuery(self._store, self._filters, count)

    def stream(self):
        results = [
            FakeSnapshot(doc_id, data)
            for doc_id, data in list(self._store.items())
            if all(_resolve(data, path) == value for path, value in self._filters)
        ]
        if self._limit is not None:
            results = results[:self._limit]
        return iter(results)

    def get(self):
        return list(self.stream())


class FakeCollectionReference(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocumentReference(self._store, doc_id or str(uuid.uuid4()))


class FakeWriteBatch:
    """commit 시점에 모든 대상 문서가 있어야 하며, 하나라도 없으면 아무것도 반영하지 않습니다."""
    def __init__(self):
        self._updates = []

    def update(self, reference, data):
        self._updates.append((reference, data))

    def commit(self):
        for reference, _ in self._updates:
            if reference.id not in reference._store:
                raise NotFound(f"No document to update: {reference.id}")
        for reference, data in self._updates:
            reference.update(data)
        self._updates = []


class FakeFirestore:
    def __init__(self):
        self.data = {}

    def collection(self, name):
        return FakeCollectionReference(self.data.setdefault(name, {}))

    def batch(self):
        return FakeWriteBatch()


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def storage_bucket():
    bucket = MagicMock()
    bucket.blob.return_value.public_url = TEST_PUBLIC_URL
    return bucket


@pytest.fixture
def app(fake_db, storage_bucket):
    return create_app('testing', firestore_client=fake_db, storage_bucket=storage_bucket)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_user(client):
    """회원가입 후 (user 응답, Authorization 헤더)를 반환하는 헬퍼."""
    def _register(name="Alice", email="alice@example.com", password="secret123", **extra):
        payload = {"name": name, "email": email, "password": password}
        payload.update(extra)
        response = client.post('/api/auth/register', json=payload)
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return body['user'], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
def create_pet(client):
    """반려동물을 등록하고 응답 본문을 반환하는 헬퍼."""
    def _create(headers, **overrides):
        payload = {
            "name": "Bruno",
            "type": "dog",
            "breed": "Labrador",
            "age": 3,
            "size": "large",
            "gender": "male",
            "description": "Friendly and playful",
            "location": {"city": "Pune", "state": "MH", "country": "India"},
            "healthInfo": {"vaccinated": True, "neutered": False},
            "tags": ["friendly"]
        }
        payload.update(overrides)
        response = client.post('/api/pets', json=payload, headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _create
