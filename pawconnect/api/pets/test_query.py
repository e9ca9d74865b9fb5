# pawconnect/api/pets/test_query.py
"""목록 조회 엔진 테스트: 조건 해석, 필터, 정렬, 페이지 계산, 소유자 결합."""

from datetime import datetime, timedelta, timezone

import pytest

from pawconnect.api.pets.query import ListingQueryEngine, PetQuery, page_count, parse_int
from pawconnect.models.pet import Pet, PetType, PetSize, AdoptionStatus, HealthInfo
from pawconnect.models.location import Location
from pawconnect.models.user import User
from pawconnect.utils.datetime_utils import for_firestore

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _store_pet(fake_db, pet_id, minutes=0, **fields):
    defaults = dict(
        pet_id=pet_id,
        owner_id="owner-1",
        name=pet_id.title(),
        type=PetType.DOG,
        breed="Mixed",
        age=2,
        created_at=BASE_TIME + timedelta(minutes=minutes)
    )
    defaults.update(fields)
    pet = Pet(**defaults)
    fake_db.collection('pets').document(pet_id).set(for_firestore(pet.to_dict()))
    return pet


def _store_user(fake_db, user_id="owner-1", **fields):
    user = User(user_id=user_id, name=fields.pop('name', "Owner"), email=f"{user_id}@example.com",
                password_hash="pbkdf2:sha256:hash", **fields)
    fake_db.collection('users').document(user_id).set(for_firestore(user.to_dict()))
    return user


@pytest.fixture
def engine(fake_db):
    return ListingQueryEngine(fake_db.collection('pets'), fake_db.collection('users'))


def test_parse_int_is_lenient():
    assert parse_int("3") == 3
    assert parse_int(" 7 ") == 7
    assert parse_int("abc") is None
    assert parse_int("3.5") is None
    assert parse_int(None) is None


def test_page_count():
    assert page_count(0, 10) == 0
    assert page_count(1, 10) == 1
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2


def test_from_args_defaults_and_clamping():
    query = PetQuery.from_args({})
    assert (query.page, query.limit, query.available_only) == (1, 10, True)

    query = PetQuery.from_args({"page": "0", "limit": "-5"})
    assert (query.page, query.limit) == (1, 10)

    query = PetQuery.from_args({"page": "abc", "limit": "500"})
    assert (query.page, query.limit) == (1, 100)

    query = PetQuery.from_args({"minAge": "x", "maxAge": "", "type": "", "vaccinated": "YES"})
    assert query.min_age is None and query.max_age is None and query.type is None
    assert query.vaccinated_only is True

    assert PetQuery.from_args({"vaccinated": "false"}).vaccinated_only is False


def test_equality_filters_pushed_down():
    query = PetQuery(type="dog", size="small", vaccinated_only=True)
    assert query.equality_filters() == [
        ('adoption_status', '==', 'available'),
        ('type', '==', 'dog'),
        ('size', '==', 'small'),
        ('health_info.vaccinated', '==', True),
    ]
    assert PetQuery(owner_id="u1", available_only=False).equality_filters() == [('owner_id', '==', 'u1')]


def test_substring_filters_are_case_insensitive(fake_db, engine):
    _store_pet(fake_db, "lab", breed="Labrador Retriever", location=Location(city="Mumbai"))
    _store_pet(fake_db, "pug", breed="Pug", location=Location(city="Delhi"))

    assert [p.pet_id for p in engine.find(PetQuery(breed="labrador"))] == ["lab"]
    assert [p.pet_id for p in engine.find(PetQuery(city="MUM"))] == ["lab"]


def test_keyword_matches_any_text_field(fake_db, engine):
    _store_pet(fake_db, "a", minutes=1, name="Rex")
    _store_pet(fake_db, "b", minutes=2, description="Loves the beach")
    _store_pet(fake_db, "c", minutes=3, tags=["Beach-dog"])
    _store_pet(fake_db, "d", minutes=4)

    assert [p.pet_id for p in engine.find(PetQuery(keyword="BEACH"))] == ["c", "b"]
    assert [p.pet_id for p in engine.find(PetQuery(keyword="rex"))] == ["a"]


def test_age_range_is_inclusive(fake_db, engine):
    for age in (1, 3, 5, 8):
        _store_pet(fake_db, f"age{age}", minutes=age, age=age)

    found = engine.find(PetQuery(min_age=3, max_age=5))
    assert sorted(p.age for p in found) == [3, 5]


def test_equality_and_status_filters(fake_db, engine):
    _store_pet(fake_db, "small-cat", type=PetType.CAT, size=PetSize.SMALL,
               health_info=HealthInfo(vaccinated=True))
    _store_pet(fake_db, "big-cat", type=PetType.CAT, size=PetSize.LARGE)
    _store_pet(fake_db, "adopted-cat", type=PetType.CAT, size=PetSize.SMALL,
               adoption_status=AdoptionStatus.ADOPTED)

    assert {p.pet_id for p in engine.find(PetQuery(type="cat"))} == {"small-cat", "big-cat"}
    assert [p.pet_id for p in engine.find(PetQuery(size="small"))] == ["small-cat"]
    assert [p.pet_id for p in engine.find(PetQuery(vaccinated_only=True))] == ["small-cat"]
    assert len(engine.find(PetQuery(available_only=False))) == 3


def test_pagination_sorted_newest_first(fake_db, engine):
    _store_user(fake_db)
    for i in range(25):
        _store_pet(fake_db, f"pet{i:02d}", minutes=i)

    first = engine.run(PetQuery(page=1, limit=10))
    assert (first.total, first.pages, first.page, first.limit) == (25, 3, 1, 10)
    assert [item.pet.pet_id for item in first.items][:2] == ["pet24", "pet23"]

    last = engine.run(PetQuery(page=3, limit=10))
    assert len(last.items) == 5
    assert last.items[-1].pet.pet_id == "pet00"

    beyond = engine.run(PetQuery(page=4, limit=10))
    assert beyond.items == []
    assert (beyond.total, beyond.pages) == (25, 3)


def test_empty_result_has_zero_pages(engine):
    result = engine.run(PetQuery(type="bird"))
    assert (result.total, result.pages, result.items) == (0, 0, [])


def test_expand_owners_resolves_each_owner(fake_db, engine):
    owner = _store_user(fake_db, "owner-1", name="Priya")
    _store_pet(fake_db, "orphan", owner_id="ghost")
    _store_pet(fake_db, "owned", owner_id="owner-1")

    expanded = {item.pet.pet_id: item for item in engine.run(PetQuery()).items}
    assert expanded["owned"].owner.name == owner.name
    assert expanded["orphan"].owner is None
