# pawconnect/api/auth/services.py
import uuid
import logging
from typing import Dict, Any, Tuple, Optional
from firebase_admin import firestore

from pawconnect.core.errors import ConflictError, UnauthenticatedError
from pawconnect.core.security import hash_password, verify_password
from pawconnect.models.location import Location
from pawconnect.models.user import User, UserType, DEFAULT_USER_COUNTRY
from pawconnect.utils.datetime_utils import DateTimeUtils, for_firestore


class UserService:
    """
    Firestore 'users' 컬렉션을 다루는 사용자 저장소 서비스입니다.
    회원가입, 비밀번호 로그인, Google 로그인, 프로필 조회/수정을 담당합니다.
    """

    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')

    def get_user(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        doc = self.users_ref.document(str(user_id)).get()
        if not doc.exists:
            return None
        data = doc.to_dict()
        data.setdefault('user_id', doc.id)
        return User.from_dict(data)

    def find_user_by_email(self, email: str) -> Optional[User]:
        query = self.users_ref.where('email', '==', email.strip().lower()).limit(1).stream()
        user_doc = next(iter(query), None)
        if not user_doc:
            return None
        data = user_doc.to_dict()
        data.setdefault('user_id', user_doc.id)
        return User.from_dict(data)

    def _save_new_user(self, user: User) -> User:
        self.users_ref.document(user.user_id).set(for_firestore(user.to_dict()))
        return user

    def register_user(self, data: Dict[str, Any]) -> User:
        """
        새 사용자를 생성합니다. 이메일 중복은 조회 후 생성 방식으로 확인하므로 원자적이지 않습니다.

        :raises ConflictError: 이미 가입된 이메일인 경우
        """
        email = data['email'].strip().lower()
        if self.find_user_by_email(email):
            logging.warning(f"Registration rejected, email already in use: {email}")
            raise ConflictError("User already exists", error_code="EMAIL_ALREADY_EXISTS")

        location = data.get('location')
        user = User(
            user_id=str(uuid.uuid4()),
            name=data['name'].strip(),
            email=email,
            password_hash=hash_password(data['password']),
            phone=data.get('phone'),
            location=Location.from_dict(location, default_country=DEFAULT_USER_COUNTRY) if location else Location(country=DEFAULT_USER_COUNTRY),
            user_type=UserType(data.get('user_type') or UserType.BOTH.value)
        )
        self._save_new_user(user)
        logging.info(f"User registered: {user.user_id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        이메일/비밀번호로 사용자를 확인합니다.
        Google로만 가입해 비밀번호가 없는 계정은 비밀번호 로그인이 불가능합니다.

        :raises UnauthenticatedError: 사용자가 없거나 비밀번호가 틀린 경우
        """
        user = self.find_user_by_email(email)
        if not user or not verify_password(user.password_hash, password):
            logging.warning(f"Login failed for {email.strip().lower()}")
            raise UnauthenticatedError("Invalid email or password", error_code="INVALID_CREDENTIALS")
        return user

    def get_or_create_user_by_google(self, google_user_info: dict) -> Tuple[User, bool]:
        """
        Google 사용자 정보로 기존 계정을 찾거나 새 계정을 만듭니다.
        같은 이메일의 기존 계정이 있으면 그 계정으로 로그인합니다.
        """
        google_id = google_user_info.get('sub')
        email = (google_user_info.get('email') or "").strip().lower()
        if not google_id or not email:
            raise ValueError("Google user info must contain 'sub' and 'email'.")

        user = self.find_user_by_email(email)
        if user:
            if not user.google_id:
                self.users_ref.document(user.user_id).update({
                    'google_id': google_id,
                    'updated_at': DateTimeUtils.now()
                })
                user.google_id = google_id
            return user, False

        user = User(
            user_id=str(uuid.uuid4()),
            name=google_user_info.get('name') or email.split('@')[0],
            email=email,
            profile_picture=google_user_info.get('picture'),
            is_google_auth=True,
            google_id=google_id
        )
        self._save_new_user(user)
        logging.info(f"User created from Google login: {user.user_id}")
        return user, True

    def update_profile(self, user: User, update_data: Dict[str, Any]) -> User:
        """전달된 필드만 수정합니다. 이메일, 비밀번호, 관심 목록은 이 경로로 바꿀 수 없습니다."""
        if not update_data:
            return user

        payload = dict(update_data)
        if 'location' in payload:
            merged = {**user.location.to_dict(), **{k: v for k, v in payload['location'].items() if v}}
            payload['location'] = merged
        if 'name' in payload:
            payload['name'] = payload['name'].strip()
        payload['updated_at'] = DateTimeUtils.now()

        self.users_ref.document(user.user_id).update(for_firestore(payload))
        logging.info(f"Profile updated: {user.user_id} ({', '.join(sorted(update_data))})")
        return self.get_user(user.user_id)
