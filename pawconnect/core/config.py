# pawconnect/core/config.py

import os
from datetime import timedelta


def _int_env(key: str, default: int) -> int:
    """정수형 환경 변수를 읽습니다. 값이 없거나 숫자가 아니면 기본값을 사용합니다."""
    try:
        return int(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 서명 키. 토큰 위변조를 막기 위해 반드시 환경 변수로 주입합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=_int_env('JWT_ACCESS_TOKEN_EXPIRES_HOURS', 24 * 30))
    JWT_TOKEN_LOCATION = ['headers']

    # Google OAuth (소셜 로그인)
    GOOGLE_CLIENT_SECRETS_PATH = os.getenv('GOOGLE_CLIENT_SECRETS_PATH')
    GOOGLE_REDIRECT_URI = os.getenv('GOOGLE_REDIRECT_URI', 'postmessage')

    # Firebase (Firestore + Storage)
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # 이미지 업로드
    IMAGE_UPLOAD_FOLDER = os.getenv('IMAGE_UPLOAD_FOLDER', 'pet_images')
    PLACEHOLDER_IMAGE_URL = os.getenv('PLACEHOLDER_IMAGE_URL', 'https://via.placeholder.com/300x200?text=Pet+Image')
    DEFAULT_PET_IMAGE = '/placeholder-pet.jpg'
    MAX_CONTENT_LENGTH = _int_env('MAX_UPLOAD_SIZE_MB', 10) * 1024 * 1024

    # 목록 조회
    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100
    SEARCH_RESULT_LIMIT = 20


class DevelopmentConfig(Config):
    """개발 환경 설정."""
    DEBUG = True


class TestingConfig(Config):
    """테스트 환경 설정. 외부 서비스 대신 테스트 더블이 주입됩니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'pawconnect-testing-secret-key-0123456789abcdef')
    FIREBASE_STORAGE_BUCKET = 'pawconnect-testing.appspot.com'


class ProductionConfig(Config):
    """운영 환경 설정."""
    DEBUG = False


# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
