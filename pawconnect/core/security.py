# pawconnect/core/security.py
import logging
from flask import Flask, jsonify
from flask_jwt_extended import JWTManager, create_access_token
from werkzeug.security import generate_password_hash, check_password_hash

from pawconnect.models.user import User

UNAUTHENTICATED = "UNAUTHENTICATED"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """저장된 해시와 평문 비밀번호를 비교합니다. 소셜 계정처럼 해시가 없으면 항상 False입니다."""
    if not password_hash or not password:
        return False
    return check_password_hash(password_hash, password)


def issue_access_token(user: User) -> str:
    """사용자 ID를 subject로 하는 Access Token을 발급합니다. 만료 시간은 JWT_ACCESS_TOKEN_EXPIRES 설정을 따릅니다."""
    return create_access_token(identity=user.user_id)


def _unauthenticated(message: str):
    return jsonify({"error_code": UNAUTHENTICATED, "message": message}), 401


def init_jwt(app: Flask, user_service) -> JWTManager:
    """
    JWTManager를 앱에 등록하고 인증 게이트 콜백을 설정합니다.

    - 모든 보호된 요청은 토큰 서명/만료를 검증한 뒤 subject를 실제 사용자 문서로 조회합니다.
    - 조회된 User 객체는 핸들러에서 flask_jwt_extended.current_user로 접근합니다.
    - 헤더 누락, 잘못된 토큰, 만료, 삭제된 사용자는 모두 핸들러 실행 전에 401로 거부됩니다.
    """
    jwt = JWTManager(app)

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        return user_service.get_user(jwt_data["sub"])

    @jwt.user_lookup_error_loader
    def user_lookup_failed(_jwt_header, jwt_data):
        logging.warning(f"Token subject no longer resolves to a user: {jwt_data.get('sub')}")
        return _unauthenticated("Not authorized, user not found")

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthenticated("Not authorized, no token")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logging.info(f"Rejected invalid token: {reason}")
        return _unauthenticated("Not authorized, token failed")

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return _unauthenticated("Not authorized, token expired")

    return jwt
