# pawconnect/api/auth/routes.py

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, current_user

from pawconnect.api.auth.schemas import RegisterSchema, LoginSchema, GoogleLoginSchema, ProfileUpdateSchema
from pawconnect.core.errors import UnauthenticatedError
from pawconnect.core.security import issue_access_token
from pawconnect.schemas.user_schema import UserProfileResponseSchema
from pawconnect.services.google_auth_service import GoogleAuthService

auth_bp = Blueprint('auth_bp', __name__)


def _auth_response(user, status_code=200, **extra):
    body = {
        "token": issue_access_token(user),
        "user": UserProfileResponseSchema().dump(user.to_dict())
    }
    body.update(extra)
    return jsonify(body), status_code


@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일/비밀번호로 회원가입하고 즉시 사용할 수 있는 토큰을 발급합니다."""
    data = RegisterSchema().load(request.get_json(silent=True) or {})
    user = current_app.services['users'].register_user(data)
    return _auth_response(user, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    data = LoginSchema().load(request.get_json(silent=True) or {})
    user = current_app.services['users'].authenticate(data['email'], data['password'])
    return _auth_response(user)


@auth_bp.route('/google', methods=['POST'])
def google_login():
    """Google OAuth 인증 코드로 로그인합니다. 처음 보는 이메일이면 계정을 생성합니다."""
    data = GoogleLoginSchema().load(request.get_json(silent=True) or {})
    client_secrets_path = current_app.config.get('GOOGLE_CLIENT_SECRETS_PATH')
    if not client_secrets_path:
        raise ValueError("GOOGLE_CLIENT_SECRETS_PATH is not configured.")

    google_user_info = GoogleAuthService.exchange_code_for_user_info(
        auth_code=data['auth_code'],
        client_secrets_path=client_secrets_path,
        redirect_uri=current_app.config.get('GOOGLE_REDIRECT_URI', 'postmessage')
    )
    if not google_user_info:
        raise UnauthenticatedError("유효하지 않은 인증 코드이거나 사용자 정보 조회에 실패했습니다.", error_code="INVALID_AUTH_CODE")

    user, is_new_user = current_app.services['users'].get_or_create_user_by_google(google_user_info)
    return _auth_response(user, 201 if is_new_user else 200, isNewUser=is_new_user)


@auth_bp.route('/profile', methods=['GET'])
@jwt_required()
def get_profile():
    return jsonify(UserProfileResponseSchema().dump(current_user.to_dict())), 200


@auth_bp.route('/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    data = ProfileUpdateSchema().load(request.get_json(silent=True) or {})
    updated = current_app.services['users'].update_profile(current_user, data)
    return jsonify(UserProfileResponseSchema().dump(updated.to_dict())), 200
