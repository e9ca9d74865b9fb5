# pawconnect/__init__.py

# =====================================================================================
# 1. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정 / 공통
from pawconnect.core.config import config_by_name
from pawconnect.core.errors import PawConnectError
from pawconnect.core.security import init_jwt

# - API 블루프린트
from pawconnect.api.auth.routes import auth_bp
from pawconnect.api.pets.routes import pets_bp
from pawconnect.api.uploads.routes import uploads_bp

# - 서비스 모듈
from pawconnect.services.storage_service import StorageService
from pawconnect.api.auth.services import UserService
from pawconnect.api.pets.services import PetService


def _init_firebase(app: Flask):
    """firebase-admin 기본 앱을 한 번만 초기화합니다. 인증 파일이 없으면 Application Default Credentials를 사용합니다."""
    if firebase_admin._apps:
        return
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if cred_path:
        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
    else:
        cred = credentials.ApplicationDefault()
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def create_app(config_name: str = None, firestore_client=None, storage_bucket=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production'. 없으면 FLASK_ENV를 사용합니다.
    :param firestore_client: 미리 만든 Firestore 클라이언트 (테스트에서 주입)
    :param storage_bucket: 미리 만든 Storage 버킷 (테스트에서 주입)
    """
    # =====================================================================================
    # 2. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False
    # '/api/pets'와 '/api/pets/'를 같은 경로로 취급합니다. 블루프린트 등록 전에 설정해야 합니다.
    app.url_map.strict_slashes = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("JWT_SECRET_KEY 환경 변수가 설정되지 않았습니다.")

    # =====================================================================================
    # 3. 외부 서비스 초기화
    # =====================================================================================
    if firestore_client is None or storage_bucket is None:
        _init_firebase(app)
    db = firestore_client or firestore.client()

    # =====================================================================================
    # 4. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    storage_instance = StorageService(bucket=storage_bucket)
    storage_instance.init_app(app)
    app.services['storage'] = storage_instance

    app.services['users'] = UserService(db=db)
    app.services['pets'] = PetService(
        db=db,
        default_image_url=app.config['DEFAULT_PET_IMAGE'],
        default_page_size=app.config['DEFAULT_PAGE_SIZE'],
        max_page_size=app.config['MAX_PAGE_SIZE'],
        search_limit=app.config['SEARCH_RESULT_LIMIT']
    )

    # - 인증 게이트 (토큰 subject -> User 조회)
    init_jwt(app, app.services['users'])

    # =====================================================================================
    # 5. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(pets_bp, url_prefix='/api/pets')
    app.register_blueprint(uploads_bp, url_prefix='/api/upload')

    @app.route('/api/', methods=['GET'])
    def index():
        return jsonify({"message": "PawConnect API is running"}), 200

    # =====================================================================================
    # 6. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(PawConnectError)
    def handle_domain_error(err):
        if err.status_code >= 500:
            logging.error(f"Domain error: {err}", exc_info=True)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        error_code = (err.name or "HTTP_ERROR").upper().replace(' ', '_')
        return jsonify({"error_code": error_code, "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 7. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
