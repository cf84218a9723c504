# blog_api/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional, Dict, Any
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from blog_api.core.config import config_by_name

# - API 블루프린트
from blog_api.api.auth.routes import auth_bp
from blog_api.api.posts.routes import posts_bp
from blog_api.api.comments.routes import comments_bp
from blog_api.api.uploads.routes import local_uploads_bp, s3_uploads_bp

# - 서비스 모듈
from blog_api.services.firestore_service import PostStore, UserStore
from blog_api.services.storage_service import create_storage_service
from blog_api.api.auth.services import AuthService
from blog_api.api.posts.services import PostService


def _init_firestore(app: Flask):
    """Firebase 앱을 한 번만 초기화하고 Firestore 클라이언트를 반환합니다."""
    if not firebase_admin._apps:
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        options = {}
        if app.config.get('FIREBASE_PROJECT_ID'):
            options['projectId'] = app.config['FIREBASE_PROJECT_ID']
        if cred_path:
            if not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
        else:
            # GOOGLE_APPLICATION_CREDENTIALS 또는 에뮬레이터(FIRESTORE_EMULATOR_HOST) 사용
            firebase_admin.initialize_app(options=options or None)
    return firestore.client()


def create_app(config_name: Optional[str] = None, stores: Optional[Dict[str, Any]] = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'production' | 'testing' (기본값은 FLASK_ENV)
    :param stores: {'posts': PostStore, 'users': UserStore} 형태의 저장소.
                   주어지지 않으면 Firestore에 연결하여 생성합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    if not app.debug and not app.testing:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    @jwt.invalid_token_loader
    def handle_missing_or_invalid_token(reason):
        logging.warning(f"인증 실패: {reason}")
        return jsonify({"error_code": "NO_ACCESS", "message": "접근 권한이 없습니다."}), 403

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return jsonify({"error_code": "NO_ACCESS", "message": "토큰이 만료되었습니다."}), 403

    if stores is None:
        db = _init_firestore(app)
        stores = {'posts': PostStore(db), 'users': UserStore(db)}

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 업로드 방식은 배포 설정으로 한 번만 결정됩니다.
    upload_strategy = app.config['UPLOAD_STRATEGY']
    try:
        storage_instance = create_storage_service(upload_strategy)
        storage_instance.init_app(app)
        app.services['storage'] = storage_instance
        logging.info(f"Storage service initialized successfully (strategy: {upload_strategy})")
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    # 5-2. 도메인 서비스 생성
    app.services['auth'] = AuthService(user_store=stores['users'])
    app.services['posts'] = PostService(
        post_store=stores['posts'],
        user_store=stores['users'],
        storage_service=app.services['storage']
    )

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(posts_bp)
    app.register_blueprint(comments_bp)
    if upload_strategy == 'local':
        app.register_blueprint(local_uploads_bp)
    else:
        app.register_blueprint(s3_uploads_bp)

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"}), 200

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
