# blog_api/core/config.py

import os
from datetime import timedelta


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 서명 키. 토큰 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    # 발급된 Access Token은 30일 동안 유효합니다.
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES_DAYS', 30)))

    PORT = int(os.getenv('PORT', 4444))

    # Firestore 연결에 사용할 서비스 계정 키 파일 경로와 프로젝트 ID
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

    # 이미지 업로드 방식: 'local'(서버 디스크 저장) 또는 's3'(Pre-signed URL 발급)
    UPLOAD_STRATEGY = os.getenv('UPLOAD_STRATEGY', 'local')
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'uploads')
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', 10 * 1024 * 1024))

    # 's3' 방식에서만 사용됩니다.
    AWS_REGION = os.getenv('AWS_REGION')
    AWS_BUCKET_NAME = os.getenv('AWS_BUCKET_NAME')
    AWS_ACCESS_KEY_ID = os.getenv('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.getenv('AWS_SECRET_ACCESS_KEY')
    PRESIGNED_URL_EXPIRES = int(os.getenv('PRESIGNED_URL_EXPIRES', 60))


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True


class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다. 외부 서비스 없이 동작하도록 값을 고정합니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'test-secret-key'
    UPLOAD_STRATEGY = 'local'


# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    production=ProductionConfig,
    testing=TestingConfig
)
