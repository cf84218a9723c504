# blog_api/api/uploads/routes.py

import logging
from flask import request, jsonify, Blueprint, current_app, send_from_directory
from flask_jwt_extended import jwt_required

from blog_api.services.storage_service import UPLOADS_URL_PREFIX

# 배포 설정(UPLOAD_STRATEGY)에 따라 create_app에서 둘 중 하나의 블루프린트만 등록됩니다.
# - local_uploads_bp: 서버가 multipart 파일을 받아 디스크에 저장
# - s3_uploads_bp: 클라이언트가 S3에 직접 올릴 수 있도록 Pre-signed URL만 발급
local_uploads_bp = Blueprint('local_uploads', __name__)
s3_uploads_bp = Blueprint('s3_uploads', __name__)


@local_uploads_bp.route('/upload', methods=['POST'])
@jwt_required()
def upload_image():
    """
    multipart 요청의 'image' 파일을 저장하고 접근 경로를 반환합니다.
    같은 이름의 파일은 덮어씁니다.
    """
    storage_service = current_app.services['storage']
    image = request.files.get('image')
    if image is None or not image.filename:
        logging.warning("이미지 업로드 요청 실패 (image 파트 누락)")
        return jsonify({"error_code": "INVALID_PARAMETERS", "message": "'image' 파일이 필요합니다."}), 400

    try:
        url = storage_service.save_upload(image)
        return jsonify({"url": url}), 200
    except ValueError as e:
        logging.warning(f"이미지 업로드 요청 실패 (잘못된 파일 이름): {e}")
        return jsonify({"error_code": "INVALID_FILENAME", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"이미지 업로드 중 서버 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "UPLOAD_FAILED", "message": "이미지를 업로드하지 못했습니다."}), 500


@local_uploads_bp.route(f'{UPLOADS_URL_PREFIX}/<path:filename>', methods=['GET'])
def get_uploaded_image(filename: str):
    """업로드된 이미지를 정적 파일로 제공합니다."""
    storage_service = current_app.services['storage']
    return send_from_directory(storage_service.upload_folder, filename)


@s3_uploads_bp.route('/s3Url', methods=['GET'])
def get_upload_url():
    """
    S3에 직접 업로드할 수 있는 Pre-signed PUT URL을 발급합니다.
    클라이언트는 이 URL로 파일을 올린 뒤, 쿼리 문자열을 뗀 주소를 imageUrl로 사용합니다.
    """
    storage_service = current_app.services['storage']
    try:
        upload_url = storage_service.generate_upload_url()
        return jsonify({"uploadURL": upload_url}), 200
    except Exception as e:
        logging.error(f"Pre-signed URL 생성 중 서버 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "URL_GENERATION_FAILED", "message": "URL 생성 중 서버 오류가 발생했습니다."}), 500
