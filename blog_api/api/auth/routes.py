# blog_api/api/auth/routes.py

import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from blog_api.api.auth.schemas import RegisterSchema, LoginSchema, UserResponseSchema
from blog_api.api.auth.services import EmailAlreadyRegisteredError, InvalidCredentialsError

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일/비밀번호로 회원가입하고 access token을 함께 반환합니다."""
    auth_service = current_app.services['auth']
    # ValidationError는 전역 에러 핸들러가 400으로 변환합니다.
    data = RegisterSchema().load(request.get_json(silent=True) or {})
    try:
        user, token = auth_service.register(
            email=data['email'],
            password=data['password'],
            full_name=data['full_name'],
            avatar_url=data.get('avatar_url'),
        )
        return jsonify({**UserResponseSchema().dump(user), "token": token}), 201
    except EmailAlreadyRegisteredError as e:
        return jsonify({"error_code": "EMAIL_ALREADY_EXISTS", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"회원가입 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "REGISTRATION_FAILED", "message": "회원가입에 실패했습니다."}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """이메일/비밀번호를 확인하고 access token을 발급합니다."""
    auth_service = current_app.services['auth']
    data = LoginSchema().load(request.get_json(silent=True) or {})
    try:
        result = auth_service.login(data['email'], data['password'])
        if not result:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        user, token = result
        return jsonify({**UserResponseSchema().dump(user), "token": token}), 200
    except InvalidCredentialsError as e:
        logging.warning(f"로그인 실패 (email: {data['email']})")
        return jsonify({"error_code": "INVALID_CREDENTIALS", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"로그인 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "LOGIN_FAILED", "message": "로그인에 실패했습니다."}), 500


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_me():
    """현재 로그인된 사용자의 정보를 조회합니다."""
    auth_service = current_app.services['auth']
    user_id = get_jwt_identity()
    try:
        user = auth_service.get_me(user_id)
        if not user:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify(UserResponseSchema().dump(user)), 200
    except Exception as e:
        logging.error(f"내 정보 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "사용자 정보를 가져오지 못했습니다."}), 500
