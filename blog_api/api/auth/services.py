# blog_api/api/auth/services.py
import uuid
import logging
from dataclasses import asdict
from typing import Dict, Any, Tuple, Optional

from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash, check_password_hash

from blog_api.models.user import User


class EmailAlreadyRegisteredError(ValueError):
    """이미 가입된 이메일로 회원가입을 시도한 경우"""


class InvalidCredentialsError(ValueError):
    """로그인 시 비밀번호가 일치하지 않는 경우"""


class AuthService:
    """
    회원가입, 로그인, 내 정보 조회를 담당하는 서비스 클래스.
    비밀번호는 werkzeug 해시로만 저장하며, 토큰은 flask_jwt_extended로 발급합니다.
    """
    def __init__(self, user_store):
        self.user_store = user_store

    @staticmethod
    def _public(user_data: Dict[str, Any]) -> Dict[str, Any]:
        """응답에 포함할 수 없는 password_hash를 제거합니다."""
        return {k: v for k, v in user_data.items() if k != 'password_hash'}

    def register(self, email: str, password: str, full_name: str,
                 avatar_url: Optional[str] = None) -> Tuple[Dict[str, Any], str]:
        """새 사용자를 저장하고 (사용자 정보, access token)을 반환합니다."""
        if self.user_store.find_by_email(email):
            raise EmailAlreadyRegisteredError("이미 가입된 이메일입니다.")

        new_user = User(
            user_id=str(uuid.uuid4()),
            email=email,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            avatar_url=avatar_url,
        )
        try:
            self.user_store.insert(asdict(new_user))
        except Exception as e:
            logging.error(f"회원가입 저장 실패 (email: {email}): {e}", exc_info=True)
            raise

        token = create_access_token(identity=new_user.user_id)
        return self._public(asdict(new_user)), token

    def login(self, email: str, password: str) -> Optional[Tuple[Dict[str, Any], str]]:
        """
        이메일/비밀번호를 확인하고 (사용자 정보, access token)을 반환합니다.
        - 가입되지 않은 이메일이면 None
        - 비밀번호가 틀리면 InvalidCredentialsError
        """
        user_data = self.user_store.find_by_email(email)
        if not user_data:
            return None
        if not check_password_hash(user_data.get('password_hash', ''), password):
            raise InvalidCredentialsError("이메일 또는 비밀번호가 올바르지 않습니다.")

        token = create_access_token(identity=user_data['user_id'])
        return self._public(user_data), token

    def get_me(self, user_id: str) -> Optional[Dict[str, Any]]:
        user_data = self.user_store.find_by_id(user_id)
        if not user_data:
            return None
        return self._public(user_data)
