# blog_api/services/storage_service.py
import os
import re
import logging
import secrets
from typing import Optional
from urllib.parse import urlparse, unquote

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError
from flask import Flask
from werkzeug.datastructures import FileStorage

# 로컬 업로드 파일이 노출되는 URL 경로
UPLOADS_URL_PREFIX = '/uploads'


def _strip_path_components(filename: str) -> str:
    """
    클라이언트가 보낸 파일 이름에서 디렉터리 부분만 제거합니다. (한글 등 비ASCII 문자는 그대로 유지)
    '.', '..' 또는 빈 이름은 ValueError를 발생시킵니다.
    """
    name = os.path.basename((filename or '').replace('\\', '/'))
    if name in ('', '.', '..') or '\x00' in name:
        raise ValueError("업로드할 파일 이름이 올바르지 않습니다.")
    return name


class StorageService:
    """
    게시글 이미지 저장소의 공통 인터페이스.
    배포 설정(UPLOAD_STRATEGY)에 따라 하위 구현 중 하나만 app.services['storage']에 등록됩니다.
    """

    def init_app(self, app: Flask):
        raise NotImplementedError

    def delete_file(self, image_url: str) -> None:
        """
        게시글 삭제 시 연결된 이미지를 지웁니다.
        이미 없는 파일은 성공으로 간주하며, 그 외의 오류는 호출자에게 전파됩니다.
        """
        raise NotImplementedError


class LocalStorageService(StorageService):
    """
    업로드된 파일을 서버 로컬 디스크(UPLOAD_FOLDER)에 저장하는 구현.
    같은 이름의 파일을 다시 올리면 기존 파일을 덮어씁니다.
    """

    def __init__(self):
        self.upload_folder: Optional[str] = None

    def init_app(self, app: Flask):
        folder = app.config.get('UPLOAD_FOLDER', 'uploads')
        if not os.path.isabs(folder):
            folder = os.path.join(os.getcwd(), folder)
        self.upload_folder = folder
        logging.info(f"LocalStorageService: 업로드 경로 '{self.upload_folder}'로 초기화되었습니다.")

    def _ensure_initialized(self):
        if not self.upload_folder:
            raise RuntimeError("LocalStorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

    def save_upload(self, file: FileStorage) -> str:
        """
        업로드 파일을 저장하고 클라이언트가 접근할 상대 경로를 반환합니다.

        :param file: multipart 요청의 'image' 파트
        :return: '/uploads/<filename>' 형식의 접근 경로
        """
        self._ensure_initialized()
        filename = _strip_path_components(file.filename)

        # 저장 디렉터리가 없으면 생성
        os.makedirs(self.upload_folder, exist_ok=True)
        file.save(os.path.join(self.upload_folder, filename))
        logging.info(f"이미지 업로드 저장 완료: {filename}")
        return f"{UPLOADS_URL_PREFIX}/{filename}"

    def resolve_path(self, image_url: str) -> Optional[str]:
        """'/uploads/<filename>' 또는 그 경로를 가진 전체 URL을 로컬 파일 경로로 변환합니다."""
        self._ensure_initialized()
        path = unquote(urlparse(image_url).path)
        if not path.startswith(UPLOADS_URL_PREFIX + '/'):
            return None
        try:
            filename = _strip_path_components(path[len(UPLOADS_URL_PREFIX) + 1:])
        except ValueError:
            return None
        return os.path.join(self.upload_folder, filename)

    def delete_file(self, image_url: str) -> None:
        file_path = self.resolve_path(image_url)
        if not file_path:
            logging.info(f"로컬 업로드 파일이 아니므로 삭제를 건너뜁니다: {image_url}")
            return
        try:
            os.remove(file_path)
            logging.info(f"업로드 이미지 삭제 완료: {file_path}")
        except FileNotFoundError:
            logging.warning(f"삭제할 업로드 이미지가 이미 없습니다: {file_path}")


class S3StorageService(StorageService):
    """
    클라이언트가 서버를 거치지 않고 S3에 직접 업로드하도록 Pre-signed PUT URL을 발급하는 구현.
    """

    def __init__(self):
        self.s3 = None
        self.bucket_name: Optional[str] = None
        self.expires_in = 60

    def init_app(self, app: Flask):
        region = app.config.get('AWS_REGION')
        self.bucket_name = app.config.get('AWS_BUCKET_NAME')
        access_key = app.config.get('AWS_ACCESS_KEY_ID')
        secret_key = app.config.get('AWS_SECRET_ACCESS_KEY')
        self.expires_in = int(app.config.get('PRESIGNED_URL_EXPIRES', 60))

        if not all([region, self.bucket_name, access_key, secret_key]):
            # URL 발급 시점에 실패하도록 클라이언트를 비워 둡니다.
            logging.warning("S3StorageService: AWS 자격 증명 또는 버킷 설정이 누락되었습니다.")
            return

        self.s3 = boto3.client(
            's3',
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=Config(signature_version='s3v4'),
        )
        logging.info(f"S3StorageService: 버킷 '{self.bucket_name}'로 초기화되었습니다.")

    def _ensure_initialized(self):
        if self.s3 is None:
            raise RuntimeError("S3 자격 증명이 설정되지 않았습니다. AWS_REGION, AWS_BUCKET_NAME, AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY를 확인해주세요.")

    def generate_upload_url(self) -> str:
        """
        16바이트 난수를 hex 인코딩한 객체 키로 PUT 전용 Pre-signed URL을 생성합니다.
        URL은 expires_in(기본 60초) 동안만 유효합니다.
        """
        self._ensure_initialized()
        image_name = secrets.token_hex(16)
        return self.s3.generate_presigned_url(
            'put_object',
            Params={'Bucket': self.bucket_name, 'Key': image_name},
            ExpiresIn=self.expires_in,
        )

    def object_key(self, image_url: str) -> Optional[str]:
        """
        이 버킷의 객체 URL에서 객체 키를 추출합니다. 다른 호스트/버킷의 URL이면 None입니다.
        - virtual-hosted: https://<bucket>.s3[.<region>].amazonaws.com/<key>
        - path-style:     https://s3[.<region>].amazonaws.com/<bucket>/<key>
        """
        if not self.bucket_name:
            return None
        parsed = urlparse(image_url)
        host = (parsed.hostname or '').lower()
        path = unquote(parsed.path)
        endpoint = r's3(?:[.-][a-z0-9-]+)*\.amazonaws\.com'

        if re.fullmatch(re.escape(self.bucket_name.lower()) + r'\.' + endpoint, host):
            key = path.lstrip('/')
        elif re.fullmatch(endpoint, host) and path.startswith(f"/{self.bucket_name}/"):
            key = path[len(self.bucket_name) + 2:]
        else:
            return None
        return key or None

    def delete_file(self, image_url: str) -> None:
        key = self.object_key(image_url)
        if not key:
            logging.info(f"이 버킷의 S3 객체가 아니므로 삭제를 건너뜁니다: {image_url}")
            return
        self._ensure_initialized()
        try:
            self.s3.delete_object(Bucket=self.bucket_name, Key=key)
            logging.info(f"S3 이미지 삭제 완료: {key}")
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('NoSuchKey', '404'):
                logging.warning(f"삭제할 S3 이미지가 이미 없습니다: {key}")
                return
            raise


def create_storage_service(strategy: str) -> StorageService:
    """UPLOAD_STRATEGY 설정값('local' | 's3')에 맞는 저장소 구현을 생성합니다."""
    if strategy == 'local':
        return LocalStorageService()
    if strategy == 's3':
        return S3StorageService()
    raise ValueError(f"'{strategy}'은(는) 지원하지 않는 업로드 방식입니다. ('local' 또는 's3')")
