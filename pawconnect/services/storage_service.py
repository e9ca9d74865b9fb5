# pawconnect/services/storage_service.py
import os
import uuid
import logging
import mimetypes
from dataclasses import dataclass
from flask import Flask
from firebase_admin import storage

from pawconnect.core.errors import StorageError


@dataclass
class UploadResult:
    """이미지 중계 결과. 저장소 장애로 대체 이미지를 반환한 경우 degraded가 True입니다."""
    image_url: str
    degraded: bool = False


class StorageService:
    """
    Firebase Storage에 반려동물 이미지를 저장하는 서비스 클래스입니다.
    클라이언트가 보낸 이미지를 서버가 받아 버킷에 올리고 공개 URL을 돌려주는 중계 역할을 합니다.
    """

    def __init__(self, bucket=None):
        """
        버킷을 직접 주입할 수 있습니다(테스트 등).
        주입하지 않으면 init_app에서 설정값으로 버킷을 생성합니다.
        """
        self.bucket = bucket
        self.folder = 'pet_images'
        self.placeholder_url = None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 폴더, 대체 이미지, 버킷을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        self.folder = app.config.get('IMAGE_UPLOAD_FOLDER', 'pet_images')
        self.placeholder_url = app.config.get('PLACEHOLDER_IMAGE_URL')

        if self.bucket is None:
            bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
            if not bucket_name:
                raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")
            self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    @staticmethod
    def _extension_for(filename: str, content_type: str) -> str:
        _, ext = os.path.splitext(filename or "")
        if ext:
            return ext.lstrip('.').lower()
        guessed = mimetypes.guess_extension(content_type or "")
        return guessed.lstrip('.') if guessed else 'jpg'

    def upload_image(self, data: bytes, content_type: str, filename: str = "") -> str:
        """
        이미지 바이트를 '<folder>/<uuid>.<ext>' 경로에 업로드하고 공개 URL을 반환합니다.

        :param data: 업로드할 파일 내용
        :param content_type: 파일의 MIME 타입 (예: "image/jpeg")
        :param filename: 클라이언트가 보낸 원본 파일명 (확장자 파악에 사용)
        :return: 공개적으로 접근 가능한 URL
        :raises StorageError: 버킷이 없거나 업로드/공개 전환이 실패한 경우
        """
        if not self.bucket:
            raise StorageError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        destination = f"{self.folder}/{uuid.uuid4()}.{self._extension_for(filename, content_type)}"
        blob = self.bucket.blob(destination)
        try:
            blob.upload_from_string(data, content_type=content_type)
            blob.make_public()
        except Exception as e:
            logging.error(f"이미지 업로드 실패 ({destination}): {e}", exc_info=True)
            raise StorageError("Image upload failed") from e

        logging.info(f"Image uploaded: {destination}")
        return blob.public_url

    def relay_image(self, data: bytes, content_type: str, filename: str = "") -> UploadResult:
        """업로드를 시도하고, 저장소가 실패하면 대체 이미지 URL로 강등된 결과를 반환합니다."""
        try:
            return UploadResult(image_url=self.upload_image(data, content_type, filename))
        except StorageError:
            logging.warning("Image storage unavailable, returning placeholder image URL")
            return UploadResult(image_url=self.placeholder_url, degraded=True)
