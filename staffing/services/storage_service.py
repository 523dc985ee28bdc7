"""스토리지 서비스: S3 또는 로컬 파일 저장.

Storage Service: Image storage on S3 or the local disk.
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
Local files are served by the app under ``/uploads``.
"""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from staffing.config import settings
from staffing.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)

# 로컬 업로드 기본 디렉토리: 프로젝트 루트의 uploads/
_SERVER_ROOT: Path = Path(__file__).resolve().parent.parent.parent

# 허용 이미지 확장자: Accepted image extensions
_IMAGE_EXTENSIONS: frozenset[str] = frozenset({"jpg", "jpeg", "png", "gif", "webp"})


def uploads_dir() -> Path:
    """로컬 업로드 디렉토리: .env의 LOCAL_UPLOADS_DIR 또는 server/uploads/."""
    return Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _SERVER_ROOT / "uploads"


class StorageService:
    """파일 업로드 서비스: S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def _generate_key(self, filename: str, folder: str) -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if ext not in _IMAGE_EXTENSIONS:
            raise BadRequestError("Only jpg, jpeg, png, gif and webp images are accepted")
        date_prefix = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        return f"{folder}/{date_prefix}/{uuid.uuid4().hex}.{ext}"

    def save_local(self, key: str, data: bytes) -> str:
        """로컬 파일 저장. 앱이 제공하는 URL 경로를 반환합니다."""
        path = uploads_dir() / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return f"/uploads/{key}"

    def _put_s3(self, key: str, data: bytes, content_type: str) -> str:
        self.client.put_object(
            Bucket=settings.AWS_S3_BUCKET,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/{key}"

    async def save_image(
        self,
        filename: str,
        data: bytes,
        content_type: str | None,
        folder: str,
    ) -> str:
        """이미지를 저장하고 경로 또는 URL을 반환합니다.

        Store an uploaded image and return its path (local mode) or public
        URL (S3 mode).

        Raises:
            BadRequestError: 이미지가 아니거나 크기 초과 (Not an image, empty, or too large)
        """
        if not content_type or not content_type.startswith("image/"):
            raise BadRequestError("Uploaded file must be an image")
        if not data:
            raise BadRequestError("Uploaded file is empty")
        if len(data) > settings.MAX_UPLOAD_BYTES:
            raise BadRequestError(f"Image exceeds {settings.MAX_UPLOAD_BYTES} bytes")

        key = self._generate_key(filename, folder)
        if self.is_local:
            return await run_in_threadpool(self.save_local, key, data)
        location = await run_in_threadpool(self._put_s3, key, data, content_type)
        logger.info("Uploaded %s to S3", key)
        return location


storage_service: StorageService = StorageService()
