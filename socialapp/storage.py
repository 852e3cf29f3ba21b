"""
Image Store Adapter
Uploads, deletes and builds URLs for profile pictures and message images on AWS S3
"""

import logging
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import aioboto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .config import get_settings

logger = logging.getLogger(__name__)

PROFILE_PICTURE_PREFIX = 'profile-pictures'
MESSAGE_IMAGE_PREFIX = 'messages'


@dataclass
class ImageUpload:
    """An uploaded file, already read into memory"""
    content_type: Optional[str]
    data: bytes
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


def profile_picture_key(user_id: int) -> str:
    return f"{PROFILE_PICTURE_PREFIX}/{user_id}"


def generate_message_image_key() -> str:
    """Fresh key for a message attachment, never shared with profile pictures"""
    return f"{MESSAGE_IMAGE_PREFIX}/{uuid.uuid4().hex}"


class ImageStore:
    """Interface of the external image host"""

    async def upload_image(self, key: str, data: bytes, content_type: str) -> str:
        raise NotImplementedError

    async def delete_image(self, key: str) -> None:
        raise NotImplementedError

    def generate_url(self, key: str) -> str:
        raise NotImplementedError


class S3ImageStore(ImageStore):
    """Manages image uploads and deletions using AWS S3"""

    def __init__(self, bucket_name: str, region: str,
                 access_key_id: Optional[str] = None,
                 secret_access_key: Optional[str] = None):
        if not bucket_name:
            raise ValueError("Missing AWS S3 bucket in environment variables")
        self.bucket_name = bucket_name
        self.region = region
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.session = aioboto3.Session()

    def _client(self):
        return self.session.client('s3', region_name=self.region,
                                   aws_access_key_id=self.access_key_id,
                                   aws_secret_access_key=self.secret_access_key,
                                   config=Config(signature_version='s3v4'))

    @property
    def base_url(self) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/"

    def generate_url(self, key: str) -> str:
        """Get public URL for the S3 object"""
        return f"{self.base_url}{key}"

    async def upload_image(self, key: str, data: bytes, content_type: str) -> str:
        try:
            async with self._client() as client:
                await client.put_object(
                    Bucket=self.bucket_name,
                    Key=key,
                    Body=data,
                    ContentType=content_type,
                    CacheControl='no-cache',  # profile pictures are overwritten in place
                )
        except ClientError as e:
            logger.error({'msg': 's3_upload_failed', 'key': key, 'error': str(e)})
            raise
        return self.generate_url(key)

    async def delete_image(self, key: str) -> None:
        try:
            async with self._client() as client:
                await client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            logger.error({'msg': 's3_delete_failed', 'key': key, 'error': str(e)})
            raise


@lru_cache()
def get_image_store() -> ImageStore:
    settings = get_settings()
    return S3ImageStore(
        settings.s3_bucket,
        settings.s3_region,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
    )


def picture_url(store: ImageStore, user_id: int, default_picture: bool) -> str:
    """URL of a user's current profile picture"""
    if default_picture:
        return store.generate_url(get_settings().default_picture_key)
    return store.generate_url(profile_picture_key(user_id))
