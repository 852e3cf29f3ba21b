from typing import Optional
from fastapi import UploadFile
from ..storage import ImageUpload


async def read_upload(file: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Read a multipart file field into memory; a missing or empty field gives None"""
    if file is None or not file.filename:
        return None
    data = await file.read()
    return ImageUpload(content_type=file.content_type, data=data, filename=file.filename)
