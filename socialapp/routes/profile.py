"""
Profile Management Routes
Handles display name and bio editing, picture upload/reset and profile viewing
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile
from ..auth import get_current_user
from ..config import Settings, get_settings
from ..schemas.common import StatusOut
from ..schemas.profiles import ProfileUpdateIn, ProfileOut
from ..services import profile as profile_service
from ..storage import ImageStore, get_image_store
from .uploads import read_upload

router = APIRouter()


@router.put('', response_model=StatusOut)
async def update_profile(
    profile_data: ProfileUpdateIn,
    current_user: dict = Depends(get_current_user)
):
    await profile_service.update_profile(current_user['id'], profile_data.display_name, profile_data.bio)
    return StatusOut()


@router.put('/picture', response_model=StatusOut)
async def update_picture(
    picture: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user),
    store: ImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_settings)
):
    image = await read_upload(picture)
    await profile_service.update_picture(current_user['id'], image, store, settings.uploads)
    return StatusOut()


@router.delete('/picture', response_model=StatusOut)
async def delete_picture(
    current_user: dict = Depends(get_current_user),
    store: ImageStore = Depends(get_image_store)
):
    await profile_service.delete_picture(current_user['id'], store)
    return StatusOut()


@router.get('/{user_id}', response_model=ProfileOut, response_model_exclude_none=True)
async def get_profile(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    store: ImageStore = Depends(get_image_store)
):
    return await profile_service.get_profile(current_user['id'], user_id, store)
