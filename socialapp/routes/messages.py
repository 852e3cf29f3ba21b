from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from ..auth import get_current_user
from ..config import Settings, get_settings
from ..schemas.common import StatusOut
from ..schemas.messages import MessageOut, ConversationOut
from ..services import messages as message_service
from ..storage import ImageStore, get_image_store
from .uploads import read_upload

router = APIRouter()


@router.get('/', response_model=List[ConversationOut])
async def conversations(
    current_user: dict = Depends(get_current_user),
    store: ImageStore = Depends(get_image_store)
):
    return await message_service.list_conversations(current_user['id'], store)


@router.get('/{user_id}', response_model=List[MessageOut], response_model_exclude_none=True)
async def dialog(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    store: ImageStore = Depends(get_image_store)
):
    return await message_service.get_conversation(current_user['id'], user_id, store)


@router.post('/{user_id}', response_model=StatusOut)
async def send(
    user_id: str,
    message_type: Optional[str] = Form(None, alias='type'),
    content: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user),
    store: ImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_settings)
):
    upload = await read_upload(image)
    await message_service.send_message(
        current_user['id'], user_id, message_type, content, upload, store, settings.uploads
    )
    return StatusOut()


@router.delete('/{message_id}', response_model=StatusOut)
async def delete(
    message_id: str,
    current_user: dict = Depends(get_current_user),
    store: ImageStore = Depends(get_image_store)
):
    await message_service.delete_message(message_id, store)
    return StatusOut()
