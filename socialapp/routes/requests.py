from typing import List
from fastapi import APIRouter, Depends
from ..auth import get_current_user
from ..schemas.common import StatusOut
from ..schemas.friend_requests import FriendRequestOut
from ..services import friend_requests
from ..storage import ImageStore, get_image_store

router = APIRouter()


@router.get('', response_model=List[FriendRequestOut])
async def get_requests(
    current_user: dict = Depends(get_current_user),
    store: ImageStore = Depends(get_image_store)
):
    """Pending requests sent to the current user"""
    return await friend_requests.list_requests(current_user['id'], store)


@router.post('/{user_id}', response_model=StatusOut)
async def post_request(user_id: str, current_user: dict = Depends(get_current_user)):
    """Send a friend request; accepts the other user's pending request if there is one"""
    await friend_requests.send_request(current_user['id'], user_id)
    return StatusOut()
