"""
Friend Requests
Sending, accepting and listing pending requests. An accepted request is the
only way two users become friends.
"""

import logging
from typing import List

from ..crud import (
    get_user_by_id,
    are_friends,
    get_pending_request,
    create_friend_request,
    accept_friend_request,
    list_incoming_requests,
)
from ..errors import ConflictError, NotFoundError, SelfTargetError, parse_id
from ..metrics import FRIEND_REQUESTS
from ..models import AsyncSessionLocal
from ..schemas.friend_requests import FriendRequestOut
from ..storage import ImageStore, picture_url

logger = logging.getLogger(__name__)


async def send_request(from_id: int, target_id) -> bool:
    """Send a friend request, or accept the target's pending request to us.

    Returns True when a friendship was created.
    """
    target_id = parse_id(target_id, missing=NotFoundError('User not found.'))

    async with AsyncSessionLocal() as session:
        async with session.begin():
            if await get_user_by_id(session, target_id) is None:
                raise NotFoundError('User not found.')
            if target_id == from_id:
                raise SelfTargetError('ID must belong to other user.')
            if await are_friends(session, from_id, target_id):
                raise ConflictError('Already friends.')
            if await get_pending_request(session, from_id, target_id):
                raise ConflictError('Friend request already sent.')

            incoming = await get_pending_request(session, target_id, from_id)
            if incoming:
                friendship = await accept_friend_request(session, incoming)
                logger.info({'msg': 'friend_request_accepted', 'friendship_id': friendship.id,
                             'from_user': target_id, 'to_user': from_id})
                FRIEND_REQUESTS.labels(outcome='accepted').inc()
                return True

            fr = await create_friend_request(session, from_id, target_id)

    FRIEND_REQUESTS.labels(outcome='sent').inc()
    logger.info({'msg': 'friend_request_sent', 'request_id': fr.id, 'from_user': from_id, 'to_user': target_id})
    return False


async def list_requests(user_id: int, store: ImageStore) -> List[FriendRequestOut]:
    async with AsyncSessionLocal() as session:
        rows = await list_incoming_requests(session, user_id)
    return [
        FriendRequestOut(
            id=profile.user_id,
            display_name=profile.display_name,
            picture=picture_url(store, profile.user_id, profile.default_picture),
        )
        for _, profile in rows
    ]
