"""
Direct Messaging
Text and image messages between friends, conversation views and soft deletion
"""

import logging
from typing import List, Optional

from ..config import UploadLimits
from ..crud import (
    are_friends,
    create_message,
    list_dialog,
    latest_messages,
    get_message,
    get_profile,
    soft_delete_message,
)
from ..errors import ValidationError, NotFoundError, SelfTargetError, FriendNotFoundError, parse_id
from ..metrics import MESSAGES_SENT, MESSAGES_DELETED
from ..models import AsyncSessionLocal
from ..models.messages import MessageType
from ..schemas.messages import MessageOut, LatestMessageOut, ConversationOut
from ..storage import ImageStore, ImageUpload, generate_message_image_key, picture_url

logger = logging.getLogger(__name__)

SENDABLE_TYPES = {'text', 'image'}


def _other_user_id(user_id: int, other_id, missing) -> int:
    other_id = parse_id(other_id, missing=missing)
    if other_id == user_id:
        raise SelfTargetError('ID must belong to other user.')
    return other_id


async def send_message(sender_id: int, target_id, message_type: Optional[str], content: Optional[str],
                       image: Optional[ImageUpload], store: ImageStore, limits: UploadLimits) -> None:
    target_id = _other_user_id(sender_id, target_id, FriendNotFoundError('Friend not found.'))

    async with AsyncSessionLocal() as session:
        async with session.begin():
            if not await are_friends(session, sender_id, target_id):
                raise FriendNotFoundError('Friend not found.')

            if message_type not in SENDABLE_TYPES:
                raise ValidationError('Unknown message type.')

            image_key = None
            if message_type == 'text':
                content = (content or '').strip()
                if not content:
                    raise ValidationError('Content must be at least 1 character long.')
            else:
                if image is None or not limits.accepts(image.content_type, image.size):
                    raise ValidationError('Image must be provided.')
                image_key = generate_message_image_key()
                content = await store.upload_image(image_key, image.data, image.content_type)

            m = await create_message(session, sender_id, target_id, MessageType(message_type.upper()),
                                     content, image_key)

    MESSAGES_SENT.labels(type=message_type).inc()
    logger.info({'msg': 'message_sent', 'message_id': m.id, 'from_id': sender_id, 'to_id': target_id,
                 'type': message_type})


async def get_conversation(user_id: int, other_id, store: ImageStore) -> List[MessageOut]:
    """Every message exchanged with ``other_id``, oldest first"""
    other_id = _other_user_id(user_id, other_id, NotFoundError('No messages found.'))

    async with AsyncSessionLocal() as session:
        messages = await list_dialog(session, user_id, other_id)
        if not messages:
            raise NotFoundError('No messages found.')
        other = await get_profile(session, other_id)

    # one URL lookup for the whole conversation
    other_picture = picture_url(store, other_id, other is None or other.default_picture)

    return [
        MessageOut(
            id=m.id,
            content=m.content,
            type=m.type.value.lower(),
            me=m.from_id == user_id,
            date_sent=m.date_sent,
            picture=None if m.from_id == user_id else other_picture,
        )
        for m in messages
    ]


async def list_conversations(user_id: int, store: ImageStore) -> List[ConversationOut]:
    """Latest message with every counterpart, most recent conversation first"""
    async with AsyncSessionLocal() as session:
        rows = await latest_messages(session, user_id)

    conversations = []
    for m, profile in rows:
        conversations.append(ConversationOut(
            id=profile.user_id,
            display_name=profile.display_name,
            picture=picture_url(store, profile.user_id, profile.default_picture),
            message=LatestMessageOut(
                id=m.id,
                content=m.content,
                type=m.type.value.lower(),
                me=m.from_id == user_id,
                date_sent=m.date_sent,
            ),
        ))
    return conversations


async def delete_message(message_id, store: ImageStore) -> None:
    """Soft delete a message; the row stays with empty content.

    Any authenticated user may delete any message id.
    """
    message_id = parse_id(message_id, missing=NotFoundError('Message not found.'))

    async with AsyncSessionLocal() as session:
        async with session.begin():
            message = await get_message(session, message_id)
            if message is None or message.type == MessageType.DELETED:
                raise NotFoundError('Message not found.')

            if message.type == MessageType.IMAGE:
                await store.delete_image(message.image_key)

            await soft_delete_message(session, message)

    MESSAGES_DELETED.inc()
    logger.info({'msg': 'message_deleted', 'message_id': message_id})
