"""
Profile Management
Display name and bio editing, profile picture swaps and viewer scoped profile views
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from ..config import UploadLimits
from ..crud import (
    get_profile as fetch_profile,
    get_profile_by_display_name,
    update_profile_info,
    set_default_picture,
    are_friends,
    get_mutuals,
)
from ..errors import ValidationError, ConflictError, NotFoundError, parse_id
from ..metrics import PICTURE_CHANGES
from ..models import AsyncSessionLocal
from ..models.profiles import DISPLAY_NAME_MAX_LENGTH, BIO_MAX_LENGTH
from ..schemas.profiles import ProfileOut, MutualFriendOut
from ..storage import ImageStore, ImageUpload, picture_url, profile_picture_key

logger = logging.getLogger(__name__)


async def update_profile(user_id: int, display_name: Optional[str], bio: Optional[str]) -> None:
    """Update the acting user's own display name and bio"""
    display_name = (display_name or '').strip()
    bio = (bio or '').strip()

    if not 1 <= len(display_name) <= DISPLAY_NAME_MAX_LENGTH:
        raise ValidationError('Display name must be between 1 and 20 characters long.')

    async with AsyncSessionLocal() as session:
        try:
            async with session.begin():
                owner = await get_profile_by_display_name(session, display_name)
                if owner and owner.user_id != user_id:
                    raise ConflictError('Display name already exists.')
                if len(bio) > BIO_MAX_LENGTH:
                    raise ValidationError('Bio must not exceed 190 characters.')

                await update_profile_info(session, user_id, display_name, bio)
        except IntegrityError:
            # another profile took the name between the check and the update
            raise ConflictError('Display name already exists.')

    logger.info({'msg': 'profile_updated', 'user_id': user_id})


async def update_picture(user_id: int, image: Optional[ImageUpload], store: ImageStore,
                         limits: UploadLimits) -> None:
    """Replace the user's picture with an uploaded image.

    The flag is written before the upload inside one transaction, so a failed
    upload rolls the flag back. A successful upload is not undone if the commit
    fails afterwards.
    """
    if image is None or not limits.accepts(image.content_type, image.size):
        raise ValidationError('Invalid file value.')

    key = profile_picture_key(user_id)
    async with AsyncSessionLocal() as session:
        async with session.begin():
            await set_default_picture(session, user_id, False)
            await store.upload_image(key, image.data, image.content_type)

    PICTURE_CHANGES.labels(action='upload').inc()
    logger.info({'msg': 'profile_picture_updated', 'user_id': user_id, 'key': key, 'size': image.size})


async def delete_picture(user_id: int, store: ImageStore) -> None:
    """Go back to the default picture and remove the stored custom image"""
    key = profile_picture_key(user_id)
    async with AsyncSessionLocal() as session:
        async with session.begin():
            profile = await fetch_profile(session, user_id)
            if profile is None:
                raise NotFoundError('User not found.')
            if profile.default_picture:
                raise ConflictError('Profile picture is already the default.')

            await set_default_picture(session, user_id, True)
            await store.delete_image(key)

    PICTURE_CHANGES.labels(action='delete').inc()
    logger.info({'msg': 'profile_picture_deleted', 'user_id': user_id, 'key': key})


async def get_profile(viewer_id: int, target_id, store: ImageStore) -> ProfileOut:
    """Profile of ``target_id`` as seen by ``viewer_id``.

    Strangers also get the friends they have in common with the target;
    ``mutual_friends`` stays unset for the target themselves and for friends.
    """
    target_id = parse_id(target_id, error=NotFoundError, missing=NotFoundError('User not found.'))

    async with AsyncSessionLocal() as session:
        profile = await fetch_profile(session, target_id)
        if profile is None:
            raise NotFoundError('User not found.')

        out = ProfileOut(
            display_name=profile.display_name,
            bio=profile.bio,
            picture=picture_url(store, target_id, profile.default_picture),
        )

        if viewer_id != target_id and not await are_friends(session, viewer_id, target_id):
            mutuals = await get_mutuals(session, viewer_id, target_id)
            out.mutual_friends = [
                MutualFriendOut(id=m.user_id, display_name=m.display_name) for m in mutuals
            ]

    return out
