import logging

from sqlalchemy.exc import IntegrityError

from ..auth import create_access_token
from ..crud import create_user, authenticate_user, get_user_by_username, get_profile_by_display_name
from ..errors import ValidationError, ConflictError
from ..models import AsyncSessionLocal
from ..models.profiles import DISPLAY_NAME_MAX_LENGTH

logger = logging.getLogger(__name__)


async def register(username: str, password: str, display_name: str):
    """Create a user together with its profile"""
    username = username.strip()
    display_name = display_name.strip()
    if not username or not password:
        raise ValidationError('Username and password are required.')
    if not 1 <= len(display_name) <= DISPLAY_NAME_MAX_LENGTH:
        raise ValidationError('Display name must be between 1 and 20 characters long.')

    async with AsyncSessionLocal() as session:
        try:
            async with session.begin():
                if await get_user_by_username(session, username):
                    raise ConflictError('Username already exists.')
                if await get_profile_by_display_name(session, display_name):
                    raise ConflictError('Display name already exists.')
                user = await create_user(session, username, password, display_name)
        except IntegrityError as e:
            # a concurrent registration won the race for one of the unique columns
            if 'display_name' in str(e.orig):
                raise ConflictError('Display name already exists.')
            raise ConflictError('Username already exists.')

    logger.info({'msg': 'user_registered', 'user_id': user.id})
    return user


async def login(username: str, password: str):
    async with AsyncSessionLocal() as session:
        user = await authenticate_user(session, username, password)
    if not user:
        return None
    return {'access_token': create_access_token({'id': user.id, 'username': user.username}),
            'token_type': 'bearer'}
