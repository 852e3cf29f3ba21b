from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker

from ..config import get_settings

DATABASE_URL = get_settings().database_url

engine = create_async_engine(DATABASE_URL, future=True, echo=False)
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
Base = declarative_base()

# Import models to register tables
from .users import User  # noqa: F401,E402
from .profiles import Profile  # noqa: F401,E402
from .friendships import Friendship, Friend  # noqa: F401,E402
from .friend_requests import FriendRequest  # noqa: F401,E402
from .messages import Message, MessageType  # noqa: F401,E402
