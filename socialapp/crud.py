from typing import List, Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy import select, update, or_, and_, case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from .models.users import User
from .models.profiles import Profile
from .models.friendships import Friendship, Friend
from .models.friend_requests import FriendRequest, REQUEST_PENDING, REQUEST_ACCEPTED
from .models.messages import Message, MessageType

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')

# users & profiles
async def create_user(session: AsyncSession, username: str, password: str, display_name: str) -> User:
    user = User(username=username, hashed_password=pwd_ctx.hash(password))
    session.add(user)
    await session.flush()
    session.add(Profile(user_id=user.id, display_name=display_name, bio='', default_picture=True))
    await session.flush()
    return user

async def authenticate_user(session: AsyncSession, username: str, password: str) -> Optional[User]:
    q = await session.execute(select(User).where(User.username == username))
    user = q.scalars().first()
    if not user or not pwd_ctx.verify(password, user.hashed_password):
        return None
    return user

async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    q = await session.execute(select(User).where(User.id == user_id))
    return q.scalars().first()

async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    q = await session.execute(select(User).where(User.username == username))
    return q.scalars().first()

async def get_profile(session: AsyncSession, user_id: int) -> Optional[Profile]:
    q = await session.execute(select(Profile).where(Profile.user_id == user_id))
    return q.scalars().first()

async def get_profile_by_display_name(session: AsyncSession, display_name: str) -> Optional[Profile]:
    q = await session.execute(select(Profile).where(Profile.display_name == display_name))
    return q.scalars().first()

async def update_profile_info(session: AsyncSession, user_id: int, display_name: str, bio: str) -> None:
    await session.execute(
        update(Profile).where(Profile.user_id == user_id).values(display_name=display_name, bio=bio)
    )

async def set_default_picture(session: AsyncSession, user_id: int, default_picture: bool) -> None:
    """Flip the picture flag; the UPDATE is executed immediately, not deferred to flush"""
    await session.execute(
        update(Profile).where(Profile.user_id == user_id).values(default_picture=default_picture)
    )

# friendships
def _friend_ids(user_id: int):
    """Select ids of every user sharing a friendship with ``user_id``"""
    mine = aliased(Friend)
    other = aliased(Friend)
    return (
        select(other.user_id)
        .join(mine, mine.friendship_id == other.friendship_id)
        .where(mine.user_id == user_id, other.user_id != user_id)
    )

async def are_friends(session: AsyncSession, user_a: int, user_b: int) -> bool:
    mine = aliased(Friend)
    theirs = aliased(Friend)
    q = await session.execute(
        select(mine.friendship_id)
        .join(theirs, theirs.friendship_id == mine.friendship_id)
        .where(mine.user_id == user_a, theirs.user_id == user_b, theirs.id != mine.id)
        .limit(1)
    )
    return q.first() is not None

async def get_mutuals(session: AsyncSession, user_a: int, user_b: int) -> List[Profile]:
    """Profiles of every user who is a friend of both ``user_a`` and ``user_b``"""
    q = await session.execute(
        select(Profile)
        .where(Profile.user_id.in_(_friend_ids(user_a)), Profile.user_id.in_(_friend_ids(user_b)))
        .order_by(Profile.user_id)
    )
    return q.scalars().all()

async def create_friendship(session: AsyncSession, user_a: int, user_b: int) -> Friendship:
    friendship = Friendship()
    session.add(friendship)
    await session.flush()
    session.add_all([
        Friend(friendship_id=friendship.id, user_id=user_a),
        Friend(friendship_id=friendship.id, user_id=user_b),
    ])
    await session.flush()
    return friendship

# friend requests
async def get_pending_request(session: AsyncSession, from_user: int, to_user: int) -> Optional[FriendRequest]:
    q = await session.execute(
        select(FriendRequest).where(
            FriendRequest.from_user == from_user,
            FriendRequest.to_user == to_user,
            FriendRequest.status == REQUEST_PENDING,
        )
    )
    return q.scalars().first()

async def create_friend_request(session: AsyncSession, from_user: int, to_user: int) -> FriendRequest:
    fr = FriendRequest(from_user=from_user, to_user=to_user, status=REQUEST_PENDING)
    session.add(fr)
    await session.flush()
    return fr

async def accept_friend_request(session: AsyncSession, fr: FriendRequest) -> Friendship:
    fr.status = REQUEST_ACCEPTED
    await session.flush()
    return await create_friendship(session, fr.from_user, fr.to_user)

async def list_incoming_requests(session: AsyncSession, user_id: int) -> List[Tuple[FriendRequest, Profile]]:
    q = await session.execute(
        select(FriendRequest, Profile)
        .join(Profile, Profile.user_id == FriendRequest.from_user)
        .where(FriendRequest.to_user == user_id, FriendRequest.status == REQUEST_PENDING)
        .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
    )
    return q.all()

# messaging
async def create_message(session: AsyncSession, from_id: int, to_id: int,
                         message_type: MessageType, content: str, image_key: Optional[str] = None) -> Message:
    m = Message(from_id=from_id, to_id=to_id, type=message_type, content=content, image_key=image_key)
    session.add(m)
    await session.flush()
    return m

def _between(user_id: int, peer_id: int):
    return or_(
        and_(Message.from_id == user_id, Message.to_id == peer_id),
        and_(Message.from_id == peer_id, Message.to_id == user_id),
    )

async def list_dialog(session: AsyncSession, user_id: int, peer_id: int) -> List[Message]:
    q = await session.execute(
        select(Message).where(_between(user_id, peer_id)).order_by(Message.date_sent.asc(), Message.id.asc())
    )
    return q.scalars().all()

async def latest_messages(session: AsyncSession, user_id: int) -> List[Tuple[Message, Profile]]:
    """Most recent message exchanged with each counterpart, newest first"""
    counterpart = case((Message.from_id == user_id, Message.to_id), else_=Message.from_id)
    ranked = (
        select(
            Message.id.label('message_id'),
            counterpart.label('counterpart_id'),
            func.row_number().over(
                partition_by=counterpart,
                order_by=(Message.date_sent.desc(), Message.id.desc()),
            ).label('position'),
        )
        .where(or_(Message.from_id == user_id, Message.to_id == user_id))
        .subquery()
    )
    q = await session.execute(
        select(Message, Profile)
        .join(ranked, ranked.c.message_id == Message.id)
        .join(Profile, Profile.user_id == ranked.c.counterpart_id)
        .where(ranked.c.position == 1)
        .order_by(Message.date_sent.desc(), Message.id.desc())
    )
    return q.all()

async def get_message(session: AsyncSession, message_id: int) -> Optional[Message]:
    q = await session.execute(select(Message).where(Message.id == message_id))
    return q.scalars().first()

async def soft_delete_message(session: AsyncSession, message: Message) -> None:
    message.content = ''
    message.image_key = None
    message.type = MessageType.DELETED
    await session.flush()
