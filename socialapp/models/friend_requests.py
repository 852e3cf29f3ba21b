from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from . import Base

REQUEST_PENDING = 'pending'
REQUEST_ACCEPTED = 'accepted'

class FriendRequest(Base):
    __tablename__ = 'friend_requests'
    id = Column(Integer, primary_key=True)
    from_user = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    to_user = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    status = Column(String, nullable=False, default=REQUEST_PENDING)  # pending, accepted
    created_at = Column(DateTime(timezone=True), server_default=func.now())
