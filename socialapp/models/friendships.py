from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, func
from . import Base

class Friendship(Base):
    __tablename__ = 'friendships'
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class Friend(Base):
    """One side of a friendship; every friendship groups exactly two rows"""
    __tablename__ = 'friends'
    id = Column(Integer, primary_key=True)
    friendship_id = Column(Integer, ForeignKey('friendships.id', ondelete='CASCADE'), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    __table_args__ = (
        UniqueConstraint('friendship_id', 'user_id', name='uix_friendship_user'),
    )
